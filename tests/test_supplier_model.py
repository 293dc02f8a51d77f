"""Tests for supplier models and field coercion."""

from datetime import date, datetime

import pytest

from models.field_types import (
    FieldKind, coerce_value, format_for_display, normalize_for_storage, values_equal
)
from models.supplier_model import (
    EDITABLE_COLUMNS, ArchiveStatus, Supplier, SupplierField,
    normalize_supplier_field, supplier_values_equal
)


# ============================================================================
# Field Coercion
# ============================================================================


class TestCoerceValue:
    """Tests for parsing raw values per field kind."""

    @pytest.mark.parametrize("raw, expected", [
        ("TRUE", True), ("yes", True), ("Archived", True), (True, True),
        ("FALSE", False), ("", False), ("Active", False), (None, False),
    ])
    def test_boolean(self, raw, expected) -> None:
        assert coerce_value(FieldKind.BOOLEAN, raw) is expected

    def test_boolean_rejects_unknown_text(self) -> None:
        with pytest.raises(ValueError):
            coerce_value(FieldKind.BOOLEAN, "maybe")

    def test_date_formats(self) -> None:
        assert coerce_value(FieldKind.DATE, "2024-03-05") == date(2024, 3, 5)
        assert coerce_value(FieldKind.DATE, "03/05/2024") == date(2024, 3, 5)
        assert coerce_value(FieldKind.DATE, datetime(2024, 3, 5, 10, 0)) == date(2024, 3, 5)
        assert coerce_value(FieldKind.DATE, "") is None

    def test_number(self) -> None:
        assert coerce_value(FieldKind.NUMBER, "1,200") == 1200
        assert coerce_value(FieldKind.NUMBER, "12.50") == 12.5
        assert isinstance(coerce_value(FieldKind.NUMBER, "3.0"), float)
        assert coerce_value(FieldKind.NUMBER, "") is None
        with pytest.raises(ValueError):
            coerce_value(FieldKind.NUMBER, True)

    def test_text(self) -> None:
        assert coerce_value(FieldKind.TEXT, None) == ""
        assert coerce_value(FieldKind.TEXT, 42) == "42"


class TestStorageAndDisplay:
    """Tests for storage normalization, equality and display."""

    def test_normalize_for_storage(self) -> None:
        assert normalize_for_storage(FieldKind.DATE, date(2024, 3, 5)) == "2024-03-05"
        assert normalize_for_storage(FieldKind.DATE, None) == ""
        assert normalize_for_storage(FieldKind.BOOLEAN, "yes") is True
        assert normalize_for_storage(FieldKind.TEXT, None) == ""

    def test_values_equal(self) -> None:
        assert values_equal(FieldKind.TEXT, None, "")
        assert values_equal(FieldKind.BOOLEAN, "Archived", True)
        assert values_equal(FieldKind.DATE, "2024-03-05", "03/05/2024")
        assert not values_equal(FieldKind.TEXT, "a", "b")

    def test_format_for_display(self) -> None:
        assert format_for_display(FieldKind.BOOLEAN, True) == "Yes"
        assert format_for_display(FieldKind.DATE, "03/05/2024") == "2024-03-05"
        assert format_for_display(FieldKind.TEXT, None) == ""


# ============================================================================
# Supplier Model
# ============================================================================


class TestArchiveStatus:
    """Tests for the Active/Archived status mapping."""

    def test_from_flag(self) -> None:
        assert ArchiveStatus.from_flag(True) == ArchiveStatus.ARCHIVED
        assert ArchiveStatus.from_flag(False) == ArchiveStatus.ACTIVE
        assert ArchiveStatus.from_flag(None) == ArchiveStatus.ACTIVE

    def test_parse_is_case_insensitive(self) -> None:
        assert ArchiveStatus.parse(" archived ").is_archived
        assert not ArchiveStatus.parse("ACTIVE").is_archived

    def test_parse_rejects_unknown(self) -> None:
        with pytest.raises(ValueError):
            ArchiveStatus.parse("Deleted")


class TestSupplierField:
    """Tests for supplier column metadata."""

    def test_kinds(self) -> None:
        assert SupplierField.IS_ARCHIVED.kind == FieldKind.BOOLEAN
        assert SupplierField.CREATED_AT.kind == FieldKind.DATE
        assert SupplierField.NAME.kind == FieldKind.TEXT

    def test_editable_columns_exclude_identity_fields(self) -> None:
        assert SupplierField.SUPPLIER_ID not in EDITABLE_COLUMNS
        assert SupplierField.CREATED_AT not in EDITABLE_COLUMNS
        assert all(field.editable for field in EDITABLE_COLUMNS)

    def test_parse(self) -> None:
        assert SupplierField.parse("email") is SupplierField.EMAIL
        assert SupplierField.parse(SupplierField.NOTES) is SupplierField.NOTES
        with pytest.raises(ValueError):
            SupplierField.parse("fax")


class TestSupplier:
    """Tests for the Supplier dataclass."""

    def test_defaults(self) -> None:
        supplier = Supplier(supplier_id="", name="New Vendor")

        assert supplier.supplier_id.startswith("sup_")
        assert len(supplier.supplier_id) == 12
        assert isinstance(supplier.created_at, datetime)
        assert supplier.status == ArchiveStatus.ACTIVE

    def test_dict_round_trip_from_strings(self) -> None:
        supplier = Supplier.from_dict({
            'supplier_id': "sup_x", 'name': "X", 'is_archived': "Archived",
            'created_at': "2024-01-15T09:30:00", 'notes': None
        })

        assert supplier.is_archived is True
        assert supplier.created_at == datetime(2024, 1, 15, 9, 30)
        assert supplier.notes == ""

    def test_to_sheet_row(self, sample_suppliers) -> None:
        row = sample_suppliers[0].to_sheet_row()

        assert row == [
            "sup_acme", "Acme Corp", "", "sales@acme.com", "(555) 123-4567",
            "", "", False, "2024-01-15T09:30:00"
        ]


class TestSupplierFieldHelpers:
    """Tests for field-aware normalization and equality."""

    def test_status_text_normalized_to_flag(self) -> None:
        assert normalize_supplier_field("is_archived", "Archived") is True
        assert normalize_supplier_field(SupplierField.IS_ARCHIVED, "active") is False
        assert normalize_supplier_field("is_archived", False) is False

    def test_text_normalized(self) -> None:
        assert normalize_supplier_field("notes", None) == ""

    def test_values_equal_by_field(self) -> None:
        assert supplier_values_equal("is_archived", "Active", False)
        assert supplier_values_equal("website", None, "")
        assert not supplier_values_equal("name", "Acme", "acme")
