"""
Supplier Models
Supplier entity, its typed columns and the Active/Archived status mapping.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid

from .field_types import FieldKind, coerce_value, normalize_for_storage, values_equal


class SupplierField(str, Enum):
    """Named supplier columns. Values match the Supplier attribute names."""
    SUPPLIER_ID = "supplier_id"
    NAME = "name"
    WEBSITE = "website"
    EMAIL = "email"
    CONTACT_PHONE = "contact_phone"
    ADDRESS = "address"
    NOTES = "notes"
    IS_ARCHIVED = "is_archived"
    CREATED_AT = "created_at"

    @property
    def kind(self) -> FieldKind:
        if self == SupplierField.IS_ARCHIVED:
            return FieldKind.BOOLEAN
        if self == SupplierField.CREATED_AT:
            return FieldKind.DATE
        return FieldKind.TEXT

    @property
    def editable(self) -> bool:
        return self not in (SupplierField.SUPPLIER_ID, SupplierField.CREATED_AT)

    @property
    def header(self) -> str:
        return _HEADERS[self]

    @classmethod
    def parse(cls, field: Any) -> 'SupplierField':
        """Resolve a field from an enum member or its string value."""
        return field if isinstance(field, cls) else cls(str(field))


_HEADERS = {
    SupplierField.SUPPLIER_ID: "Supplier ID",
    SupplierField.NAME: "Name",
    SupplierField.WEBSITE: "Website",
    SupplierField.EMAIL: "Email",
    SupplierField.CONTACT_PHONE: "Phone",
    SupplierField.ADDRESS: "Address",
    SupplierField.NOTES: "Notes",
    SupplierField.IS_ARCHIVED: "Status",
    SupplierField.CREATED_AT: "Created At",
}

# Column order of the spreadsheet-style editor
EDITABLE_COLUMNS: List[SupplierField] = [
    SupplierField.NAME,
    SupplierField.WEBSITE,
    SupplierField.CONTACT_PHONE,
    SupplierField.EMAIL,
    SupplierField.ADDRESS,
    SupplierField.NOTES,
    SupplierField.IS_ARCHIVED,
]

# Column order of the Suppliers sheet
SHEET_COLUMNS: List[SupplierField] = [
    SupplierField.SUPPLIER_ID,
    SupplierField.NAME,
    SupplierField.WEBSITE,
    SupplierField.EMAIL,
    SupplierField.CONTACT_PHONE,
    SupplierField.ADDRESS,
    SupplierField.NOTES,
    SupplierField.IS_ARCHIVED,
    SupplierField.CREATED_AT,
]


class ArchiveStatus(str, Enum):
    """Displayed status choice backed by the is_archived flag."""
    ACTIVE = "Active"
    ARCHIVED = "Archived"

    @classmethod
    def from_flag(cls, is_archived: Optional[bool]) -> 'ArchiveStatus':
        return cls.ARCHIVED if is_archived else cls.ACTIVE

    @classmethod
    def parse(cls, text: str) -> 'ArchiveStatus':
        """Parse a displayed status, case-insensitively."""
        for status in cls:
            if status.value.lower() == str(text).strip().lower():
                return status
        raise ValueError(f"Unknown status: {text!r}")

    @property
    def is_archived(self) -> bool:
        return self == ArchiveStatus.ARCHIVED


@dataclass
class Supplier:
    """Supplier record as stored in the Suppliers sheet."""

    supplier_id: str
    name: str
    website: str = ""
    email: str = ""
    contact_phone: str = ""
    address: str = ""
    notes: str = ""
    is_archived: bool = False
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Post-initialization defaults."""
        if not self.supplier_id:
            self.supplier_id = f"sup_{uuid.uuid4().hex[:8]}"
        if self.created_at is None:
            self.created_at = datetime.now()

    @property
    def status(self) -> ArchiveStatus:
        return ArchiveStatus.from_flag(self.is_archived)

    def get(self, field: SupplierField) -> Any:
        return getattr(self, SupplierField.parse(field).value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Supplier':
        """Create from dictionary."""
        created_at = data.get('created_at')
        if isinstance(created_at, str) and created_at:
            created_at = datetime.fromisoformat(created_at)
        return cls(
            supplier_id=data.get('supplier_id', ''),
            name=data.get('name', ''),
            website=data.get('website') or '',
            email=data.get('email') or '',
            contact_phone=data.get('contact_phone') or '',
            address=data.get('address') or '',
            notes=data.get('notes') or '',
            is_archived=coerce_value(FieldKind.BOOLEAN, data.get('is_archived', False)),
            created_at=created_at or None
        )

    def to_sheet_row(self) -> List[Any]:
        """Values in Suppliers sheet column order."""
        row = []
        for field in SHEET_COLUMNS:
            value = self.get(field)
            if field == SupplierField.CREATED_AT and value is not None:
                row.append(value.isoformat(timespec='seconds'))
            else:
                row.append(normalize_for_storage(field.kind, value))
        return row


def normalize_supplier_field(field: Any, value: Any) -> Any:
    """Storage representation of a single supplier field value."""
    supplier_field = SupplierField.parse(field)
    if supplier_field == SupplierField.IS_ARCHIVED and isinstance(value, str):
        try:
            return ArchiveStatus.parse(value).is_archived
        except ValueError:
            pass
    return normalize_for_storage(supplier_field.kind, value)


def supplier_values_equal(field: Any, left: Any, right: Any) -> bool:
    """Equality used to detect edits that restore the server value."""
    return values_equal(SupplierField.parse(field).kind, left, right)
