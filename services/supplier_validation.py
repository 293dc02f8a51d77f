"""
Supplier Validation
Checks and formats supplier edits before they are submitted.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable

from models.field_types import FieldKind
from models.supplier_model import Supplier, SupplierField


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass
class ValidationResult:
    """Field errors plus cleaned values to submit in place of the raw ones."""
    errors: Dict[str, str] = field(default_factory=dict)
    cleaned: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def format_phone(phone: str) -> str:
    """Format 10-digit (or 1 + 10-digit) numbers as (555) 123-4567."""
    digits = re.sub(r"\D", "", phone)
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return phone.strip()


def format_website(website: str) -> str:
    website = website.strip()
    if website and not re.match(r"^https?://", website, re.IGNORECASE):
        return f"https://{website}"
    return website


def clean_email(email: str) -> str:
    return email.strip().lower()


class SupplierValidator:
    """Validates pending supplier changes against the loaded suppliers."""

    def __init__(self, get_suppliers: Callable[[], Iterable[Supplier]]):
        """Initialize validator.

        Args:
            get_suppliers: Returns the current suppliers, used for the
                duplicate-name check.
        """
        self.get_suppliers = get_suppliers

    def validate_changes(self, supplier_id: str, changes: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        for key, value in changes.items():
            supplier_field = SupplierField.parse(key)
            if supplier_field.kind != FieldKind.TEXT:
                continue
            text = "" if value is None else str(value)

            if supplier_field == SupplierField.NAME:
                name = text.strip()
                if not name:
                    result.errors[key] = "Name is required"
                elif self._is_duplicate_name(supplier_id, name):
                    result.errors[key] = f"A supplier named '{name}' already exists"
                else:
                    result.cleaned[key] = name
            elif supplier_field == SupplierField.EMAIL:
                email = clean_email(text)
                if email and not EMAIL_PATTERN.match(email):
                    result.errors[key] = f"Invalid email address: {text.strip()}"
                else:
                    result.cleaned[key] = email
            elif supplier_field == SupplierField.WEBSITE:
                result.cleaned[key] = format_website(text)
            elif supplier_field == SupplierField.CONTACT_PHONE:
                result.cleaned[key] = format_phone(text)
            else:
                result.cleaned[key] = text.strip()

        return result

    def validate_new_supplier(self, values: Dict[str, Any]) -> ValidationResult:
        """Validate the fields of a supplier that does not exist yet.

        The name is always checked, even when it was left out of values.
        """
        fields = {SupplierField.NAME.value: "", **values}
        return self.validate_changes("", fields)

    def _is_duplicate_name(self, supplier_id: str, name: str) -> bool:
        lowered = name.lower()
        return any(
            supplier.supplier_id != supplier_id and supplier.name.strip().lower() == lowered
            for supplier in self.get_suppliers()
        )
