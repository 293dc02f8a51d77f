"""
Field Types
Typed field kinds shared by the edit engine and the persistence layer.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional


class FieldKind(Enum):
    """Kinds of values an editable column can hold."""
    TEXT = "text"
    BOOLEAN = "boolean"
    DATE = "date"
    NUMBER = "number"


STORAGE_DATE_FORMAT = "%Y-%m-%d"

_TRUE_STRINGS = {"true", "yes", "y", "1", "archived"}
_FALSE_STRINGS = {"false", "no", "n", "0", "active", ""}


def coerce_value(kind: FieldKind, raw: Any) -> Any:
    """Parse a raw sheet or UI value into the Python type for a field kind.

    Args:
        kind: Kind of the target field.
        raw: Raw value, usually a string from a cell.

    Returns:
        str for TEXT, bool for BOOLEAN, date (or None) for DATE,
        int/float (or None) for NUMBER.

    Raises:
        ValueError: If the value cannot be interpreted as the given kind.
    """
    if kind == FieldKind.TEXT:
        return "" if raw is None else str(raw)

    if kind == FieldKind.BOOLEAN:
        if isinstance(raw, bool):
            return raw
        if raw is None:
            return False
        text = str(raw).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"Not a boolean value: {raw!r}")

    if kind == FieldKind.DATE:
        if raw is None or raw == "":
            return None
        if isinstance(raw, datetime):
            return raw.date()
        if isinstance(raw, date):
            return raw
        text = str(raw).strip()
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return datetime.strptime(text, "%m/%d/%Y").date()

    if kind == FieldKind.NUMBER:
        if raw is None or raw == "":
            return None
        if isinstance(raw, bool):
            raise ValueError(f"Not a number: {raw!r}")
        if isinstance(raw, (int, float)):
            return raw
        text = str(raw).strip().replace(",", "")
        number = float(text)
        return int(number) if number.is_integer() and "." not in text else number

    raise ValueError(f"Unknown field kind: {kind}")


def normalize_for_storage(kind: FieldKind, value: Any) -> Any:
    """Convert an in-memory value to the representation written to storage.

    Dates become YYYY-MM-DD strings, booleans stay booleans, numbers stay
    numeric and empty text becomes an empty string.
    """
    if kind == FieldKind.DATE:
        parsed = coerce_value(FieldKind.DATE, value)
        return parsed.strftime(STORAGE_DATE_FORMAT) if parsed else ""
    if kind == FieldKind.BOOLEAN:
        return coerce_value(FieldKind.BOOLEAN, value)
    if kind == FieldKind.NUMBER:
        return coerce_value(FieldKind.NUMBER, value)
    return "" if value is None else str(value)


def values_equal(kind: FieldKind, left: Any, right: Any) -> bool:
    """Compare two values of a field kind, treating None and "" alike for text."""
    if kind == FieldKind.TEXT:
        return (left or "") == (right or "")
    try:
        return coerce_value(kind, left) == coerce_value(kind, right)
    except (TypeError, ValueError):
        return left == right


def format_for_display(kind: FieldKind, value: Any) -> str:
    """Render a value as cell text."""
    if value is None:
        return ""
    if kind == FieldKind.DATE:
        parsed: Optional[date] = coerce_value(FieldKind.DATE, value)
        return parsed.strftime(STORAGE_DATE_FORMAT) if parsed else ""
    if kind == FieldKind.BOOLEAN:
        return "Yes" if value else "No"
    return str(value)
