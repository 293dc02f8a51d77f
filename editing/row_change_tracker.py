"""
Row Change Tracker
Single source of truth for pending (unsaved) field edits, keyed by row id.
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from config import app_config


_MISSING = object()


@dataclass
class RowChanges:
    """Pending field values for one row."""
    row_id: str
    changes: Dict[str, Any]


def _field_key(field: Any) -> str:
    return field.value if hasattr(field, 'value') else str(field)


class RowChangeTracker:
    """Tracks pending edits per row.

    Every mutator reads and rewrites a row's entry in one synchronous step.
    Entries keep first-edited-first order; an entry that is removed and later
    recreated moves to the end.
    """

    def __init__(self, values_equal: Optional[Callable[[str, Any, Any], bool]] = None):
        """Initialize tracker.

        Args:
            values_equal: Optional comparison (field, a, b) used to detect an
                edit that restores the server value. Defaults to ==.
        """
        self._pending: Dict[str, Dict[str, Any]] = {}
        self._server_values: Dict[str, Dict[str, Any]] = {}
        self._values_equal = values_equal or (lambda _field, a, b: a == b)
        self._listeners: List[Callable[[], None]] = []

    # Listeners

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback fired after every change to the pending map."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback()
            except Exception as e:
                print(f"Error in change tracker listener: {e}")

    # Server state

    def set_server_records(self, records: Mapping[str, Mapping[str, Any]]) -> None:
        """Replace the known server values.

        Pending fields that now equal the server value are dropped, so a
        refetch after a save does not leave stale diffs behind.
        """
        self._server_values = {row_id: dict(values) for row_id, values in records.items()}
        pruned = False
        for row_id in list(self._pending):
            entry = self._pending[row_id]
            server = self._server_values.get(row_id)
            if server is None:
                continue
            kept = {
                key: value for key, value in entry.items()
                if key not in server or not self._values_equal(key, value, server[key])
            }
            if len(kept) != len(entry):
                pruned = True
                if kept:
                    self._pending[row_id] = kept
                else:
                    del self._pending[row_id]
        if pruned:
            self._notify()

    def set_server_record(self, row_id: str, values: Mapping[str, Any]) -> None:
        self._server_values[row_id] = dict(values)

    def get_server_value(self, row_id: str, field: Any, default: Any = None) -> Any:
        return self._server_values.get(row_id, {}).get(_field_key(field), default)

    # Mutators

    def update_row_data(self, row_id: str, field: Any, value: Any,
                        server_value: Any = _MISSING) -> None:
        """Merge a field edit into the row's pending entry.

        Args:
            row_id: Row identifier.
            field: Field name (or enum member whose value is the name).
            value: New value. Replaces any earlier pending value of the field.
            server_value: Explicit server value to compare against. When not
                given, the value from set_server_records is used.
        """
        key = _field_key(field)
        if server_value is _MISSING:
            server_value = self._server_values.get(row_id, {}).get(key, _MISSING)

        entry = dict(self._pending.get(row_id, {}))
        if server_value is not _MISSING and self._values_equal(key, value, server_value):
            entry.pop(key, None)
        else:
            entry[key] = value

        if entry:
            self._pending[row_id] = entry
        else:
            self._pending.pop(row_id, None)

        if app_config.verbose_logging:
            print(f"✏️ {row_id}.{key} -> {value!r} ({len(entry)} pending field(s))")
        self._notify()

    def undo_row_changes(self, row_id: str) -> None:
        """Drop every pending edit for a row."""
        if self._pending.pop(row_id, None) is not None:
            self._notify()

    def acknowledge_saved(self, row_id: str, submitted: Mapping[str, Any]) -> None:
        """Record that the submitted values were persisted.

        The submitted values become the server values. Pending fields still
        holding the submitted value are cleared; fields edited again while
        the save was in flight stay pending.
        """
        server = self._server_values.setdefault(row_id, {})
        server.update(submitted)

        entry = self._pending.get(row_id)
        if entry is None:
            return
        remaining = {
            key: value for key, value in entry.items()
            if key not in submitted or not self._values_equal(key, value, submitted[key])
        }
        if remaining:
            self._pending[row_id] = remaining
        else:
            del self._pending[row_id]
        self._notify()

    def clear_all(self) -> None:
        if self._pending:
            self._pending.clear()
            self._notify()

    # Accessors

    def get_row_data(self, row_id: str, fallback_record: Any) -> Any:
        """Effective record: fallback_record with pending overrides applied.

        Works with mappings (returns a new dict) and dataclasses (returns a
        copy via dataclasses.replace).
        """
        changes = self._pending.get(row_id)
        if not changes:
            return fallback_record
        if dataclasses.is_dataclass(fallback_record) and not isinstance(fallback_record, type):
            return dataclasses.replace(fallback_record, **changes)
        merged = dict(fallback_record)
        merged.update(changes)
        return merged

    def get_row_changes(self, row_id: str) -> Dict[str, Any]:
        return dict(self._pending.get(row_id, {}))

    def has_row_changes(self, row_id: str) -> bool:
        return row_id in self._pending

    def has_any_changes(self) -> bool:
        return bool(self._pending)

    @property
    def changed_rows_count(self) -> int:
        return len(self._pending)

    def changed_row_ids(self) -> List[str]:
        return list(self._pending)

    def get_all_changes(self) -> List[RowChanges]:
        """All pending rows, first-edited-first."""
        return [RowChanges(row_id, dict(changes)) for row_id, changes in self._pending.items()]
