"""
Edit Session
Per-table facade over the edit engine. Constructed when a table is built
and closed when it is torn down.
"""

import dataclasses
from typing import Any, Callable, Dict, Iterable, List, Optional

from config import app_config
from models.field_types import format_for_display
from models.supplier_model import (
    EDITABLE_COLUMNS, SupplierField, ArchiveStatus,
    normalize_supplier_field, supplier_values_equal
)
from .batch_save import AutoSaveBackstop, BatchSaveCoordinator, SaveOutcome
from .edit_mode import EditMode, EditModeController, EditModeError
from .editable_value import EditableValue
from .row_change_tracker import RowChanges, RowChangeTracker
from .selection import RowSelection
from .spreadsheet_navigator import SpreadsheetNavigator


class EditSession:
    """Owns the tracker, mode controller, save coordinator, auto-save
    backstop, navigator and selection of one table instance."""

    def __init__(self,
                 persistence: Any,
                 columns: List[str],
                 get_record_id: Callable[[Any], str],
                 values_equal: Optional[Callable[[str, Any, Any], bool]] = None,
                 normalizer: Optional[Callable[[str, Any], Any]] = None,
                 validator: Optional[Any] = None,
                 display_formatter: Optional[Callable[[str, Any], str]] = None,
                 on_exit_requested: Optional[Callable[[], None]] = None,
                 on_auto_save: Optional[Callable[[SaveOutcome], None]] = None):
        """Initialize session.

        Args:
            persistence: Async persistence collaborator (see BatchSaveCoordinator).
            columns: Field names of the navigable columns, in display order.
            get_record_id: Extracts the row id from a record.
            values_equal: Field-aware comparison for no-op edit elimination.
            normalizer: Field-aware conversion to storage values.
            validator: Optional validation collaborator.
            display_formatter: (field, value) -> cell text.
            on_exit_requested: Called when navigation asks to leave edit mode.
            on_auto_save: Called with the outcome of each backstop save.
        """
        self.columns = [getattr(column, 'value', column) for column in columns]
        self.get_record_id = get_record_id
        self.display_formatter = display_formatter
        self.on_exit_requested = on_exit_requested

        self.tracker = RowChangeTracker(values_equal=values_equal)
        self.controller = EditModeController(self.tracker)
        self.coordinator = BatchSaveCoordinator(
            self.tracker, self.controller, persistence,
            normalizer=normalizer, validator=validator,
            on_saved=self._apply_saved
        )
        self.backstop = AutoSaveBackstop(self.coordinator, on_result=on_auto_save)
        self.selection = RowSelection()

        self._records: Dict[str, Any] = {}
        self._visible_row_ids: List[str] = []
        self._editors: Dict[tuple, EditableValue] = {}
        self._closed = False

        self.navigator = SpreadsheetNavigator(
            column_count=len(self.columns),
            get_row_id=lambda index: self._visible_row_ids[index],
            on_exit_spreadsheet_mode=self._request_exit,
            on_commit_field=self._commit_field
        )

        self.tracker.add_listener(self._on_changes)
        self.controller.add_listener(self._on_mode_changed)

    # Core-to-UI state

    @property
    def edit_mode(self) -> EditMode:
        return self.controller.edit_mode

    @property
    def editing_row_id(self) -> Optional[str]:
        return self.controller.editing_row_id

    @property
    def has_unsaved_changes(self) -> bool:
        return self.controller.has_unsaved_changes

    def get_row_data(self, row_id: str, fallback: Any = None) -> Any:
        if fallback is None:
            fallback = self._records.get(row_id)
        return self.tracker.get_row_data(row_id, fallback)

    def has_row_changes(self, row_id: str) -> bool:
        return self.tracker.has_row_changes(row_id)

    def get_all_changes(self) -> List[RowChanges]:
        return self.tracker.get_all_changes()

    def is_row_editable(self, row_id: str) -> bool:
        return self.controller.is_row_editable(row_id)

    # Records

    def load_records(self, records: Iterable[Any]) -> None:
        """Replace the server records (initial load or refetch)."""
        self._records = {self.get_record_id(record): record for record in records}
        self.tracker.set_server_records({
            row_id: self._record_values(record) for row_id, record in self._records.items()
        })
        for (row_id, field), editor in self._editors.items():
            record = self._records.get(row_id)
            if record is not None:
                editor.sync_server_value(self._record_values(record).get(field))
        self.selection.retain(self._records)

    def get_record(self, row_id: str) -> Optional[Any]:
        return self._records.get(row_id)

    def set_visible_rows(self, row_ids: List[str]) -> None:
        """Current visible ordering after filtering, sorting and paging."""
        self._visible_row_ids = list(row_ids)
        self.navigator.set_row_count(len(self._visible_row_ids))

    def row_id_at(self, index: int) -> str:
        return self._visible_row_ids[index]

    # Actions

    def enter_all_edit(self) -> None:
        self.controller.enter_all_edit()

    def toggle_single_edit(self, row_id: str, discard_confirmed: bool = False) -> bool:
        previous = self.editing_row_id
        toggled = self.controller.toggle_single_edit(row_id, discard_confirmed)
        if toggled and previous is not None:
            self._revert_discarded_editors(previous)
        return toggled

    def exit_edit(self) -> None:
        previous = self.editing_row_id
        self.controller.exit_edit()
        self._revert_discarded_editors(previous)

    def update_row_data(self, row_id: str, field: Any, value: Any) -> None:
        """Record an edit. Only rows editable in the current mode accept edits."""
        if not self.controller.is_row_editable(row_id):
            raise EditModeError(f"Row {row_id} is not editable in {self.edit_mode.value} mode")
        self.tracker.update_row_data(row_id, field, value)

    def undo_row_changes(self, row_id: str) -> None:
        self.tracker.undo_row_changes(row_id)
        for (editor_row, _field), editor in self._editors.items():
            if editor_row == row_id:
                editor.revert_value()

    async def save_row(self, row_id: str) -> SaveOutcome:
        return await self.coordinator.save_row(row_id)

    async def save_all(self) -> SaveOutcome:
        return await self.coordinator.save_all()

    # Field editors

    def create_field_editor(self, row_id: str, field: Any) -> EditableValue:
        """EditableValue for one cell, wired into the tracker.

        In quick edit the editor auto-saves by merging its value into the
        row's pending entry and saving the row.
        """
        key = getattr(field, 'value', field)
        existing = self._editors.get((row_id, key))
        if existing is not None:
            return existing

        server_value = self.tracker.get_server_value(row_id, key)
        pending = self.tracker.get_row_changes(row_id)
        formatter = None
        if self.display_formatter:
            formatter = lambda value: self.display_formatter(key, value)

        async def save(value: Any) -> bool:
            self.tracker.update_row_data(row_id, key, value)
            outcome = await self.coordinator.save_row(row_id)
            return outcome.success

        def merge(value: Any) -> None:
            if self.controller.is_row_editable(row_id):
                self.tracker.update_row_data(row_id, key, value)

        editor = EditableValue(
            server_value,
            on_save=save,
            edit_mode=self.edit_mode,
            on_value_changed=merge,
            display_formatter=formatter
        )
        if key in pending:
            editor.update_value(pending[key], skip_auto_save=True)
        self._editors[(row_id, key)] = editor
        return editor

    def release_field_editor(self, row_id: str, field: Any) -> None:
        editor = self._editors.pop((row_id, getattr(field, 'value', field)), None)
        if editor is not None:
            editor.close()

    def get_field_editor(self, row_id: str, field: Any) -> Optional[EditableValue]:
        return self._editors.get((row_id, getattr(field, 'value', field)))

    def close(self) -> None:
        """Tear down timers and editors."""
        self._closed = True
        self.backstop.stop()
        for editor in self._editors.values():
            editor.close()
        self._editors.clear()

    # Internal

    def _record_values(self, record: Any) -> Dict[str, Any]:
        if dataclasses.is_dataclass(record):
            return {f.name: getattr(record, f.name) for f in dataclasses.fields(record)}
        return dict(record)

    def _apply_saved(self, row_id: str, values: Dict[str, Any]) -> None:
        """Fold persisted values into the record and its editors."""
        record = self._records.get(row_id)
        if record is not None:
            if dataclasses.is_dataclass(record):
                self._records[row_id] = dataclasses.replace(record, **values)
            else:
                self._records[row_id] = {**record, **values}
        for key, value in values.items():
            editor = self._editors.get((row_id, key))
            if editor is not None:
                editor.sync_server_value(value)

    def _on_changes(self) -> None:
        if not self._closed:
            self.backstop.sync()

    def _on_mode_changed(self, mode: EditMode, _row_id: Optional[str]) -> None:
        for editor in self._editors.values():
            editor.set_edit_mode(mode)
        self.navigator.set_active(mode != EditMode.VIEWING)
        if not self._closed:
            self.backstop.sync()
        if app_config.verbose_logging:
            print(f"🔀 Edit mode: {mode.value}")

    def _revert_discarded_editors(self, row_id: Optional[str] = None) -> None:
        """Revert editors whose pending value was discarded by a transition.

        With row_id None every row is considered (bulk edit exit).
        """
        for (editor_row, field), editor in self._editors.items():
            if row_id is not None and editor_row != row_id:
                continue
            if editor.is_saving or not editor.is_dirty:
                continue
            if field not in self.tracker.get_row_changes(editor_row):
                editor.revert_value()

    def _request_exit(self) -> None:
        if self.on_exit_requested:
            self.on_exit_requested()

    def _commit_field(self, position) -> None:
        row_id = self._visible_row_ids[position.row]
        editor = self.get_field_editor(row_id, self.columns[position.col])
        if editor is not None:
            editor.set_focused(False)


def create_supplier_session(persistence: Any, validator: Optional[Any] = None,
                            **kwargs) -> EditSession:
    """EditSession configured for the supplier table."""

    def display(field: str, value: Any) -> str:
        if field == SupplierField.IS_ARCHIVED.value:
            return ArchiveStatus.from_flag(value).value
        return format_for_display(SupplierField.parse(field).kind, value)

    return EditSession(
        persistence,
        columns=EDITABLE_COLUMNS,
        get_record_id=lambda supplier: supplier.supplier_id,
        values_equal=supplier_values_equal,
        normalizer=normalize_supplier_field,
        validator=validator,
        display_formatter=display,
        **kwargs
    )
