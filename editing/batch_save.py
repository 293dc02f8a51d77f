"""
Batch Save Coordinator
Submits pending row edits to the persistence layer and reconciles results.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from config import app_config
from .edit_mode import EditMode, EditModeController
from .row_change_tracker import RowChangeTracker
from .timers import RepeatingTimer


@dataclass
class SaveOutcome:
    """Result of a save attempt as seen by the UI."""
    success: bool
    row_count: int = 0
    error: Optional[str] = None
    validation_errors: Dict[str, Dict[str, str]] = field(default_factory=dict)
    skipped: bool = False


class BatchSaveCoordinator:
    """Saves one row (quick edit) or every pending row (bulk edit).

    Success is all-or-nothing per call: a failed request leaves every
    pending value exactly as it was.
    """

    def __init__(self,
                 tracker: RowChangeTracker,
                 controller: EditModeController,
                 persistence: Any,
                 normalizer: Optional[Callable[[str, Any], Any]] = None,
                 validator: Optional[Any] = None,
                 on_saved: Optional[Callable[[str, Dict[str, Any]], None]] = None):
        """Initialize coordinator.

        Args:
            tracker: Pending change tracker.
            controller: Edit mode controller.
            persistence: Object with async update_record(id, changes) and
                bulk_update_records([{'id', 'changes'}]) methods.
            normalizer: (field, value) -> storage value, applied before submit.
            validator: Object with validate_changes(row_id, changes) returning
                a result with errors and cleaned values.
            on_saved: Called with (row_id, persisted values) for every row
                saved, before any mode change.
        """
        self.tracker = tracker
        self.controller = controller
        self.persistence = persistence
        self.normalizer = normalizer
        self.validator = validator
        self.on_saved = on_saved
        self._save_all_in_flight = False

    @property
    def is_saving_all(self) -> bool:
        return self._save_all_in_flight

    def _normalize(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        if not self.normalizer:
            return dict(changes)
        return {key: self.normalizer(key, value) for key, value in changes.items()}

    def _report_saved(self, row_id: str, values: Dict[str, Any]) -> None:
        if self.on_saved:
            try:
                self.on_saved(row_id, values)
            except Exception as e:
                print(f"Error in saved-values listener: {e}")

    def _validate(self, row_id: str, changes: Dict[str, Any]):
        """Returns (errors, payload)."""
        if not self.validator:
            return {}, changes
        result = self.validator.validate_changes(row_id, changes)
        return result.errors, {**changes, **result.cleaned}

    async def save_row(self, row_id: str) -> SaveOutcome:
        """Persist exactly the changed fields of one row."""
        submitted = self.tracker.get_row_changes(row_id)
        if not submitted:
            return SaveOutcome(success=True)

        errors, payload = self._validate(row_id, submitted)
        if errors:
            message = "; ".join(errors.values())
            print(f"⚠️ Validation failed for {row_id}: {message}")
            return SaveOutcome(success=False, error=message,
                               validation_errors={row_id: errors})

        normalized = self._normalize(payload)
        try:
            result = await self.persistence.update_record(row_id, normalized)
        except Exception as e:
            print(f"❌ Error saving {row_id}: {e}")
            return SaveOutcome(success=False, error=str(e))

        if not result.success:
            print(f"❌ Failed to save {row_id}: {result.error}")
            return SaveOutcome(success=False, error=result.error or "Save failed")

        self.tracker.acknowledge_saved(row_id, submitted)
        self._report_saved(row_id, normalized)
        if app_config.verbose_logging:
            print(f"✅ Saved {row_id}: {sorted(submitted)}")
        return SaveOutcome(success=True, row_count=1)

    async def save_all(self, exit_on_success: bool = True) -> SaveOutcome:
        """Persist every pending row in a single bulk request.

        A call made while another save_all is in flight is skipped.

        Args:
            exit_on_success: Return to viewing once everything is saved.
        """
        if self._save_all_in_flight:
            return SaveOutcome(success=False, skipped=True, error="Save already in progress")

        self._save_all_in_flight = True
        try:
            return await self._save_all(exit_on_success)
        finally:
            self._save_all_in_flight = False

    async def _save_all(self, exit_on_success: bool) -> SaveOutcome:
        all_changes = self.tracker.get_all_changes()
        if not all_changes:
            if exit_on_success and self.controller.edit_mode == EditMode.BULK_EDIT:
                self.controller.exit_edit()
            return SaveOutcome(success=True)

        validation_errors = {}
        payload: List[Dict[str, Any]] = []
        for row in all_changes:
            errors, cleaned = self._validate(row.row_id, row.changes)
            if errors:
                validation_errors[row.row_id] = errors
            payload.append({'id': row.row_id, 'changes': self._normalize(cleaned)})

        if validation_errors:
            count = len(validation_errors)
            print(f"⚠️ Validation failed for {count} row(s), nothing submitted")
            return SaveOutcome(success=False, error=f"{count} row(s) have invalid values",
                               validation_errors=validation_errors)

        print(f"💾 Saving {len(payload)} row(s)...")
        try:
            result = await self.persistence.bulk_update_records(payload)
        except Exception as e:
            print(f"❌ Error in bulk save: {e}")
            return SaveOutcome(success=False, error=str(e))

        if not result.success:
            print(f"❌ Bulk save failed: {result.error}")
            return SaveOutcome(success=False, error=result.error or "Bulk save failed")

        for row, update in zip(all_changes, payload):
            self.tracker.acknowledge_saved(row.row_id, row.changes)
            self._report_saved(row.row_id, update['changes'])

        # Edits made while the request was in flight keep the table in bulk edit
        if exit_on_success and not self.tracker.has_any_changes() \
                and self.controller.edit_mode == EditMode.BULK_EDIT:
            self.controller.exit_edit()

        print(f"✅ Saved {len(payload)} row(s)")
        return SaveOutcome(success=True, row_count=result.updated_count or len(payload))


class AutoSaveBackstop:
    """Periodic save_all while bulk editing with unsaved changes."""

    def __init__(self, coordinator: BatchSaveCoordinator, interval_s: Optional[float] = None,
                 on_result: Optional[Callable[[SaveOutcome], None]] = None):
        self.coordinator = coordinator
        self.on_result = on_result
        self.timer = RepeatingTimer(
            app_config.bulk_auto_save_interval_s if interval_s is None else interval_s,
            self._tick
        )

    @property
    def is_active(self) -> bool:
        return self.timer.is_active

    def sync(self) -> None:
        """Start or stop the timer to match the current mode and changes."""
        controller = self.coordinator.controller
        should_run = (controller.edit_mode == EditMode.BULK_EDIT
                      and controller.has_unsaved_changes)
        if should_run and not self.timer.is_active:
            self.timer.start()
        elif not should_run and self.timer.is_active:
            self.timer.stop()

    def stop(self) -> None:
        self.timer.stop()

    async def _tick(self) -> None:
        if not self.coordinator.controller.has_unsaved_changes:
            return
        count = self.coordinator.tracker.changed_rows_count
        print(f"⏰ Auto-saving {count} unsaved row(s)")
        outcome = await self.coordinator.save_all(exit_on_success=False)
        if not outcome.success and not outcome.skipped:
            print(f"⚠️ Auto-save failed, will retry: {outcome.error}")
        if self.on_result:
            self.on_result(outcome)
