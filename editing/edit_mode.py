"""
Edit Mode Controller
State machine for viewing / quick edit (one row) / bulk edit (all rows).
"""

from enum import Enum
from typing import Callable, List, Optional

from .row_change_tracker import RowChangeTracker


class EditMode(str, Enum):
    """Table edit modes."""
    VIEWING = "viewing"
    QUICK_EDIT = "quickEdit"
    BULK_EDIT = "bulkEdit"


class EditModeError(Exception):
    """Raised for a transition or edit the current mode does not allow."""


class EditModeController:
    """Governs mode transitions and the unsaved-change guard.

    Transitions that would throw away pending edits are only performed when
    the caller passes discard_confirmed=True; otherwise they return False
    and leave everything untouched so the caller can ask the user first.
    """

    def __init__(self, tracker: RowChangeTracker):
        self.tracker = tracker
        self._mode = EditMode.VIEWING
        self._editing_row_id: Optional[str] = None
        self._listeners: List[Callable[[EditMode, Optional[str]], None]] = []

    @property
    def edit_mode(self) -> EditMode:
        return self._mode

    @property
    def editing_row_id(self) -> Optional[str]:
        return self._editing_row_id

    @property
    def has_unsaved_changes(self) -> bool:
        return self.tracker.has_any_changes()

    def add_listener(self, callback: Callable[[EditMode, Optional[str]], None]) -> None:
        """Register a callback fired with (mode, editing_row_id) on transitions."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def is_row_editable(self, row_id: str) -> bool:
        if self._mode == EditMode.BULK_EDIT:
            return True
        if self._mode == EditMode.QUICK_EDIT:
            return row_id == self._editing_row_id
        return False

    def needs_confirmation(self, row_id: Optional[str] = None) -> bool:
        """Whether toggling row_id (or exiting, when None) would discard edits."""
        if self._mode == EditMode.QUICK_EDIT:
            return self.tracker.has_row_changes(self._editing_row_id)
        if self._mode == EditMode.BULK_EDIT:
            return row_id is None and self.has_unsaved_changes
        return False

    def enter_all_edit(self) -> None:
        """viewing -> bulkEdit."""
        if self._mode == EditMode.BULK_EDIT:
            return
        if self._mode == EditMode.QUICK_EDIT:
            raise EditModeError("Finish quick edit before editing all rows")
        self._transition(EditMode.BULK_EDIT, None)

    def toggle_single_edit(self, row_id: str, discard_confirmed: bool = False) -> bool:
        """Enter, leave or switch quick edit for a row.

        Args:
            row_id: Row to toggle.
            discard_confirmed: Caller confirmed that pending edits on the
                currently edited row may be discarded.

        Returns:
            True if the transition happened, False if confirmation is needed.

        Raises:
            EditModeError: If called while in bulk edit.
        """
        if self._mode == EditMode.BULK_EDIT:
            raise EditModeError("Quick edit is not available while editing all rows")

        if self._mode == EditMode.VIEWING:
            self._transition(EditMode.QUICK_EDIT, row_id)
            return True

        current = self._editing_row_id
        if self.tracker.has_row_changes(current):
            if not discard_confirmed:
                return False
            self.tracker.undo_row_changes(current)

        if current == row_id:
            self._transition(EditMode.VIEWING, None)
        else:
            self._transition(EditMode.QUICK_EDIT, row_id)
        return True

    def exit_edit(self) -> None:
        """Discard the pending edits this mode owns and return to viewing."""
        if self._mode == EditMode.BULK_EDIT:
            self.tracker.clear_all()
        elif self._mode == EditMode.QUICK_EDIT:
            self.tracker.undo_row_changes(self._editing_row_id)
        self._transition(EditMode.VIEWING, None)

    def _transition(self, mode: EditMode, row_id: Optional[str]) -> None:
        if mode == EditMode.QUICK_EDIT and row_id is None:
            raise EditModeError("Quick edit requires a row id")
        changed = (mode, row_id) != (self._mode, self._editing_row_id)
        self._mode = mode
        self._editing_row_id = row_id if mode == EditMode.QUICK_EDIT else None
        if changed:
            for callback in list(self._listeners):
                try:
                    callback(self._mode, self._editing_row_id)
                except Exception as e:
                    print(f"Error in edit mode listener: {e}")
