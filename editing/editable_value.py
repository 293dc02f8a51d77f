"""
Editable Value
Editing lifecycle of a single cell: local vs. server value, save status,
focus, and debounced auto-save while quick editing.
"""

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from config import app_config
from .edit_mode import EditMode
from .timers import DebounceTimer


class SaveStatus(str, Enum):
    """Per-cell save feedback."""
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class EditableValue:
    """One field's local value, kept independent of table refreshes.

    State machine: idle -> (edit) dirty -> (auto-save) saving -> saved ->
    (timeout) idle, and saving -> error -> (next edit) dirty. "Dirty" is the
    is_dirty flag; save_status carries the rest.
    """

    def __init__(self,
                 server_value: Any,
                 on_save: Optional[Callable[[Any], Awaitable[bool]]] = None,
                 edit_mode: EditMode = EditMode.VIEWING,
                 debounce_ms: Optional[int] = None,
                 saved_reset_ms: Optional[int] = None,
                 on_value_changed: Optional[Callable[[Any], None]] = None,
                 on_status_changed: Optional[Callable[['SaveStatus'], None]] = None,
                 display_formatter: Optional[Callable[[Any], str]] = None):
        """Initialize editable value.

        Args:
            server_value: Current authoritative value.
            on_save: Async callback persisting a value, resolving to success.
            edit_mode: Current table edit mode.
            debounce_ms: Quiet period before auto-save. Defaults to config.
            saved_reset_ms: Delay before "saved" returns to "idle".
            on_value_changed: Called with the new local value on every edit.
            on_status_changed: Called whenever save_status changes.
            display_formatter: Renders the local value as text.
        """
        self._server_value = server_value
        self._value = server_value
        self.on_save = on_save
        self._mode = edit_mode
        self.on_value_changed = on_value_changed
        self.on_status_changed = on_status_changed
        self.display_formatter = display_formatter

        self._status = SaveStatus.IDLE
        self._focused = False
        self._save_task: Optional[asyncio.Task] = None
        self._resave_requested = False

        self._debounce = DebounceTimer(
            app_config.quick_edit_debounce_ms if debounce_ms is None else debounce_ms
        )
        self._status_reset = DebounceTimer(
            app_config.saved_status_reset_ms if saved_reset_ms is None else saved_reset_ms
        )

    # State

    @property
    def value(self) -> Any:
        return self._value

    @property
    def server_value(self) -> Any:
        return self._server_value

    @property
    def save_status(self) -> SaveStatus:
        return self._status

    @property
    def is_dirty(self) -> bool:
        return self._value != self._server_value

    @property
    def is_focused(self) -> bool:
        return self._focused

    @property
    def is_saving(self) -> bool:
        return self._save_task is not None and not self._save_task.done()

    @property
    def edit_mode(self) -> EditMode:
        return self._mode

    @property
    def display_value(self) -> str:
        if self.display_formatter:
            return self.display_formatter(self._value)
        return "" if self._value is None else str(self._value)

    @property
    def pending_save(self) -> Optional[asyncio.Task]:
        """The running or most recent save task, for callers that await it."""
        return self._save_task or self._debounce.last_task

    def _set_status(self, status: SaveStatus) -> None:
        if status != self._status:
            self._status = status
            if self.on_status_changed:
                self.on_status_changed(status)

    # Operations

    def update_value(self, value: Any, skip_auto_save: bool = False) -> None:
        """Set the local value and, in quick edit, schedule a debounced save."""
        self._value = value
        self._status_reset.cancel()
        if self._status != SaveStatus.SAVING:
            self._set_status(SaveStatus.IDLE)

        if self.on_value_changed:
            self.on_value_changed(value)

        if self._can_auto_save() and not skip_auto_save:
            if self.is_dirty:
                self._debounce.schedule(self._auto_save)
            else:
                self._debounce.cancel()

    def revert_value(self) -> None:
        """Discard the local edit (Escape).

        Reverting while a save is in flight writes the reverted value back
        once that save lands.
        """
        self._debounce.cancel()
        self._status_reset.cancel()
        self._value = self._server_value
        self._resave_requested = self.is_saving
        if not self.is_saving:
            self._set_status(SaveStatus.IDLE)
        if self.on_value_changed:
            self.on_value_changed(self._value)

    def set_focused(self, focused: bool) -> Optional[asyncio.Task]:
        """Track focus. Losing focus with a dirty quick-edit value saves now.

        Returns:
            The save task when an immediate save was started, else None.
        """
        self._focused = focused
        if focused or not self._can_auto_save() or not self.is_dirty:
            return None
        self._debounce.cancel()
        return self._start_save()

    def sync_server_value(self, server_value: Any) -> None:
        """Apply a server value that changed externally (e.g. a refetch).

        The local value follows it only while the field is not focused, not
        dirty and not saving; otherwise the in-progress edit is kept.
        """
        was_dirty = self.is_dirty
        self._server_value = server_value
        if self._mode == EditMode.VIEWING:
            self._value = server_value
            return
        if not self._focused and not was_dirty and not self.is_saving:
            self._value = server_value

    def set_edit_mode(self, mode: EditMode) -> None:
        self._mode = mode
        if mode != EditMode.QUICK_EDIT:
            self._debounce.cancel()
        if mode == EditMode.VIEWING:
            self._value = self._server_value
            self._status_reset.cancel()
            if not self.is_saving:
                self._set_status(SaveStatus.IDLE)

    def close(self) -> None:
        """Cancel timers. An in-flight save still completes."""
        self._debounce.cancel()
        self._status_reset.cancel()

    # Saving

    def _can_auto_save(self) -> bool:
        return self.on_save is not None and self._mode == EditMode.QUICK_EDIT

    def _auto_save(self) -> Optional[asyncio.Task]:
        if not self._can_auto_save() or not self.is_dirty:
            return None
        return self._start_save()

    def _start_save(self) -> asyncio.Task:
        if self.is_saving:
            self._resave_requested = True
            return self._save_task
        self._save_task = asyncio.ensure_future(self._run_save(self._value))
        return self._save_task

    async def _run_save(self, value: Any) -> bool:
        self._set_status(SaveStatus.SAVING)
        try:
            success = bool(await self.on_save(value))
        except Exception as e:
            print(f"❌ Auto-save failed: {e}")
            success = False

        if success:
            self._server_value = value
            self._set_status(SaveStatus.SAVED)
            self._status_reset.schedule(self._reset_saved_status)
            if app_config.verbose_logging:
                print(f"💾 Saved value {value!r}")
        else:
            self._set_status(SaveStatus.ERROR)

        if self._resave_requested:
            self._resave_requested = False
            if self._can_auto_save() and self.is_dirty:
                asyncio.get_running_loop().call_soon(self._start_save)
        return success

    def _reset_saved_status(self) -> None:
        if self._status == SaveStatus.SAVED:
            self._set_status(SaveStatus.IDLE)
