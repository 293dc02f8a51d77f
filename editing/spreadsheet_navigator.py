"""
Spreadsheet Navigator
Keyboard and mouse cell addressing over the visible rows of the table.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


@dataclass(frozen=True)
class CursorPosition:
    row: int
    col: int


class NavigationKey(Enum):
    """Keys the navigator reacts to. The UI maps toolkit key codes onto these."""
    ARROW_UP = "ArrowUp"
    ARROW_DOWN = "ArrowDown"
    TAB = "Tab"
    ENTER = "Enter"
    ESCAPE = "Escape"


class SpreadsheetNavigator:
    """Tracks the cursor (row, col) and turns key presses into moves.

    Holds no business data: callers map the row index back to a row id via
    get_row_id, since indices change with sorting and filtering.
    """

    def __init__(self,
                 column_count: int,
                 get_row_id: Callable[[int], str],
                 row_count: int = 0,
                 on_exit_spreadsheet_mode: Optional[Callable[[], None]] = None,
                 on_commit_field: Optional[Callable[[CursorPosition], None]] = None,
                 on_cursor_changed: Optional[Callable[[Optional[CursorPosition]], None]] = None):
        """Initialize navigator.

        Args:
            column_count: Number of navigable columns.
            get_row_id: Maps a visible row index to its row id.
            row_count: Number of visible rows.
            on_exit_spreadsheet_mode: Called on Escape or moving past the
                first/last row. Expected to run the unsaved-changes guard.
            on_commit_field: Called on Enter to commit the focused field.
            on_cursor_changed: Called with the new cursor after every move.
        """
        self.column_count = column_count
        self.get_row_id = get_row_id
        self.row_count = row_count
        self.on_exit_spreadsheet_mode = on_exit_spreadsheet_mode
        self.on_commit_field = on_commit_field
        self.on_cursor_changed = on_cursor_changed
        self._cursor: Optional[CursorPosition] = None
        self._active = False

    @property
    def cursor(self) -> Optional[CursorPosition]:
        return self._cursor

    @property
    def is_active(self) -> bool:
        return self._active

    def current_row_id(self) -> Optional[str]:
        if self._cursor is None:
            return None
        return self.get_row_id(self._cursor.row)

    def set_active(self, active: bool) -> None:
        """Enable key handling (an edit mode other than viewing is active)."""
        self._active = active
        if active and self._cursor is None and self.row_count > 0:
            self._move(CursorPosition(0, 0))

    def set_row_count(self, row_count: int) -> None:
        """Visible row set changed; keep the cursor inside it."""
        self.row_count = row_count
        if self._cursor is None:
            return
        if row_count == 0:
            self._move(None)
        elif self._cursor.row >= row_count:
            self._move(CursorPosition(row_count - 1, self._cursor.col))

    def handle_cell_click(self, row: int, col: int) -> None:
        if 0 <= row < self.row_count and 0 <= col < self.column_count:
            self._move(CursorPosition(row, col))

    def handle_key(self, key: NavigationKey, shift: bool = False) -> bool:
        """Handle a navigation key.

        Returns:
            True if the key was consumed.
        """
        if not self._active:
            return False

        if key == NavigationKey.ESCAPE:
            self._request_exit()
            return True

        if self._cursor is None:
            return False
        row, col = self._cursor.row, self._cursor.col

        if key == NavigationKey.ARROW_UP:
            if row == 0:
                self._request_exit()
            else:
                self._move(CursorPosition(row - 1, col))
            return True

        if key == NavigationKey.ARROW_DOWN:
            if row >= self.row_count - 1:
                self._request_exit()
            else:
                self._move(CursorPosition(row + 1, col))
            return True

        if key == NavigationKey.TAB:
            if shift:
                self._move_previous(row, col)
            else:
                self._move_next(row, col)
            return True

        if key == NavigationKey.ENTER:
            if self.on_commit_field:
                self.on_commit_field(self._cursor)
            return True

        return False

    def _move_next(self, row: int, col: int) -> None:
        if col < self.column_count - 1:
            self._move(CursorPosition(row, col + 1))
        elif row < self.row_count - 1:
            self._move(CursorPosition(row + 1, 0))

    def _move_previous(self, row: int, col: int) -> None:
        if col > 0:
            self._move(CursorPosition(row, col - 1))
        elif row > 0:
            self._move(CursorPosition(row - 1, self.column_count - 1))

    def _move(self, position: Optional[CursorPosition]) -> None:
        self._cursor = position
        if self.on_cursor_changed:
            self.on_cursor_changed(position)

    def _request_exit(self) -> None:
        if self.on_exit_spreadsheet_mode:
            self.on_exit_spreadsheet_mode()
