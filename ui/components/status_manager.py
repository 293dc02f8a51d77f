"""
Centralized Status Manager
Status messages for the supplier table, shown in the main window footer.
"""

from PySide6.QtCore import QObject, Signal, QTimer
from PySide6.QtWidgets import QLabel
from typing import List, Optional
from datetime import datetime
from enum import Enum

from editing.batch_save import SaveOutcome
from models.operation_results import BulkDeleteResult


class MessageType(Enum):
    """Types of status messages."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    LOADING = "loading"


MESSAGE_ICONS = {
    MessageType.INFO: "ℹ️",
    MessageType.SUCCESS: "✅",
    MessageType.WARNING: "⚠️",
    MessageType.ERROR: "❌",
    MessageType.LOADING: "🔄"
}

MESSAGE_STYLES = {
    MessageType.INFO: "color: #666; font-style: italic;",
    MessageType.SUCCESS: "color: #28a745; font-weight: bold;",
    MessageType.WARNING: "color: #b8860b; font-weight: bold;",
    MessageType.ERROR: "color: #dc3545; font-weight: bold;",
    MessageType.LOADING: "color: #007bff; font-style: italic;"
}


class StatusMessage:
    """Represents a status message."""

    def __init__(self, message: str, message_type: MessageType, timestamp: Optional[datetime] = None):
        self.message = message
        self.message_type = message_type
        self.timestamp = timestamp or datetime.now()

    def __str__(self):
        return f"[{self.timestamp.strftime('%H:%M:%S')}] {self.message}"


class StatusManager(QObject):
    """Application-wide status line with a short message history."""

    status_changed = Signal(str, str)  # message, message type
    unsaved_count_changed = Signal(int)

    HISTORY_LIMIT = 50
    AUTO_CLEAR_MS = 5000

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not hasattr(self, '_initialized'):
            super().__init__()
            self._initialized = True
            self.messages: List[StatusMessage] = []
            self.current_message = "Ready"
            self.unsaved_count = 0
            self.status_label: Optional[QLabel] = None
            self.auto_clear_timer = QTimer()
            self.auto_clear_timer.setSingleShot(True)
            self.auto_clear_timer.timeout.connect(self.clear_status)

    def set_status_label(self, label: QLabel):
        self.status_label = label
        self._update_display()

    def show_info(self, message: str, auto_clear: bool = True):
        self._add_message(message, MessageType.INFO, auto_clear)

    def show_success(self, message: str, auto_clear: bool = True):
        self._add_message(message, MessageType.SUCCESS, auto_clear)

    def show_warning(self, message: str, auto_clear: bool = True):
        self._add_message(message, MessageType.WARNING, auto_clear)

    def show_error(self, message: str, auto_clear: bool = False):
        self._add_message(message, MessageType.ERROR, auto_clear)

    def show_loading(self, message: str):
        self._add_message(message, MessageType.LOADING, auto_clear=False)

    def clear_status(self):
        self.current_message = "Ready"
        self._update_display()

    def set_unsaved_count(self, count: int):
        """Aggregate "X unsaved" indicator for bulk edit."""
        if count != self.unsaved_count:
            self.unsaved_count = count
            self.unsaved_count_changed.emit(count)
            self._update_display()

    def report_save(self, outcome: SaveOutcome, automatic: bool = False):
        """Show the outcome of a row or bulk save."""
        prefix = "Auto-save" if automatic else "Save"
        if outcome.skipped:
            return
        if outcome.success:
            if outcome.row_count:
                row_text = "row" if outcome.row_count == 1 else "rows"
                self.show_success(f"{prefix}: {outcome.row_count} {row_text} saved")
        elif outcome.validation_errors:
            self.show_warning(f"{prefix} blocked: {outcome.error}", auto_clear=False)
        else:
            self.show_error(f"{prefix} failed: {outcome.error}. Changes kept for retry.")

    def report_delete(self, result: BulkDeleteResult):
        if not result.success:
            self.show_error(result.summary_message())
        elif result.blocked_count:
            self.show_warning(
                f"Deleted {result.deleted_count}, {result.blocked_count} blocked"
            )
        else:
            self.show_success(f"Deleted {result.deleted_count} supplier(s)")

    def _add_message(self, message: str, message_type: MessageType, auto_clear: bool = True):
        self.messages.append(StatusMessage(message, message_type))
        if len(self.messages) > self.HISTORY_LIMIT:
            self.messages = self.messages[-self.HISTORY_LIMIT:]

        self.current_message = message
        self._update_display()

        if auto_clear:
            self.auto_clear_timer.stop()
            self.auto_clear_timer.start(self.AUTO_CLEAR_MS)

        print(f"{MESSAGE_ICONS.get(message_type, '📋')} {message}")

    def _current_type(self) -> MessageType:
        if self.current_message == "Ready" or not self.messages:
            return MessageType.INFO
        return self.messages[-1].message_type

    def _update_display(self):
        text = self.current_message
        if self.unsaved_count:
            text = f"{text}  •  {self.unsaved_count} unsaved"
        message_type = self._current_type()
        if self.status_label:
            self.status_label.setText(text)
            self.status_label.setStyleSheet(MESSAGE_STYLES[message_type])
        self.status_changed.emit(text, message_type.value)

    def get_recent_messages(self, count: int = 10) -> List[StatusMessage]:
        return self.messages[-count:] if self.messages else []

    def get_error_messages(self) -> List[StatusMessage]:
        return [msg for msg in self.messages if msg.message_type == MessageType.ERROR]


# Global instance
status_manager = StatusManager()
