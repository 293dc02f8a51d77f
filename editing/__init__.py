"""
Editing package
Framework-independent edit engine: field editors, pending-change tracking,
edit modes, batch saving and spreadsheet navigation.
"""

from .batch_save import AutoSaveBackstop, BatchSaveCoordinator, SaveOutcome
from .edit_mode import EditMode, EditModeController, EditModeError
from .editable_value import EditableValue, SaveStatus
from .row_change_tracker import RowChanges, RowChangeTracker
from .selection import RowSelection
from .session import EditSession, create_supplier_session
from .spreadsheet_navigator import CursorPosition, NavigationKey, SpreadsheetNavigator

__all__ = [
    'AutoSaveBackstop', 'BatchSaveCoordinator', 'SaveOutcome',
    'EditMode', 'EditModeController', 'EditModeError',
    'EditableValue', 'SaveStatus',
    'RowChanges', 'RowChangeTracker',
    'RowSelection',
    'EditSession', 'create_supplier_session',
    'CursorPosition', 'NavigationKey', 'SpreadsheetNavigator',
]
