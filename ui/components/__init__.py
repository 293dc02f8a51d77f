"""UI Components package for reusable components."""

from .status_manager import (
    StatusManager,
    MessageType,
    StatusMessage,
    status_manager
)
from .supplier_table import SupplierTable, ColumnConfig

__all__ = [
    'StatusManager',
    'MessageType',
    'StatusMessage',
    'status_manager',
    'SupplierTable',
    'ColumnConfig'
]
