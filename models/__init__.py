# Models package

# Field coercion
from .field_types import FieldKind, coerce_value, normalize_for_storage, values_equal

# Supplier models
from .supplier_model import (
    Supplier, SupplierField, ArchiveStatus,
    EDITABLE_COLUMNS, SHEET_COLUMNS,
    normalize_supplier_field, supplier_values_equal
)

# Operation results
from .operation_results import (
    FetchResult, UpdateResult, BulkUpdateResult, BulkArchiveResult,
    BulkUnarchiveResult, BulkDeleteResult, BlockedReason
)

__all__ = [
    # Field coercion
    'FieldKind', 'coerce_value', 'normalize_for_storage', 'values_equal',

    # Supplier models
    'Supplier', 'SupplierField', 'ArchiveStatus',
    'EDITABLE_COLUMNS', 'SHEET_COLUMNS',
    'normalize_supplier_field', 'supplier_values_equal',

    # Operation results
    'FetchResult', 'UpdateResult', 'BulkUpdateResult', 'BulkArchiveResult',
    'BulkUnarchiveResult', 'BulkDeleteResult', 'BlockedReason'
]
