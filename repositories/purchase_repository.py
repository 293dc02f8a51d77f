"""
Purchase Repository
Read-only access to the Purchases sheet, used to protect suppliers that
still have purchase history.
"""

from typing import Dict, Iterable, Optional

from config import app_config
from services.google_sheets import GoogleSheetsService


SUPPLIER_ID_HEADER = "Supplier ID"


class PurchaseRepository:
    """Repository for purchase rows."""

    def __init__(self, sheets_service: GoogleSheetsService, sheet_name: Optional[str] = None):
        self.sheets_service = sheets_service
        self.sheet_name = sheet_name or app_config.purchases_sheet

    def get_purchase_counts(self, supplier_ids: Optional[Iterable[str]] = None) -> Dict[str, int]:
        """Number of purchases per supplier id.

        Args:
            supplier_ids: Restrict the result to these suppliers.

        Returns:
            {supplier_id: count}, only for suppliers with at least one purchase.
        """
        if self.sheet_name not in self.sheets_service.get_sheet_ids():
            return {}

        df = self.sheets_service.read_table(self.sheet_name)
        if df.empty or SUPPLIER_ID_HEADER not in df.columns:
            return {}

        supplier_column = df[SUPPLIER_ID_HEADER].astype(str).str.strip()
        counts = supplier_column[supplier_column != ""].value_counts()
        if supplier_ids is not None:
            counts = counts[counts.index.isin(list(supplier_ids))]
        return {str(supplier_id): int(count) for supplier_id, count in counts.items()}
