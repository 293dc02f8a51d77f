"""
Supplier Repository
Handles persistence of Supplier records in the Suppliers sheet.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple
import pandas as pd

from config import app_config
from models.field_types import FieldKind, coerce_value
from models.supplier_model import SHEET_COLUMNS, Supplier, SupplierField, normalize_supplier_field
from services.google_sheets import GoogleSheetsService


SHEET_HEADERS = [field.header for field in SHEET_COLUMNS]
LAST_COLUMN = chr(ord('A') + len(SHEET_COLUMNS) - 1)


class SupplierRepository:
    """Repository for supplier rows. Row number in the sheet is index + 2."""

    def __init__(self, sheets_service: GoogleSheetsService, sheet_name: Optional[str] = None):
        """Initialize repository.

        Args:
            sheets_service: Google Sheets service bound to the spreadsheet.
            sheet_name: Sheet holding suppliers. Defaults to config.
        """
        self.sheets_service = sheets_service
        self.sheet_name = sheet_name or app_config.suppliers_sheet

    def ensure_sheet(self) -> None:
        self.sheets_service.ensure_sheet(self.sheet_name, SHEET_HEADERS)

    def _load_frame(self) -> pd.DataFrame:
        df = self.sheets_service.read_table(self.sheet_name)
        if df.empty:
            return pd.DataFrame(columns=SHEET_HEADERS)
        return df.reindex(columns=SHEET_HEADERS, fill_value='').reset_index(drop=True)

    @staticmethod
    def _row_to_supplier(row: pd.Series) -> Supplier:
        def text(field: SupplierField) -> str:
            value = row[field.header]
            return str(value).strip() if pd.notna(value) else ""

        created_at = None
        created_text = text(SupplierField.CREATED_AT)
        if created_text:
            try:
                created_at = datetime.fromisoformat(created_text)
            except ValueError:
                created_at = None

        try:
            is_archived = coerce_value(FieldKind.BOOLEAN, text(SupplierField.IS_ARCHIVED))
        except ValueError:
            is_archived = False

        return Supplier(
            supplier_id=text(SupplierField.SUPPLIER_ID),
            name=text(SupplierField.NAME),
            website=text(SupplierField.WEBSITE),
            email=text(SupplierField.EMAIL),
            contact_phone=text(SupplierField.CONTACT_PHONE),
            address=text(SupplierField.ADDRESS),
            notes=text(SupplierField.NOTES),
            is_archived=is_archived,
            created_at=created_at
        )

    def _index_by_id(self, df: pd.DataFrame) -> Dict[str, int]:
        ids = df[SupplierField.SUPPLIER_ID.header].astype(str)
        return {supplier_id: idx for idx, supplier_id in ids.items() if supplier_id}

    def get_all_suppliers(self, include_archived: bool = True) -> List[Supplier]:
        """All suppliers ordered by name.

        Args:
            include_archived: Include archived suppliers.
        """
        df = self._load_frame()
        suppliers = [
            self._row_to_supplier(row) for _, row in df.iterrows()
            if str(row[SupplierField.SUPPLIER_ID.header]).strip()
        ]
        if not include_archived:
            suppliers = [supplier for supplier in suppliers if not supplier.is_archived]
        suppliers.sort(key=lambda supplier: supplier.name.lower())
        print(f"📊 Loaded {len(suppliers)} suppliers from '{self.sheet_name}'")
        return suppliers

    def create_supplier(self, supplier: Supplier) -> Supplier:
        self.sheets_service.append_rows(self.sheet_name, [supplier.to_sheet_row()])
        print(f"✅ Created supplier: {supplier.name}")
        return supplier

    def update_suppliers(self, updates: Iterable[Tuple[str, Dict[str, Any]]]) -> List[Supplier]:
        """Apply field changes to several suppliers in one batch request.

        Nothing is written if any supplier id is unknown.

        Returns:
            The updated suppliers, in request order.

        Raises:
            KeyError: If a supplier id does not exist.
        """
        df = self._load_frame()
        positions = self._index_by_id(df)

        batch_updates = []
        updated = []
        for supplier_id, changes in updates:
            if supplier_id not in positions:
                raise KeyError(f"Supplier not found: {supplier_id}")
            idx = positions[supplier_id]
            data = self._row_to_supplier(df.loc[idx]).to_dict()
            for field_name, value in changes.items():
                field = SupplierField.parse(field_name)
                if not field.editable:
                    continue
                data[field.value] = normalize_supplier_field(field, value)
            supplier = Supplier.from_dict(data)

            sheet_row = idx + 2
            batch_updates.append({
                'range': f"A{sheet_row}:{LAST_COLUMN}{sheet_row}",
                'values': [supplier.to_sheet_row()]
            })
            updated.append(supplier)

        self.sheets_service.update_ranges(self.sheet_name, batch_updates)
        return updated

    def update_supplier(self, supplier_id: str, changes: Dict[str, Any]) -> Supplier:
        return self.update_suppliers([(supplier_id, changes)])[0]

    def set_archived(self, supplier_ids: List[str], is_archived: bool) -> int:
        """Set the archived flag on existing suppliers.

        Returns:
            Number of suppliers updated. Unknown ids are skipped.
        """
        df = self._load_frame()
        positions = self._index_by_id(df)
        known = [supplier_id for supplier_id in supplier_ids if supplier_id in positions]
        if not known:
            return 0
        column = chr(ord('A') + SHEET_COLUMNS.index(SupplierField.IS_ARCHIVED))
        batch_updates = [
            {'range': f"{column}{positions[supplier_id] + 2}", 'values': [[is_archived]]}
            for supplier_id in known
        ]
        self.sheets_service.update_ranges(self.sheet_name, batch_updates)
        return len(known)

    def delete_suppliers(self, supplier_ids: List[str]) -> List[str]:
        """Delete suppliers by id.

        Returns:
            Ids that were found and deleted.
        """
        df = self._load_frame()
        positions = self._index_by_id(df)
        found = [supplier_id for supplier_id in supplier_ids if supplier_id in positions]
        self.sheets_service.delete_rows(
            self.sheet_name, [positions[supplier_id] + 2 for supplier_id in found]
        )
        return found
