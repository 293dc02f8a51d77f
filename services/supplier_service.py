"""
Supplier Service
Async persistence facade used by the edit engine and the supplier table.

Repository calls block on the network, so each one runs in a worker
thread. Every method reports failure through its result object instead of
raising.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from models.operation_results import (
    BlockedReason, BulkArchiveResult, BulkDeleteResult, BulkUnarchiveResult,
    BulkUpdateResult, FetchResult, UpdateResult
)
from models.supplier_model import Supplier
from repositories.purchase_repository import PurchaseRepository
from repositories.supplier_repository import SupplierRepository


@dataclass
class SupplierChangeEvent:
    """Event data for supplier changes."""
    supplier_ids: List[str]
    change_type: str  # "created", "updated", "archived", "unarchived", "deleted"
    timestamp: str


class SupplierService:
    """Service for supplier persistence with change notifications."""

    def __init__(self, supplier_repo: SupplierRepository,
                 purchase_repo: Optional[PurchaseRepository] = None):
        """Initialize service.

        Args:
            supplier_repo: Repository for supplier rows.
            purchase_repo: Repository used to block deletion of suppliers
                with purchases. Deletion is never blocked without it.
        """
        self.supplier_repo = supplier_repo
        self.purchase_repo = purchase_repo
        self._change_subscribers: List[Callable[[SupplierChangeEvent], None]] = []

    def subscribe_to_changes(self, callback: Callable[[SupplierChangeEvent], None]):
        if callback not in self._change_subscribers:
            self._change_subscribers.append(callback)

    def unsubscribe_from_changes(self, callback: Callable[[SupplierChangeEvent], None]):
        if callback in self._change_subscribers:
            self._change_subscribers.remove(callback)

    def _publish_change_event(self, supplier_ids: List[str], change_type: str):
        event = SupplierChangeEvent(
            supplier_ids=list(supplier_ids),
            change_type=change_type,
            timestamp=datetime.now().isoformat()
        )
        for callback in self._change_subscribers:
            try:
                callback(event)
            except Exception as e:
                print(f"Error in supplier change subscriber: {e}")

    async def fetch_records(self, include_archived: bool = False) -> FetchResult:
        """Load suppliers, optionally including archived ones."""
        try:
            suppliers = await asyncio.to_thread(
                self.supplier_repo.get_all_suppliers, include_archived
            )
        except Exception as e:
            print(f"❌ Error fetching suppliers: {e}")
            return FetchResult(success=False, error=str(e) or "Failed to fetch suppliers")
        return FetchResult(success=True, data=suppliers)

    async def create_record(self, supplier: Supplier) -> UpdateResult:
        """Append a new supplier row."""
        try:
            created = await asyncio.to_thread(self.supplier_repo.create_supplier, supplier)
        except Exception as e:
            print(f"❌ Error creating supplier: {e}")
            return UpdateResult(success=False, error=str(e) or "Failed to create supplier")
        self._publish_change_event([created.supplier_id], "created")
        return UpdateResult(success=True, record=created)

    async def update_record(self, supplier_id: str, changes: Dict[str, Any]) -> UpdateResult:
        """Update exactly the given fields of one supplier."""
        try:
            updated = await asyncio.to_thread(
                self.supplier_repo.update_supplier, supplier_id, changes
            )
        except Exception as e:
            print(f"❌ Error updating supplier {supplier_id}: {e}")
            return UpdateResult(success=False, error=str(e) or "Failed to update supplier")
        self._publish_change_event([supplier_id], "updated")
        return UpdateResult(success=True, record=updated)

    async def bulk_update_records(self, updates: List[Dict[str, Any]]) -> BulkUpdateResult:
        """Update several suppliers in one request.

        Args:
            updates: [{'id': supplier_id, 'changes': {field: value}}, ...]
        """
        if not updates:
            return BulkUpdateResult(success=True, updated_count=0)
        pairs = [(update['id'], update['changes']) for update in updates]
        try:
            updated = await asyncio.to_thread(self.supplier_repo.update_suppliers, pairs)
        except Exception as e:
            print(f"❌ Error bulk updating suppliers: {e}")
            return BulkUpdateResult(success=False, error=str(e) or "Failed to bulk update suppliers")
        self._publish_change_event([supplier.supplier_id for supplier in updated], "updated")
        return BulkUpdateResult(success=True, updated_count=len(updated))

    async def bulk_archive_records(self, supplier_ids: List[str]) -> BulkArchiveResult:
        if not supplier_ids:
            return BulkArchiveResult(success=True, archived_count=0)
        try:
            count = await asyncio.to_thread(self.supplier_repo.set_archived, supplier_ids, True)
        except Exception as e:
            print(f"❌ Error archiving suppliers: {e}")
            return BulkArchiveResult(success=False, error=str(e) or "Failed to archive suppliers")
        self._publish_change_event(supplier_ids, "archived")
        return BulkArchiveResult(success=True, archived_count=count)

    async def bulk_unarchive_records(self, supplier_ids: List[str]) -> BulkUnarchiveResult:
        if not supplier_ids:
            return BulkUnarchiveResult(success=True, unarchived_count=0)
        try:
            count = await asyncio.to_thread(self.supplier_repo.set_archived, supplier_ids, False)
        except Exception as e:
            print(f"❌ Error unarchiving suppliers: {e}")
            return BulkUnarchiveResult(success=False, error=str(e) or "Failed to unarchive suppliers")
        self._publish_change_event(supplier_ids, "unarchived")
        return BulkUnarchiveResult(success=True, unarchived_count=count)

    async def bulk_delete_records(self, supplier_ids: List[str]) -> BulkDeleteResult:
        """Delete suppliers that have no purchases; report the rest as blocked."""
        if not supplier_ids:
            return BulkDeleteResult(success=True)

        try:
            purchase_counts = {}
            if self.purchase_repo is not None:
                purchase_counts = await asyncio.to_thread(
                    self.purchase_repo.get_purchase_counts, supplier_ids
                )

            names = {}
            if purchase_counts:
                suppliers = await asyncio.to_thread(self.supplier_repo.get_all_suppliers)
                names = {supplier.supplier_id: supplier.name for supplier in suppliers}

            blocked = []
            deletable = []
            for supplier_id in supplier_ids:
                count = purchase_counts.get(supplier_id, 0)
                if count > 0:
                    plural = "" if count == 1 else "s"
                    label = names.get(supplier_id) or supplier_id
                    blocked.append(BlockedReason(
                        id=supplier_id,
                        reason=f"{label} has {count} active purchase{plural}"
                    ))
                else:
                    deletable.append(supplier_id)

            deleted_ids = []
            if deletable:
                deleted_ids = await asyncio.to_thread(
                    self.supplier_repo.delete_suppliers, deletable
                )
        except Exception as e:
            print(f"❌ Error deleting suppliers: {e}")
            return BulkDeleteResult(success=False, error=str(e) or "Failed to delete suppliers")

        if deleted_ids:
            self._publish_change_event(deleted_ids, "deleted")
        print(f"🗑️ Delete completed: {len(deleted_ids)} deleted, {len(blocked)} blocked")
        return BulkDeleteResult(
            success=True,
            deleted_count=len(deleted_ids),
            blocked_count=len(blocked),
            blocked_reasons=blocked,
            deleted_ids=deleted_ids,
            suggest_archive=bool(blocked)
        )
