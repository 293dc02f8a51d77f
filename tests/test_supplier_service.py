"""Tests for SupplierService."""

from unittest.mock import MagicMock

import pytest

from models.supplier_model import Supplier
from services.supplier_service import SupplierChangeEvent, SupplierService


@pytest.fixture
def supplier_repo(sample_suppliers) -> MagicMock:
    repo = MagicMock()
    repo.get_all_suppliers.return_value = sample_suppliers
    repo.delete_suppliers.side_effect = lambda ids: list(ids)
    repo.set_archived.side_effect = lambda ids, flag: len(ids)
    return repo


@pytest.fixture
def purchase_repo() -> MagicMock:
    repo = MagicMock()
    repo.get_purchase_counts.return_value = {}
    return repo


@pytest.fixture
def service(supplier_repo, purchase_repo) -> SupplierService:
    return SupplierService(supplier_repo, purchase_repo)


# ============================================================================
# Fetch and Update
# ============================================================================


class TestFetchRecords:
    """Tests for loading suppliers."""

    @pytest.mark.asyncio
    async def test_fetch_passes_archived_flag(self, service, supplier_repo, sample_suppliers) -> None:
        result = await service.fetch_records(include_archived=True)

        assert result.success
        assert result.data == sample_suppliers
        supplier_repo.get_all_suppliers.assert_called_once_with(True)

    @pytest.mark.asyncio
    async def test_fetch_failure_is_reported(self, service, supplier_repo) -> None:
        supplier_repo.get_all_suppliers.side_effect = RuntimeError("quota exceeded")

        result = await service.fetch_records()

        assert not result.success
        assert result.error == "quota exceeded"
        assert result.data == []


class TestUpdateRecords:
    """Tests for single and bulk updates."""

    @pytest.mark.asyncio
    async def test_create_record_publishes_event(self, service, supplier_repo) -> None:
        supplier = Supplier(supplier_id="", name="Delta Tools")
        supplier_repo.create_supplier.side_effect = lambda created: created
        events = []
        service.subscribe_to_changes(events.append)

        result = await service.create_record(supplier)

        assert result.success
        assert result.record is supplier
        assert supplier.supplier_id.startswith("sup_")
        supplier_repo.create_supplier.assert_called_once_with(supplier)
        assert events[0].supplier_ids == [supplier.supplier_id]
        assert events[0].change_type == "created"

    @pytest.mark.asyncio
    async def test_create_record_failure(self, service, supplier_repo) -> None:
        supplier_repo.create_supplier.side_effect = RuntimeError("sheet is protected")
        events = []
        service.subscribe_to_changes(events.append)

        result = await service.create_record(Supplier(supplier_id="", name="Delta Tools"))

        assert not result.success
        assert result.error == "sheet is protected"
        assert events == []

    @pytest.mark.asyncio
    async def test_update_record_publishes_event(self, service, supplier_repo) -> None:
        updated = Supplier(supplier_id="sup_acme", name="Acme Corporation")
        supplier_repo.update_supplier.return_value = updated
        events = []
        service.subscribe_to_changes(events.append)

        result = await service.update_record("sup_acme", {"name": "Acme Corporation"})

        assert result.success
        assert result.record is updated
        supplier_repo.update_supplier.assert_called_once_with("sup_acme", {"name": "Acme Corporation"})
        assert len(events) == 1
        assert isinstance(events[0], SupplierChangeEvent)
        assert events[0].supplier_ids == ["sup_acme"]
        assert events[0].change_type == "updated"

    @pytest.mark.asyncio
    async def test_update_record_failure(self, service, supplier_repo) -> None:
        supplier_repo.update_supplier.side_effect = KeyError("sup_missing")

        result = await service.update_record("sup_missing", {"name": "X"})

        assert not result.success
        assert "sup_missing" in result.error

    @pytest.mark.asyncio
    async def test_bulk_update_sends_pairs(self, service, supplier_repo, sample_suppliers) -> None:
        supplier_repo.update_suppliers.return_value = sample_suppliers[:2]

        result = await service.bulk_update_records([
            {'id': "sup_acme", 'changes': {"notes": "a"}},
            {'id': "sup_beta", 'changes': {"notes": "b"}},
        ])

        assert result.success
        assert result.updated_count == 2
        supplier_repo.update_suppliers.assert_called_once_with([
            ("sup_acme", {"notes": "a"}),
            ("sup_beta", {"notes": "b"}),
        ])

    @pytest.mark.asyncio
    async def test_bulk_update_empty(self, service, supplier_repo) -> None:
        result = await service.bulk_update_records([])

        assert result.success
        assert result.updated_count == 0
        supplier_repo.update_suppliers.assert_not_called()

    @pytest.mark.asyncio
    async def test_bulk_update_failure(self, service, supplier_repo) -> None:
        supplier_repo.update_suppliers.side_effect = RuntimeError("503")

        result = await service.bulk_update_records([{'id': "sup_acme", 'changes': {"notes": "a"}}])

        assert not result.success
        assert result.error == "503"

    @pytest.mark.asyncio
    async def test_unsubscribed_callback_not_called(self, service, supplier_repo) -> None:
        supplier_repo.update_supplier.return_value = Supplier(supplier_id="sup_acme", name="A")
        callback = MagicMock()
        service.subscribe_to_changes(callback)
        service.unsubscribe_from_changes(callback)

        await service.update_record("sup_acme", {"name": "A"})

        callback.assert_not_called()


# ============================================================================
# Archive and Delete
# ============================================================================


class TestArchive:
    """Tests for bulk archive and unarchive."""

    @pytest.mark.asyncio
    async def test_archive(self, service, supplier_repo) -> None:
        result = await service.bulk_archive_records(["sup_acme", "sup_beta"])

        assert result.success
        assert result.archived_count == 2
        supplier_repo.set_archived.assert_called_once_with(["sup_acme", "sup_beta"], True)

    @pytest.mark.asyncio
    async def test_unarchive(self, service, supplier_repo) -> None:
        result = await service.bulk_unarchive_records(["sup_gamma"])

        assert result.unarchived_count == 1
        supplier_repo.set_archived.assert_called_once_with(["sup_gamma"], False)

    @pytest.mark.asyncio
    async def test_archive_empty(self, service, supplier_repo) -> None:
        result = await service.bulk_archive_records([])

        assert result.success
        assert result.archived_count == 0
        supplier_repo.set_archived.assert_not_called()

    @pytest.mark.asyncio
    async def test_archive_failure(self, service, supplier_repo) -> None:
        supplier_repo.set_archived.side_effect = RuntimeError("offline")

        result = await service.bulk_archive_records(["sup_acme"])

        assert not result.success
        assert result.error == "offline"


class TestBulkDelete:
    """Tests for delete with purchase-history protection."""

    @pytest.mark.asyncio
    async def test_partial_delete_blocks_suppliers_with_purchases(self, service, supplier_repo,
                                                                 purchase_repo) -> None:
        purchase_repo.get_purchase_counts.return_value = {"sup_beta": 3}

        result = await service.bulk_delete_records(["sup_acme", "sup_beta", "sup_gamma"])

        assert result.success
        assert result.deleted_count == 2
        assert result.blocked_count == 1
        assert result.deleted_ids == ["sup_acme", "sup_gamma"]
        assert result.blocked_ids == ["sup_beta"]
        assert "has 3 active purchases" in result.blocked_reasons[0].reason
        assert result.blocked_reasons[0].reason.startswith("Beta Supplies")
        assert result.suggest_archive
        supplier_repo.delete_suppliers.assert_called_once_with(["sup_acme", "sup_gamma"])

    @pytest.mark.asyncio
    async def test_all_blocked_deletes_nothing(self, service, supplier_repo, purchase_repo) -> None:
        purchase_repo.get_purchase_counts.return_value = {"sup_acme": 1}

        result = await service.bulk_delete_records(["sup_acme"])

        assert result.success
        assert result.deleted_count == 0
        assert result.blocked_reasons[0].reason == "Acme Corp has 1 active purchase"
        supplier_repo.delete_suppliers.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_without_purchases(self, service, supplier_repo) -> None:
        events = []
        service.subscribe_to_changes(events.append)

        result = await service.bulk_delete_records(["sup_acme"])

        assert result.deleted_count == 1
        assert not result.suggest_archive
        assert events[0].change_type == "deleted"

    @pytest.mark.asyncio
    async def test_delete_without_purchase_repository(self, supplier_repo) -> None:
        service = SupplierService(supplier_repo)

        result = await service.bulk_delete_records(["sup_acme", "sup_beta"])

        assert result.deleted_count == 2

    @pytest.mark.asyncio
    async def test_delete_failure(self, service, supplier_repo) -> None:
        supplier_repo.delete_suppliers.side_effect = RuntimeError("offline")

        result = await service.bulk_delete_records(["sup_acme"])

        assert not result.success
        assert result.error == "offline"
        assert result.summary_message() == "Failed to delete suppliers: offline"

    @pytest.mark.asyncio
    async def test_delete_empty(self, service, supplier_repo) -> None:
        result = await service.bulk_delete_records([])

        assert result.success
        assert result.deleted_count == 0
        supplier_repo.delete_suppliers.assert_not_called()
