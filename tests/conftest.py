"""Shared fixtures for the supplier desk tests."""

from datetime import datetime
from typing import Dict, List
from unittest.mock import AsyncMock, MagicMock

import pandas as pd
import pytest

from config import app_config
from models.operation_results import BulkUpdateResult, UpdateResult
from models.supplier_model import Supplier
from repositories.supplier_repository import SHEET_HEADERS


@pytest.fixture(autouse=True)
def fast_timers():
    """Shrink edit timers so async tests run in milliseconds."""
    saved = app_config.to_dict()
    app_config.quick_edit_debounce_ms = 20
    app_config.saved_status_reset_ms = 30
    app_config.bulk_auto_save_interval_s = 0.05
    yield app_config
    app_config.from_dict(saved)


@pytest.fixture
def sample_suppliers() -> List[Supplier]:
    """Three suppliers, one archived."""
    created = datetime(2024, 1, 15, 9, 30, 0)
    return [
        Supplier(supplier_id="sup_acme", name="Acme Corp", email="sales@acme.com",
                 contact_phone="(555) 123-4567", created_at=created),
        Supplier(supplier_id="sup_beta", name="Beta Supplies", website="https://beta.example",
                 created_at=created),
        Supplier(supplier_id="sup_gamma", name="Gamma Parts", is_archived=True,
                 created_at=created),
    ]


@pytest.fixture
def server_records(sample_suppliers) -> Dict[str, Dict]:
    return {supplier.supplier_id: supplier.to_dict() for supplier in sample_suppliers}


@pytest.fixture
def persistence() -> MagicMock:
    """Async persistence collaborator that succeeds by default."""
    mock = MagicMock()
    mock.update_record = AsyncMock(return_value=UpdateResult(success=True))
    mock.bulk_update_records = AsyncMock(
        side_effect=lambda updates: BulkUpdateResult(success=True, updated_count=len(updates))
    )
    return mock


@pytest.fixture
def supplier_frame() -> pd.DataFrame:
    """Suppliers sheet contents as returned by GoogleSheetsService.read_table."""
    rows = [
        ["sup_beta", "Beta Supplies", "https://beta.example", "", "", "", "", "FALSE",
         "2024-01-15T09:30:00"],
        ["sup_acme", "acme corp", "", "sales@acme.com", "(555) 123-4567", "1 Main St", "",
         "FALSE", "2024-01-10T08:00:00"],
        ["sup_gamma", "Gamma Parts", "", "", "", "", "old vendor", "TRUE", ""],
    ]
    return pd.DataFrame(rows, columns=SHEET_HEADERS)


@pytest.fixture
def sheets_service(supplier_frame) -> MagicMock:
    mock = MagicMock()
    mock.read_table.return_value = supplier_frame
    mock.update_ranges.return_value = 0
    mock.get_sheet_ids.return_value = {"Suppliers": 0, "Purchases": 1}
    return mock
