"""Tests for EditSession wiring of the edit engine."""

import asyncio
from unittest.mock import MagicMock

import pytest

from editing import EditMode, EditModeError, NavigationKey, SaveStatus, create_supplier_session
from models.operation_results import (
    BlockedReason, BulkDeleteResult, BulkUpdateResult, UpdateResult
)
from models.supplier_model import SupplierField


@pytest.fixture
def exit_requested() -> MagicMock:
    return MagicMock()


@pytest.fixture
def session(persistence, sample_suppliers, exit_requested):
    session = create_supplier_session(persistence, on_exit_requested=exit_requested)
    session.load_records(sample_suppliers)
    session.set_visible_rows([supplier.supplier_id for supplier in sample_suppliers])
    yield session
    session.close()


# ============================================================================
# Quick Edit
# ============================================================================


class TestQuickEditSession:
    """Tests for quick edit through field editors."""

    @pytest.mark.asyncio
    async def test_blur_saves_changed_field(self, session, persistence) -> None:
        session.toggle_single_edit("sup_acme")
        editor = session.create_field_editor("sup_acme", SupplierField.NAME)
        editor.set_focused(True)

        editor.update_value("Acme Corporation")
        assert session.has_row_changes("sup_acme")
        await editor.set_focused(False)

        persistence.update_record.assert_awaited_once_with("sup_acme", {"name": "Acme Corporation"})
        assert not session.has_unsaved_changes
        assert editor.save_status == SaveStatus.SAVED

    @pytest.mark.asyncio
    async def test_debounced_save(self, session, persistence) -> None:
        session.toggle_single_edit("sup_beta")
        editor = session.create_field_editor("sup_beta", SupplierField.NOTES)

        editor.update_value("ships on fridays")
        await asyncio.sleep(0.05)
        await editor.pending_save

        persistence.update_record.assert_awaited_once_with("sup_beta", {"notes": "ships on fridays"})

    @pytest.mark.asyncio
    async def test_quick_save_updates_record(self, session) -> None:
        session.toggle_single_edit("sup_beta")
        editor = session.create_field_editor("sup_beta", SupplierField.NOTES)
        editor.update_value("net 30")

        await editor.set_focused(False)

        assert session.get_record("sup_beta").notes == "net 30"
        assert session.get_row_data("sup_beta").notes == "net 30"

    @pytest.mark.asyncio
    async def test_revert_during_save_is_written_back(self, session, persistence) -> None:
        gate = asyncio.Event()

        async def slow_update(row_id, changes):
            if persistence.update_record.await_count == 1:
                await gate.wait()
            return UpdateResult(success=True)

        persistence.update_record.side_effect = slow_update
        session.toggle_single_edit("sup_acme")
        editor = session.create_field_editor("sup_acme", SupplierField.NAME)
        editor.update_value("Acme Two")
        first = editor.set_focused(False)
        await asyncio.sleep(0)

        editor.revert_value()
        gate.set()
        await first
        await asyncio.sleep(0.01)
        await editor.pending_save

        assert persistence.update_record.await_count == 2
        assert persistence.update_record.await_args.args == ("sup_acme", {"name": "Acme Corp"})
        assert editor.value == editor.server_value == "Acme Corp"
        assert not session.has_row_changes("sup_acme")
        assert session.get_record("sup_acme").name == "Acme Corp"

    def test_editor_is_cached_per_cell(self, session) -> None:
        first = session.create_field_editor("sup_acme", SupplierField.NAME)
        assert session.create_field_editor("sup_acme", "name") is first
        assert first.server_value == "Acme Corp"

        session.release_field_editor("sup_acme", SupplierField.NAME)
        assert session.get_field_editor("sup_acme", SupplierField.NAME) is None

    def test_edits_rejected_outside_editable_rows(self, session) -> None:
        with pytest.raises(EditModeError):
            session.update_row_data("sup_acme", SupplierField.NAME, "Nope")

        session.toggle_single_edit("sup_acme")
        with pytest.raises(EditModeError):
            session.update_row_data("sup_beta", SupplierField.NAME, "Nope")

    @pytest.mark.asyncio
    async def test_confirmed_switch_reverts_editor(self, session) -> None:
        session.toggle_single_edit("sup_acme")
        editor = session.create_field_editor("sup_acme", SupplierField.EMAIL)
        editor.update_value("typo@acme")

        assert session.toggle_single_edit("sup_beta") is False
        assert session.toggle_single_edit("sup_beta", discard_confirmed=True) is True

        assert session.editing_row_id == "sup_beta"
        assert not session.has_unsaved_changes
        assert editor.value == "sales@acme.com"

    def test_status_editor_displays_archive_status(self, session) -> None:
        editor = session.create_field_editor("sup_gamma", SupplierField.IS_ARCHIVED)
        assert editor.display_value == "Archived"


# ============================================================================
# Bulk Edit
# ============================================================================


class TestBulkEditSession:
    """Tests for bulk edit through the session."""

    @pytest.mark.asyncio
    async def test_save_all_returns_to_viewing(self, session, persistence) -> None:
        session.enter_all_edit()
        session.update_row_data("sup_beta", SupplierField.NOTES, "net 30")
        session.update_row_data("sup_acme", SupplierField.IS_ARCHIVED, "Archived")
        assert session.backstop.is_active

        outcome = await session.save_all()

        assert outcome.success
        assert outcome.row_count == 2
        assert session.edit_mode == EditMode.VIEWING
        assert not session.backstop.is_active
        payload = persistence.bulk_update_records.await_args.args[0]
        assert payload == [
            {'id': "sup_beta", 'changes': {"notes": "net 30"}},
            {'id': "sup_acme", 'changes': {"is_archived": True}},
        ]

    @pytest.mark.asyncio
    async def test_saved_values_survive_return_to_viewing(self, session) -> None:
        session.enter_all_edit()
        editor = session.create_field_editor("sup_acme", SupplierField.NAME)
        editor.update_value("Acme Two")

        outcome = await session.save_all()

        assert outcome.success
        assert session.edit_mode == EditMode.VIEWING
        assert session.get_row_data("sup_acme").name == "Acme Two"
        assert session.get_record("sup_acme").name == "Acme Two"
        assert editor.value == "Acme Two"
        assert editor.server_value == "Acme Two"

    @pytest.mark.asyncio
    async def test_failed_save_all_keeps_server_record(self, session, persistence) -> None:
        persistence.bulk_update_records.side_effect = None
        persistence.bulk_update_records.return_value = BulkUpdateResult(success=False, error="quota")
        session.enter_all_edit()
        session.update_row_data("sup_acme", SupplierField.NAME, "Acme Two")

        outcome = await session.save_all()

        assert not outcome.success
        assert session.get_record("sup_acme").name == "Acme Corp"
        assert session.get_row_data("sup_acme").name == "Acme Two"

    @pytest.mark.asyncio
    async def test_effective_row_data(self, session) -> None:
        session.enter_all_edit()
        session.update_row_data("sup_acme", SupplierField.NAME, "Acme Two")

        effective = session.get_row_data("sup_acme")

        assert effective.name == "Acme Two"
        assert session.get_record("sup_acme").name == "Acme Corp"

    @pytest.mark.asyncio
    async def test_exit_discards_changes_and_reverts_editors(self, session) -> None:
        session.enter_all_edit()
        editor = session.create_field_editor("sup_beta", SupplierField.WEBSITE)
        editor.update_value("https://beta.test")
        assert session.has_unsaved_changes

        session.exit_edit()

        assert not session.has_unsaved_changes
        assert editor.value == "https://beta.example"
        assert not session.backstop.is_active

    @pytest.mark.asyncio
    async def test_undo_row_reverts_pending_and_editors(self, session) -> None:
        session.enter_all_edit()
        editor = session.create_field_editor("sup_acme", SupplierField.NOTES)
        editor.update_value("remember to call")
        session.update_row_data("sup_beta", SupplierField.NOTES, "other")

        session.undo_row_changes("sup_acme")

        assert not session.has_row_changes("sup_acme")
        assert session.has_row_changes("sup_beta")
        assert editor.value == ""

    @pytest.mark.asyncio
    async def test_pending_value_applied_to_new_editor(self, session) -> None:
        session.enter_all_edit()
        session.update_row_data("sup_acme", SupplierField.NAME, "Acme Two")

        editor = session.create_field_editor("sup_acme", SupplierField.NAME)

        assert editor.value == "Acme Two"
        assert editor.server_value == "Acme Corp"


# ============================================================================
# Navigation and Selection
# ============================================================================


class TestNavigationAndSelection:
    """Tests for navigator and selection wiring."""

    def test_navigator_follows_edit_mode(self, session, exit_requested) -> None:
        session.toggle_single_edit("sup_acme")
        assert session.navigator.is_active
        assert session.navigator.current_row_id() == "sup_acme"

        session.navigator.handle_key(NavigationKey.ESCAPE)
        exit_requested.assert_called_once()

        session.exit_edit()
        assert not session.navigator.is_active

    @pytest.mark.asyncio
    async def test_enter_commits_focused_editor(self, session, persistence) -> None:
        session.toggle_single_edit("sup_acme")
        editor = session.create_field_editor("sup_acme", SupplierField.NAME)
        editor.set_focused(True)
        editor.update_value("Acme Prime")

        session.navigator.handle_key(NavigationKey.ENTER)
        await editor.pending_save

        persistence.update_record.assert_awaited_once_with("sup_acme", {"name": "Acme Prime"})

    def test_reload_retains_present_selection(self, session, sample_suppliers) -> None:
        session.selection.select_all(["sup_acme", "sup_gamma"])

        session.load_records(sample_suppliers[:2])

        assert session.selection.selected_ids() == ["sup_acme"]

    def test_delete_result_updates_selection(self, session) -> None:
        session.selection.select_all(["sup_acme", "sup_beta"])
        result = BulkDeleteResult(
            success=True, deleted_count=1, blocked_count=1,
            blocked_reasons=[BlockedReason(id="sup_beta", reason="Beta Supplies has 2 active purchases")],
            deleted_ids=["sup_acme"], suggest_archive=True
        )

        session.selection.apply_delete_result(result)

        assert session.selection.selected_ids() == ["sup_beta"]
