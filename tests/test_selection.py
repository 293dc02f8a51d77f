"""Tests for RowSelection."""

from editing.selection import RowSelection
from models.operation_results import BlockedReason, BulkDeleteResult


class TestRowSelection:
    """Tests for selecting rows."""

    def test_toggle(self) -> None:
        selection = RowSelection()

        assert selection.toggle("a") is True
        assert "a" in selection
        assert selection.toggle("a") is False
        assert len(selection) == 0

    def test_keeps_selection_order(self) -> None:
        selection = RowSelection()
        selection.select("c")
        selection.select_all(["a", "c", "b"])

        assert selection.selected_ids() == ["c", "a", "b"]

    def test_replace_and_clear(self) -> None:
        selection = RowSelection()
        selection.select("a")

        selection.replace(["b", "c"])
        assert selection.selected_ids() == ["b", "c"]

        selection.clear()
        assert selection.selected_ids() == []

    def test_retain_drops_missing_rows(self) -> None:
        selection = RowSelection()
        selection.select_all(["a", "b", "c"])

        selection.retain({"a": 1, "c": 2})

        assert selection.selected_ids() == ["a", "c"]


class TestApplyDeleteResult:
    """Tests for reconciling selection with a bulk delete."""

    def test_deleted_rows_leave_blocked_rows_stay(self) -> None:
        selection = RowSelection()
        selection.select_all(["a", "b", "c"])
        result = BulkDeleteResult(
            success=True, deleted_count=2, blocked_count=1,
            blocked_reasons=[BlockedReason(id="b", reason="Beta has 3 active purchases")],
            deleted_ids=["a", "c"], suggest_archive=True
        )

        selection.apply_delete_result(result)

        assert selection.selected_ids() == ["b"]

    def test_all_blocked_keeps_only_blocked(self) -> None:
        selection = RowSelection()
        selection.select_all(["a", "b"])
        result = BulkDeleteResult(
            success=True, blocked_count=1,
            blocked_reasons=[BlockedReason(id="b", reason="blocked")]
        )

        selection.apply_delete_result(result)

        assert selection.selected_ids() == ["b"]

    def test_failure_leaves_selection_untouched(self) -> None:
        selection = RowSelection()
        selection.select_all(["a", "b"])

        selection.apply_delete_result(BulkDeleteResult(success=False, error="offline"))

        assert selection.selected_ids() == ["a", "b"]
