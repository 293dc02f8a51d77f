"""Tests for operation result objects."""

from models.operation_results import BlockedReason, BulkDeleteResult


class TestBulkDeleteSummary:
    """Tests for the user-facing delete summary."""

    def test_all_deleted(self) -> None:
        result = BulkDeleteResult(success=True, deleted_count=3, deleted_ids=["a", "b", "c"])
        assert result.summary_message() == "Successfully deleted 3 suppliers"

    def test_single_deleted(self) -> None:
        result = BulkDeleteResult(success=True, deleted_count=1, deleted_ids=["a"])
        assert result.summary_message() == "Successfully deleted 1 supplier"

    def test_partial_with_archive_hint(self) -> None:
        result = BulkDeleteResult(
            success=True, deleted_count=2, blocked_count=1,
            blocked_reasons=[BlockedReason(id="b", reason="Beta Supplies has 3 active purchases")],
            deleted_ids=["a", "c"], suggest_archive=True
        )

        assert result.summary_message() == (
            "Successfully deleted 2 suppliers\n\n"
            "1 supplier could not be deleted:\n"
            "• Beta Supplies has 3 active purchases\n"
            "\n"
            'Consider using "Archive" instead to preserve business data.'
        )
        assert result.blocked_ids == ["b"]

    def test_failure(self) -> None:
        result = BulkDeleteResult(success=False, error="offline")
        assert result.summary_message() == "Failed to delete suppliers: offline"

    def test_custom_noun(self) -> None:
        result = BulkDeleteResult(success=True, deleted_count=2)
        assert result.summary_message(noun="vendor") == "Successfully deleted 2 vendors"
