"""
Row Selection
Selected row ids for bulk archive/unarchive/delete actions.
"""

from typing import Iterable, List

from models.operation_results import BulkDeleteResult


class RowSelection:
    """Ordered set of selected row ids, owned by one table."""

    def __init__(self):
        self._selected = {}

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, row_id: str) -> bool:
        return row_id in self._selected

    def select(self, row_id: str) -> None:
        self._selected[row_id] = True

    def deselect(self, row_id: str) -> None:
        self._selected.pop(row_id, None)

    def toggle(self, row_id: str) -> bool:
        """Flip selection of a row. Returns the new state."""
        if row_id in self._selected:
            self.deselect(row_id)
            return False
        self.select(row_id)
        return True

    def select_all(self, row_ids: Iterable[str]) -> None:
        for row_id in row_ids:
            self.select(row_id)

    def replace(self, row_ids: Iterable[str]) -> None:
        self._selected = {row_id: True for row_id in row_ids}

    def clear(self) -> None:
        self._selected.clear()

    def selected_ids(self) -> List[str]:
        return list(self._selected)

    def retain(self, row_ids: Iterable[str]) -> None:
        """Drop selected ids that are no longer present (e.g. after a refetch)."""
        present = set(row_ids)
        self._selected = {row_id: True for row_id in self._selected if row_id in present}

    def apply_delete_result(self, result: BulkDeleteResult) -> None:
        """Deleted rows leave the selection; blocked rows stay selected."""
        if not result.success:
            return
        if result.deleted_ids:
            for row_id in result.deleted_ids:
                self.deselect(row_id)
        else:
            blocked = set(result.blocked_ids)
            self._selected = {row_id: True for row_id in self._selected if row_id in blocked}
