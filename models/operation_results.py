"""
Operation Results
Result objects returned by the persistence layer to the edit engine and UI.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class FetchResult:
    """Result of loading records."""
    success: bool
    data: List[Any] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class UpdateResult:
    """Result of updating one record."""
    success: bool
    record: Optional[Any] = None
    error: Optional[str] = None


@dataclass
class BulkUpdateResult:
    """Result of updating many records in one request."""
    success: bool
    updated_count: int = 0
    error: Optional[str] = None


@dataclass
class BulkArchiveResult:
    success: bool
    archived_count: int = 0
    error: Optional[str] = None


@dataclass
class BulkUnarchiveResult:
    success: bool
    unarchived_count: int = 0
    error: Optional[str] = None


@dataclass
class BlockedReason:
    """Why a record could not be deleted."""
    id: str
    reason: str


@dataclass
class BulkDeleteResult:
    """Result of deleting many records, where some deletions may be blocked."""
    success: bool
    deleted_count: int = 0
    blocked_count: int = 0
    blocked_reasons: List[BlockedReason] = field(default_factory=list)
    deleted_ids: List[str] = field(default_factory=list)
    suggest_archive: bool = False
    error: Optional[str] = None

    @property
    def blocked_ids(self) -> List[str]:
        return [blocked.id for blocked in self.blocked_reasons]

    def summary_message(self, noun: str = "supplier") -> str:
        """Human readable summary covering both deleted and blocked records."""
        if not self.success:
            return f"Failed to delete {noun}s: {self.error or 'unknown error'}"

        parts = []
        if self.deleted_count > 0:
            plural = "" if self.deleted_count == 1 else "s"
            parts.append(f"Successfully deleted {self.deleted_count} {noun}{plural}")

        if self.blocked_count > 0:
            plural = "" if self.blocked_count == 1 else "s"
            lines = [f"{self.blocked_count} {noun}{plural} could not be deleted:"]
            lines.extend(f"• {blocked.reason}" for blocked in self.blocked_reasons)
            if self.suggest_archive:
                lines.append("")
                lines.append('Consider using "Archive" instead to preserve business data.')
            parts.append("\n".join(lines))

        return "\n\n".join(parts)
