"""Shapes describing batch operations and their partial-success outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class BatchOperation(str, Enum):
    MARK_READ = "mark_read"
    MARK_UNREAD = "mark_unread"
    DELETE = "delete"


class BatchScope(str, Enum):
    SELECTED = "selected"
    ALL_READ = "all_read"
    ALL_IN_VIEW = "all_in_view"


@dataclass(frozen=True)
class SkippedRecord:
    id: str
    reason: str
    detail: str | None = None


@dataclass
class BatchResult:
    """Ids that were processed and ids that were skipped with a reason code."""

    succeeded: list[str] = field(default_factory=list)
    skipped: list[SkippedRecord] = field(default_factory=list)

    def skip(self, record_id: str, reason: str, detail: str | None = None) -> None:
        self.skipped.append(SkippedRecord(id=record_id, reason=reason, detail=detail))

    @property
    def skipped_ids(self) -> list[str]:
        return [entry.id for entry in self.skipped]


@dataclass(frozen=True)
class ConfirmationToken:
    """Proof that a human reviewed the number of records a batch will touch."""

    operation: BatchOperation
    scope: BatchScope
    count: int
    digest: str

    def __str__(self) -> str:
        return f"{self.operation.value}:{self.scope.value}:{self.count}:{self.digest}"


__all__ = [
    "BatchOperation",
    "BatchScope",
    "SkippedRecord",
    "BatchResult",
    "ConfirmationToken",
]
