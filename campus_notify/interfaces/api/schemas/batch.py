"""Pydantic models describing batch operations."""

from __future__ import annotations

from pydantic import BaseModel, Field

from campus_notify.domain.entities import BatchOperation, BatchResult, BatchScope

from .filters import NotificationFilterParams


class BatchRequest(BaseModel):
    """Operación masiva sobre la vista filtrada del usuario."""

    operation: BatchOperation
    scope: BatchScope = BatchScope.SELECTED
    selected_ids: list[str] = Field(default_factory=list)
    filters: NotificationFilterParams = Field(default_factory=NotificationFilterParams)
    confirmation_token: str | None = None


class ConfirmationRequest(BaseModel):
    operation: BatchOperation
    scope: BatchScope
    selected_ids: list[str] = Field(default_factory=list)
    filters: NotificationFilterParams = Field(default_factory=NotificationFilterParams)


class ConfirmationRead(BaseModel):
    """Token que prueba que una persona revisó la cantidad a eliminar."""

    token: str
    count: int
    required: bool


class SkippedRead(BaseModel):
    id: str
    reason: str
    detail: str | None = None


class BatchResultRead(BaseModel):
    succeeded: list[str]
    skipped: list[SkippedRead]

    @classmethod
    def from_result(cls, result: BatchResult) -> "BatchResultRead":
        return cls(
            succeeded=list(result.succeeded),
            skipped=[
                SkippedRead(id=entry.id, reason=entry.reason, detail=entry.detail)
                for entry in result.skipped
            ],
        )


__all__ = [
    "BatchRequest",
    "BatchResultRead",
    "ConfirmationRead",
    "ConfirmationRequest",
    "SkippedRead",
]
