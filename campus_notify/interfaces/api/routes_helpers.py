"""Helpers shared by the notification routes."""

from __future__ import annotations

from fastapi import HTTPException, status

from campus_notify.domain.entities import FilteredView, NotificationRecord
from campus_notify.domain.errors import (
    ConfirmationRequired,
    IllegalTransition,
    InvalidAudienceSpec,
)
from campus_notify.interfaces.api.schemas import NotificationRead


def to_http_exception(exc: ValueError) -> HTTPException:
    """Translate a core error into the HTTP status the client should see."""

    if isinstance(exc, ConfirmationRequired):
        return HTTPException(
            status_code=status.HTTP_428_PRECONDITION_REQUIRED,
            detail={"message": str(exc), "count": exc.count},
        )
    if isinstance(exc, IllegalTransition):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": str(exc),
                "reason": exc.reason,
                "source": exc.source,
                "target": exc.target,
            },
        )
    if isinstance(exc, InvalidAudienceSpec):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": str(exc), "reason": "invalid_audience"},
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def not_found(detail: str = "Notificación no encontrada") -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def record_to_read_model(record: NotificationRecord) -> NotificationRead:
    return NotificationRead.model_validate(record)


def refresh_view(view: FilteredView, records: list[NotificationRecord]) -> FilteredView:
    """Swap the records of ``view`` for freshly loaded copies, keeping order."""

    by_id = {record.id: record for record in records}
    return FilteredView(
        records=tuple(by_id[record_id] for record_id in view.ids if record_id in by_id),
        total_count=view.total_count,
        spec=view.spec,
    )


__all__ = ["not_found", "record_to_read_model", "refresh_view", "to_http_exception"]
