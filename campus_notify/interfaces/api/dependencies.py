"""FastAPI dependency utilities."""

from __future__ import annotations

from datetime import datetime

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from campus_notify.application.use_cases.lifecycle import LifecycleEngine
from campus_notify.config import get_settings
from campus_notify.domain.entities import (
    Directory,
    NotificationCategory,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    SortField,
    SortOrder,
)
from campus_notify.infrastructure.database import get_db
from campus_notify.infrastructure.locks import RecordLocks
from campus_notify.infrastructure.repositories import NotificationRepository
from campus_notify.interfaces.api.schemas import NotificationFilterParams


def get_store(request: Request, db: Session = Depends(get_db)):
    """Return the configured notification store for the request."""

    store = getattr(request.app.state, "store", None)
    if store is not None:
        return store
    return NotificationRepository(db)


def get_directory(request: Request) -> Directory:
    return request.app.state.directory


def get_locks(request: Request) -> RecordLocks:
    return request.app.state.locks


def get_engine(request: Request) -> LifecycleEngine:
    return LifecycleEngine(
        clock=request.app.state.clock,
        max_redispatch_attempts=get_settings().max_redispatch_attempts,
    )


def get_now(request: Request) -> datetime:
    return request.app.state.clock()


def get_filter_params(
    types: list[NotificationType] = Query(default=[]),
    categories: list[NotificationCategory] = Query(default=[]),
    priorities: list[NotificationPriority] = Query(default=[]),
    status: list[NotificationStatus] = Query(default=[]),
    start: datetime | None = None,
    end: datetime | None = None,
    sender_id: str | None = None,
    recipient_id: str | None = None,
    search: str | None = None,
    unread_only: bool = False,
    include_expired: bool = False,
    sort_by: SortField = SortField.CREATED_AT,
    sort_order: SortOrder = SortOrder.DESC,
    limit: int | None = Query(default=None, ge=0),
    offset: int = Query(default=0, ge=0),
) -> NotificationFilterParams:
    """Collect listing query parameters, capping the page size."""

    settings = get_settings()
    page_size = settings.default_page_size if limit is None else min(limit, settings.max_page_size)
    return NotificationFilterParams(
        types=types,
        categories=categories,
        priorities=priorities,
        status=status,
        start=start,
        end=end,
        sender_id=sender_id,
        recipient_id=recipient_id,
        search=search,
        unread_only=unread_only,
        include_expired=include_expired,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=page_size,
        offset=offset,
    )


__all__ = [
    "get_directory",
    "get_engine",
    "get_filter_params",
    "get_locks",
    "get_now",
    "get_store",
]
