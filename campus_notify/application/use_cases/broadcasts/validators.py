"""Validation helpers for bulk notification requests."""

from __future__ import annotations

from datetime import datetime

from campus_notify.domain.entities import (
    BulkNotificationRequest,
    NotificationCategory,
    NotificationPriority,
    NotificationType,
)
from campus_notify.utils import ensure_app_timezone

TITLE_MAX_LENGTH = 120


def ensure_valid_request(request: BulkNotificationRequest, *, now: datetime) -> None:
    """Raise ``ValueError`` when ``request`` cannot produce valid records."""

    normalize_title(request.title)
    if not request.content or not request.content.strip():
        raise ValueError("The notification content cannot be empty")

    NotificationType(request.type)
    NotificationCategory(request.category)
    NotificationPriority(request.priority)

    ensure_valid_schedule(
        created_at=now,
        scheduled_at=request.scheduled_at,
        expires_at=request.expires_at,
    )


def normalize_title(title: str | None) -> str:
    """Return the stripped title, rejecting empty or overlong ones."""

    cleaned = (title or "").strip()
    if not cleaned:
        raise ValueError("The notification title cannot be empty")
    if len(cleaned) > TITLE_MAX_LENGTH:
        raise ValueError(f"The notification title cannot exceed {TITLE_MAX_LENGTH} characters")
    return cleaned


def ensure_valid_schedule(
    *,
    created_at: datetime,
    scheduled_at: datetime | None,
    expires_at: datetime | None,
) -> None:
    """Check ``created_at <= scheduled_at < expires_at``."""

    created_at = ensure_app_timezone(created_at)
    scheduled_at = ensure_app_timezone(scheduled_at)
    expires_at = ensure_app_timezone(expires_at)

    if scheduled_at is not None and scheduled_at < created_at:
        raise ValueError("scheduled_at cannot be earlier than the creation time")

    if expires_at is not None:
        reference = scheduled_at or created_at
        if expires_at <= reference:
            raise ValueError("expires_at must be later than the scheduled or creation time")


__all__ = ["ensure_valid_request", "ensure_valid_schedule", "normalize_title", "TITLE_MAX_LENGTH"]
