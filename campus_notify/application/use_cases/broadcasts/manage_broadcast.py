"""Use cases acting on every record of a broadcast at once."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from campus_notify.application.use_cases.lifecycle import LifecycleEngine
from campus_notify.domain.entities import (
    BatchResult,
    NotificationPriority,
    NotificationRecord,
    NotificationStatus,
)
from campus_notify.domain.errors import IllegalTransition
from campus_notify.utils import ensure_app_timezone

from .validators import ensure_valid_schedule, normalize_title

logger = logging.getLogger(__name__)

_UNSENT = frozenset({NotificationStatus.DRAFT, NotificationStatus.SCHEDULED})
EDITABLE_FIELDS = frozenset({"title", "content", "priority", "expires_at", "metadata"})


def dispatch_broadcast(
    engine: LifecycleEngine,
    records: Iterable[NotificationRecord],
    *,
    now: datetime | None = None,
) -> BatchResult:
    """Send every draft of a broadcast immediately."""

    result = BatchResult()
    for record in records:
        if NotificationStatus(record.status) is not NotificationStatus.DRAFT:
            result.skip(record.id, "not_draft")
            continue
        _run(result, record, lambda: engine.dispatch(record, now=now))
    _log_result("dispatch", result)
    return result


def fire_due_scheduled(
    engine: LifecycleEngine,
    records: Iterable[NotificationRecord],
    *,
    now: datetime | None = None,
) -> BatchResult:
    """Send scheduled records whose time has come.

    Called by the external scheduler; records that are not due are left alone
    and do not appear in the result.
    """

    current = ensure_app_timezone(now) or engine.now()
    result = BatchResult()
    for record in records:
        if NotificationStatus(record.status) is not NotificationStatus.SCHEDULED:
            continue
        if record.scheduled_at is not None and record.scheduled_at > current:
            continue
        if record.is_expired(current):
            _run(result, record, lambda: engine.mark_failed(record, "expired", now=current))
            continue
        _run(result, record, lambda: engine.dispatch(record, now=current))
    _log_result("fire_due", result)
    return result


def cancel_broadcast(
    engine: LifecycleEngine,
    records: Iterable[NotificationRecord],
    *,
    now: datetime | None = None,
) -> BatchResult:
    """Withdraw every record that has not been sent yet."""

    result = BatchResult()
    for record in records:
        status = NotificationStatus(record.status)
        if status not in _UNSENT:
            reason = "already_archived" if status is NotificationStatus.ARCHIVED else "already_sent"
            result.skip(record.id, reason)
            continue
        _run(result, record, lambda: engine.cancel(record, now=now))
    _log_result("cancel", result)
    return result


def update_broadcast(
    records: Iterable[NotificationRecord],
    changes: Mapping[str, Any],
) -> BatchResult:
    """Edit the content of records that are still draft or scheduled."""

    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

    normalized = dict(changes)
    if "title" in normalized:
        normalized["title"] = normalize_title(normalized["title"])
    if "content" in normalized and not (normalized["content"] or "").strip():
        raise ValueError("The notification content cannot be empty")
    if "priority" in normalized:
        normalized["priority"] = NotificationPriority(normalized["priority"])
    if "expires_at" in normalized:
        normalized["expires_at"] = ensure_app_timezone(normalized["expires_at"])

    result = BatchResult()
    for record in records:
        if NotificationStatus(record.status) not in _UNSENT:
            result.skip(record.id, "already_sent")
            continue
        if "expires_at" in normalized:
            try:
                ensure_valid_schedule(
                    created_at=record.created_at,
                    scheduled_at=record.scheduled_at,
                    expires_at=normalized["expires_at"],
                )
            except ValueError as exc:
                result.skip(record.id, "invalid_schedule", str(exc))
                continue
        for name, value in normalized.items():
            setattr(record, name, dict(value) if name == "metadata" else value)
        result.succeeded.append(record.id)
    _log_result("update", result)
    return result


def _run(result: BatchResult, record: NotificationRecord, action) -> None:
    try:
        action()
    except IllegalTransition as exc:
        result.skip(record.id, exc.reason, str(exc))
    else:
        result.succeeded.append(record.id)


def _log_result(action: str, result: BatchResult) -> None:
    logger.info(
        "Broadcast %s: %s succeeded, %s skipped",
        action,
        len(result.succeeded),
        len(result.skipped),
    )


__all__ = [
    "EDITABLE_FIELDS",
    "cancel_broadcast",
    "dispatch_broadcast",
    "fire_due_scheduled",
    "update_broadcast",
]
