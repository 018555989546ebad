"""Use case for materializing a bulk request into per-recipient records."""

from __future__ import annotations

import copy
import logging
from datetime import datetime
from uuid import uuid4

from campus_notify.application.use_cases.audience import resolve_audience_detailed
from campus_notify.domain.entities import (
    BulkNotificationRequest,
    Directory,
    NotificationCategory,
    NotificationPriority,
    NotificationRecord,
    NotificationStatus,
    NotificationType,
    Sender,
    UserRole,
)
from campus_notify.domain.errors import InvalidAudienceSpec
from campus_notify.utils import ensure_app_timezone, now_in_app_timezone

from .validators import ensure_valid_request

logger = logging.getLogger(__name__)


def create_broadcast(
    request: BulkNotificationRequest,
    directory: Directory,
    *,
    sender: Sender,
    now: datetime | None = None,
) -> list[NotificationRecord]:
    """Return one record per resolved recipient sharing a new broadcast id.

    Records start ``scheduled`` when the request carries a future
    ``scheduled_at`` and ``draft`` otherwise. Nothing is created when the
    audience resolves to nobody.
    """

    current = ensure_app_timezone(now) or now_in_app_timezone()
    ensure_valid_request(request, now=current)

    resolution = resolve_audience_detailed(request.target_audience, directory)
    if not resolution.recipient_ids:
        raise InvalidAudienceSpec("The target audience does not contain any recipient")

    scheduled_at = ensure_app_timezone(request.scheduled_at)
    status = (
        NotificationStatus.SCHEDULED
        if scheduled_at is not None and scheduled_at > current
        else NotificationStatus.DRAFT
    )
    broadcast_id = uuid4().hex
    metadata = dict(request.metadata or {})
    if request.template_id:
        metadata.setdefault("template_id", request.template_id)

    records = [
        NotificationRecord(
            id=uuid4().hex,
            type=NotificationType(request.type),
            category=NotificationCategory(request.category),
            priority=NotificationPriority(request.priority),
            status=status,
            title=request.title.strip(),
            content=request.content,
            sender_id=sender.id,
            sender_role=UserRole(sender.role),
            sender_name=sender.name,
            recipient_id=recipient_id,
            broadcast_id=broadcast_id,
            created_at=current,
            scheduled_at=scheduled_at,
            expires_at=ensure_app_timezone(request.expires_at),
            metadata=copy.deepcopy(metadata),
        )
        for recipient_id in resolution.recipient_ids
    ]

    logger.info(
        "Broadcast %s created by %s for %s recipients (%s)",
        broadcast_id,
        sender.id,
        len(records),
        status.value,
    )
    if resolution.dropped:
        logger.warning(
            "Broadcast %s dropped %s unknown recipients",
            broadcast_id,
            len(resolution.dropped),
        )
    return records


__all__ = ["create_broadcast"]
