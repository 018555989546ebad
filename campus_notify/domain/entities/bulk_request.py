"""Input describing a notification addressed to an audience."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .audience import TargetAudienceSpec
from .notification import (
    NotificationCategory,
    NotificationPriority,
    NotificationType,
    UserRole,
)


@dataclass(frozen=True)
class Sender:
    """Author of a broadcast; authorization has been checked upstream."""

    id: str
    role: UserRole
    name: str | None = None


@dataclass
class BulkNotificationRequest:
    """Content plus audience, before expansion into per-recipient records."""

    type: NotificationType
    category: NotificationCategory
    title: str
    content: str
    priority: NotificationPriority
    target_audience: TargetAudienceSpec
    scheduled_at: datetime | None = None
    expires_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    template_id: str | None = None


__all__ = ["Sender", "BulkNotificationRequest"]
