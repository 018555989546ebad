"""Domain entity representing a materialized per-recipient notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    SYSTEM = "system"
    ANNOUNCEMENT = "announcement"
    ASSIGNMENT = "assignment"
    REMINDER = "reminder"
    GRADE = "grade"
    COURSE = "course"
    EXPERIMENT = "experiment"
    DISCUSSION = "discussion"
    DEADLINE = "deadline"
    MAINTENANCE = "maintenance"
    SECURITY = "security"
    ACHIEVEMENT = "achievement"


class NotificationCategory(str, Enum):
    ACADEMIC = "academic"
    ADMINISTRATIVE = "administrative"
    SOCIAL = "social"
    TECHNICAL = "technical"
    PERSONAL = "personal"


class NotificationPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class NotificationStatus(str, Enum):
    """Lifecycle states, declared in lifecycle progression order."""

    DRAFT = "draft"
    SCHEDULED = "scheduled"
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    ARCHIVED = "archived"
    FAILED = "failed"


class UserRole(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


@dataclass
class NotificationRecord:
    """Notification delivered to exactly one recipient.

    Records are created in ``draft`` or ``scheduled`` state by the broadcast use
    cases and only change status through the lifecycle engine.
    """

    id: str
    type: NotificationType
    category: NotificationCategory
    priority: NotificationPriority
    status: NotificationStatus
    title: str
    content: str
    sender_id: str
    sender_role: UserRole
    recipient_id: str
    created_at: datetime
    broadcast_id: str | None = None
    sender_name: str | None = None
    scheduled_at: datetime | None = None
    sent_at: datetime | None = None
    delivered_at: datetime | None = None
    read_at: datetime | None = None
    archived_at: datetime | None = None
    expires_at: datetime | None = None
    failure_reason: str | None = None
    clicks: list[datetime] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def click_count(self) -> int:
        return len(self.clicks)

    @property
    def is_read(self) -> bool:
        return self.status is NotificationStatus.READ

    @property
    def is_archived(self) -> bool:
        return self.status is NotificationStatus.ARCHIVED

    def is_expired(self, now: datetime) -> bool:
        """Return ``True`` once ``expires_at`` lies in the past."""

        return self.expires_at is not None and self.expires_at <= now


__all__ = [
    "NotificationType",
    "NotificationCategory",
    "NotificationPriority",
    "NotificationStatus",
    "UserRole",
    "NotificationRecord",
]
