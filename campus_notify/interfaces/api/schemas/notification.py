"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from campus_notify.domain.entities import (
    BulkNotificationRequest,
    NotificationCategory,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    UserRole,
)

from .audience import TargetAudiencePayload


class SenderPayload(BaseModel):
    id: str = Field(..., min_length=1, description="Identificador del remitente")
    role: UserRole
    name: str | None = None


class BroadcastCreate(BaseModel):
    """Payload used to send one notification to a whole audience."""

    sender: SenderPayload
    type: NotificationType
    category: NotificationCategory
    title: str = Field(..., min_length=1, max_length=120)
    content: str = Field(..., min_length=1)
    priority: NotificationPriority = NotificationPriority.NORMAL
    target_audience: TargetAudiencePayload
    scheduled_at: datetime | None = None
    expires_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    template_id: str | None = None
    dispatch_now: bool = Field(
        default=False,
        description="Envía de inmediato los borradores creados",
    )

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value

    def to_domain(self) -> BulkNotificationRequest:
        return BulkNotificationRequest(
            type=self.type,
            category=self.category,
            title=self.title,
            content=self.content,
            priority=self.priority,
            target_audience=self.target_audience.to_domain(),
            scheduled_at=self.scheduled_at,
            expires_at=self.expires_at,
            metadata=dict(self.metadata),
            template_id=self.template_id,
        )


class BroadcastUpdate(BaseModel):
    """Campos editables de una difusión que aún no se envió."""

    title: str | None = Field(default=None, min_length=1, max_length=120)
    content: str | None = Field(default=None, min_length=1)
    priority: NotificationPriority | None = None
    expires_at: datetime | None = None
    metadata: dict[str, Any] | None = None

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    broadcast_id: str | None = None
    type: NotificationType
    category: NotificationCategory
    priority: NotificationPriority
    status: NotificationStatus
    title: str
    content: str
    sender_id: str
    sender_role: UserRole
    sender_name: str | None = None
    recipient_id: str
    created_at: datetime
    scheduled_at: datetime | None = None
    sent_at: datetime | None = None
    delivered_at: datetime | None = None
    read_at: datetime | None = None
    archived_at: datetime | None = None
    expires_at: datetime | None = None
    failure_reason: str | None = None
    click_count: int = 0
    metadata: dict[str, Any] = Field(default_factory=dict)


class FilteredViewRead(BaseModel):
    records: list[NotificationRead]
    total_count: int


class RedispatchRequest(BaseModel):
    attempt: int = Field(..., ge=1, description="Número de reintento llevado por el cliente")
    scheduled_at: datetime | None = None


class FailureReport(BaseModel):
    reason: str = Field(..., min_length=1, max_length=255)


__all__ = [
    "BroadcastCreate",
    "BroadcastUpdate",
    "FailureReport",
    "FilteredViewRead",
    "NotificationRead",
    "RedispatchRequest",
    "SenderPayload",
]
