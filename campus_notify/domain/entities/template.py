"""Reusable notification content authored by staff."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .notification import NotificationCategory, NotificationPriority, NotificationType


@dataclass(frozen=True)
class TemplateVariable:
    name: str
    type: str = "string"
    description: str = ""
    required: bool = False
    default_value: Any = None


@dataclass
class NotificationTemplate:
    id: str
    name: str
    type: NotificationType
    category: NotificationCategory
    title: str
    content: str
    priority: NotificationPriority = NotificationPriority.NORMAL
    is_active: bool = True
    variables: list[TemplateVariable] = field(default_factory=list)
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


__all__ = ["TemplateVariable", "NotificationTemplate"]
