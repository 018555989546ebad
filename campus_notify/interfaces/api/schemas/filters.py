"""Pydantic model translating listing parameters into a filter spec."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from campus_notify.domain.entities import (
    DateRange,
    FilterSpec,
    NotificationCategory,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    SortField,
    SortOrder,
)


class NotificationFilterParams(BaseModel):
    """Criterios de búsqueda y orden del centro de notificaciones."""

    types: list[NotificationType] = Field(default_factory=list)
    categories: list[NotificationCategory] = Field(default_factory=list)
    priorities: list[NotificationPriority] = Field(default_factory=list)
    status: list[NotificationStatus] = Field(default_factory=list)
    start: datetime | None = None
    end: datetime | None = None
    sender_id: str | None = None
    recipient_id: str | None = None
    search: str | None = None
    unread_only: bool = False
    include_expired: bool = False
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    limit: int | None = Field(default=None, ge=0)
    offset: int = Field(default=0, ge=0)

    def to_domain(self) -> FilterSpec:
        date_range = None
        if self.start is not None or self.end is not None:
            date_range = DateRange(start=self.start, end=self.end)
        return FilterSpec(
            types=tuple(self.types),
            categories=tuple(self.categories),
            priorities=tuple(self.priorities),
            status=tuple(self.status),
            date_range=date_range,
            sender_id=self.sender_id,
            recipient_id=self.recipient_id,
            search=self.search,
            unread_only=self.unread_only,
            include_expired=self.include_expired,
            sort_by=self.sort_by,
            sort_order=self.sort_order,
            limit=self.limit,
            offset=self.offset,
        )


__all__ = ["NotificationFilterParams"]
