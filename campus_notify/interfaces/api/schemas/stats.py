"""Pydantic models describing dashboard metrics."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict


class ActivityBucketRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date
    sent: int
    delivered: int
    read: int
    clicked: int


class StatsSnapshotRead(BaseModel):
    """Métricas agregadas del panel de notificaciones."""

    model_config = ConfigDict(from_attributes=True)

    total: int
    unread: int
    by_type: dict[str, int]
    by_category: dict[str, int]
    by_priority: dict[str, int]
    by_status: dict[str, int]
    activity: list[ActivityBucketRead]


__all__ = ["ActivityBucketRead", "StatsSnapshotRead"]
