"""Aggregated notification metrics consumed by dashboards."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class Lookback(str, Enum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"

    @property
    def days(self) -> int:
        return {"week": 7, "month": 30, "quarter": 90}[self.value]


@dataclass(frozen=True)
class ActivityBucket:
    date: date
    sent: int = 0
    delivered: int = 0
    read: int = 0
    clicked: int = 0


@dataclass(frozen=True)
class StatsSnapshot:
    total: int
    unread: int
    by_type: dict[str, int]
    by_category: dict[str, int]
    by_priority: dict[str, int]
    by_status: dict[str, int]
    activity: tuple[ActivityBucket, ...]


__all__ = ["Lookback", "ActivityBucket", "StatsSnapshot"]
