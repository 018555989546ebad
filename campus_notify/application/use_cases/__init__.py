"""Aggregate application use cases."""

from .audience import resolve_audience
from .filtering import filter_notifications
from .lifecycle import LifecycleEngine
from .selection import SelectionManager
from .stats import aggregate_stats

__all__ = [
    "resolve_audience",
    "filter_notifications",
    "LifecycleEngine",
    "SelectionManager",
    "aggregate_stats",
]
