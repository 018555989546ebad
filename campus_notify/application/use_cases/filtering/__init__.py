"""Filtering and ordering of notification collections."""

from .filter_notifications import (
    PRIORITY_RANK,
    STATUS_RANK,
    build_predicate,
    filter_notifications,
    sort_notifications,
)
from .presets import TAB_PRESETS, spec_for_tab

__all__ = [
    "PRIORITY_RANK",
    "STATUS_RANK",
    "TAB_PRESETS",
    "build_predicate",
    "filter_notifications",
    "sort_notifications",
    "spec_for_tab",
]
