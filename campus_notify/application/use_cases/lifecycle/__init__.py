"""Lifecycle state machine for materialized notifications."""

from .engine import Clock, LifecycleEngine
from .transitions import ALLOWED_TRANSITIONS, TERMINAL_STATUSES, is_allowed

__all__ = [
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    "Clock",
    "LifecycleEngine",
    "is_allowed",
]
