"""Utility helpers for reusable functionality."""

from .datetime import (
    app_local_date,
    ensure_app_naive_datetime,
    ensure_app_timezone,
    get_app_timezone,
    now_in_app_timezone,
    reset_app_timezone_cache,
)

__all__ = [
    "app_local_date",
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "get_app_timezone",
    "now_in_app_timezone",
    "reset_app_timezone_cache",
]
