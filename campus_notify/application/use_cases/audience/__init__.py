"""Use cases that turn audience specifications into recipients."""

from .resolve_audience import preview_audience, resolve_audience, resolve_audience_detailed
from .search_students import search_students
from .validators import ensure_valid_audience

__all__ = [
    "ensure_valid_audience",
    "preview_audience",
    "resolve_audience",
    "resolve_audience_detailed",
    "search_students",
]
