"""Selection tracking and batch operations."""

from .selection_manager import SelectionManager

__all__ = ["SelectionManager"]
