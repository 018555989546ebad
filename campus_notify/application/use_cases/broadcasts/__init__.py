"""Use cases for creating and steering broadcasts."""

from .create_broadcast import create_broadcast
from .manage_broadcast import (
    EDITABLE_FIELDS,
    cancel_broadcast,
    dispatch_broadcast,
    fire_due_scheduled,
    update_broadcast,
)
from .validators import ensure_valid_request, ensure_valid_schedule

__all__ = [
    "EDITABLE_FIELDS",
    "cancel_broadcast",
    "create_broadcast",
    "dispatch_broadcast",
    "ensure_valid_request",
    "ensure_valid_schedule",
    "fire_due_scheduled",
    "update_broadcast",
]
