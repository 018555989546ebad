"""Use cases for building bulk requests out of notification templates."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from campus_notify.domain.entities import (
    BulkNotificationRequest,
    NotificationPriority,
    NotificationTemplate,
    TargetAudienceSpec,
)

_PLACEHOLDER_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def find_placeholders(text: str) -> list[str]:
    """Return the ``{variable}`` names used in ``text`` in order of appearance."""

    names: list[str] = []
    for match in _PLACEHOLDER_PATTERN.finditer(text or ""):
        name = match.group(1)
        if name not in names:
            names.append(name)
    return names


def validate_template(template: NotificationTemplate) -> NotificationTemplate:
    """Ensure every placeholder in the template is a declared variable."""

    if not template.name.strip():
        raise ValueError("The template name cannot be empty")

    declared = [variable.name for variable in template.variables]
    duplicates = sorted({name for name in declared if declared.count(name) > 1})
    if duplicates:
        raise ValueError(f"Template variables declared twice: {', '.join(duplicates)}")

    used = find_placeholders(template.title) + find_placeholders(template.content)
    undeclared = [name for name in dict.fromkeys(used) if name not in declared]
    if undeclared:
        raise ValueError(f"Template uses undeclared variables: {', '.join(undeclared)}")
    return template


def build_request_from_template(
    template: NotificationTemplate,
    target_audience: TargetAudienceSpec,
    *,
    priority: NotificationPriority | None = None,
    scheduled_at: datetime | None = None,
    expires_at: datetime | None = None,
    metadata: dict[str, Any] | None = None,
) -> BulkNotificationRequest:
    """Copy the template content into a request addressed to ``target_audience``.

    Placeholders are kept verbatim; substituting them is left to the renderer.
    """

    if not template.is_active:
        raise ValueError(f"Template '{template.name}' is not active")
    validate_template(template)

    return BulkNotificationRequest(
        type=template.type,
        category=template.category,
        title=template.title,
        content=template.content,
        priority=priority or template.priority,
        target_audience=target_audience,
        scheduled_at=scheduled_at,
        expires_at=expires_at,
        metadata=dict(metadata or {}),
        template_id=template.id,
    )


__all__ = ["build_request_from_template", "find_placeholders", "validate_template"]
