"""Filter presets backing the tabs of the notification centre."""

from __future__ import annotations

from dataclasses import replace

from campus_notify.domain.entities import FilterSpec, NotificationStatus

TAB_PRESETS: dict[str, FilterSpec] = {
    "all": FilterSpec(),
    "unread": FilterSpec(unread_only=True),
    "sent": FilterSpec(status=(NotificationStatus.SENT,)),
    "drafts": FilterSpec(status=(NotificationStatus.DRAFT,)),
    "archived": FilterSpec(status=(NotificationStatus.ARCHIVED,)),
}


def spec_for_tab(tab: str, base: FilterSpec | None = None) -> FilterSpec:
    """Combine the preset for ``tab`` with the user's own ``base`` filters."""

    try:
        preset = TAB_PRESETS[tab]
    except KeyError as exc:
        raise ValueError(f"Unknown notification tab '{tab}'") from exc

    if base is None:
        return preset
    return replace(
        base,
        status=preset.status or base.status,
        unread_only=preset.unread_only or base.unread_only,
    )


__all__ = ["TAB_PRESETS", "spec_for_tab"]
