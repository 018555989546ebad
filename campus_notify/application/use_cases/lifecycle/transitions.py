"""Legal lifecycle transitions for materialized notifications."""

from campus_notify.domain.entities import NotificationStatus

DRAFT = NotificationStatus.DRAFT
SCHEDULED = NotificationStatus.SCHEDULED
SENT = NotificationStatus.SENT
DELIVERED = NotificationStatus.DELIVERED
READ = NotificationStatus.READ
ARCHIVED = NotificationStatus.ARCHIVED
FAILED = NotificationStatus.FAILED

ALLOWED_TRANSITIONS: dict[NotificationStatus, frozenset[NotificationStatus]] = {
    DRAFT: frozenset({SCHEDULED, SENT, ARCHIVED}),
    SCHEDULED: frozenset({SENT, FAILED, ARCHIVED}),
    SENT: frozenset({DELIVERED, FAILED, ARCHIVED}),
    DELIVERED: frozenset({READ, ARCHIVED}),
    READ: frozenset({DELIVERED, ARCHIVED}),
    # Only reachable through an explicit, bounded redispatch.
    FAILED: frozenset({SCHEDULED}),
    ARCHIVED: frozenset(),
}

TERMINAL_STATUSES = frozenset({ARCHIVED, FAILED})


def is_allowed(source: NotificationStatus, target: NotificationStatus) -> bool:
    """Return ``True`` when ``source -> target`` appears in the table."""

    return target in ALLOWED_TRANSITIONS.get(source, frozenset())


__all__ = ["ALLOWED_TRANSITIONS", "TERMINAL_STATUSES", "is_allowed"]
