"""Central enforcement of the notification lifecycle."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from campus_notify.domain.entities import NotificationRecord, NotificationStatus
from campus_notify.domain.errors import IllegalTransition, RetryLimitExceeded
from campus_notify.utils import ensure_app_timezone, now_in_app_timezone

from .transitions import is_allowed

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class LifecycleEngine:
    """Apply status transitions to records in place.

    Every status change in the system goes through :meth:`transition`, so an
    archived notification can never be marked as read and a failed one is only
    revived by :meth:`redispatch`. A rejected transition raises
    :class:`IllegalTransition` and leaves the record untouched.
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        max_redispatch_attempts: int | None = None,
    ) -> None:
        self._clock = clock or now_in_app_timezone
        self._max_redispatch_attempts = max_redispatch_attempts

    def now(self) -> datetime:
        return self._clock()

    def can_transition(
        self, record: NotificationRecord, target: NotificationStatus
    ) -> bool:
        source = NotificationStatus(record.status)
        if source is NotificationStatus.FAILED:
            return False
        return is_allowed(source, NotificationStatus(target))

    def transition(
        self,
        record: NotificationRecord,
        target: NotificationStatus,
        *,
        now: datetime | None = None,
        reason: str | None = None,
    ) -> NotificationRecord:
        """Move ``record`` to ``target`` applying the timestamp side effects."""

        target = NotificationStatus(target)
        source = NotificationStatus(record.status)
        if target is NotificationStatus.SCHEDULED and is_allowed(source, target):
            if source is NotificationStatus.FAILED:
                raise IllegalTransition(
                    record.id, source.value, target.value, "failed notifications need an explicit redispatch"
                )
            return self.schedule(record, record.scheduled_at, now=now)
        return self._apply(record, target, now=now, reason=reason)

    def schedule(
        self,
        record: NotificationRecord,
        scheduled_at: datetime,
        *,
        now: datetime | None = None,
    ) -> NotificationRecord:
        """Queue a draft for a future send."""

        source = NotificationStatus(record.status)
        if source is not NotificationStatus.DRAFT:
            raise IllegalTransition(record.id, source.value, NotificationStatus.SCHEDULED.value)
        current = self._resolve_now(now)
        scheduled_at = ensure_app_timezone(scheduled_at)
        self._check_schedule(record, scheduled_at, current)
        return self._apply(
            record, NotificationStatus.SCHEDULED, now=current, scheduled_at=scheduled_at
        )

    def dispatch(self, record: NotificationRecord, *, now: datetime | None = None) -> NotificationRecord:
        return self.transition(record, NotificationStatus.SENT, now=now)

    def confirm_delivery(
        self, record: NotificationRecord, *, now: datetime | None = None
    ) -> NotificationRecord:
        return self.transition(record, NotificationStatus.DELIVERED, now=now)

    def mark_failed(
        self,
        record: NotificationRecord,
        reason: str,
        *,
        now: datetime | None = None,
    ) -> NotificationRecord:
        return self.transition(record, NotificationStatus.FAILED, now=now, reason=reason)

    def mark_read(self, record: NotificationRecord, *, now: datetime | None = None) -> NotificationRecord:
        return self.transition(record, NotificationStatus.READ, now=now)

    def mark_unread(
        self, record: NotificationRecord, *, now: datetime | None = None
    ) -> NotificationRecord:
        if NotificationStatus(record.status) is not NotificationStatus.READ:
            raise IllegalTransition(
                record.id, NotificationStatus(record.status).value, "delivered", "only read notifications can be marked unread"
            )
        return self.transition(record, NotificationStatus.DELIVERED, now=now)

    def archive(self, record: NotificationRecord, *, now: datetime | None = None) -> NotificationRecord:
        return self.transition(record, NotificationStatus.ARCHIVED, now=now)

    def cancel(self, record: NotificationRecord, *, now: datetime | None = None) -> NotificationRecord:
        """Withdraw a notification that has not been sent yet."""

        source = NotificationStatus(record.status)
        if source not in (NotificationStatus.DRAFT, NotificationStatus.SCHEDULED):
            raise IllegalTransition(
                record.id, source.value, NotificationStatus.ARCHIVED.value, "only unsent notifications can be cancelled"
            )
        return self.transition(record, NotificationStatus.ARCHIVED, now=now)

    def redispatch(
        self,
        record: NotificationRecord,
        *,
        attempt: int,
        max_attempts: int | None = None,
        scheduled_at: datetime | None = None,
        now: datetime | None = None,
    ) -> NotificationRecord:
        """Put a failed notification back in the schedule.

        ``attempt`` is the 1-based retry number tracked by the caller; it must
        not exceed ``max_attempts`` (or the engine default).
        """

        source = NotificationStatus(record.status)
        target = NotificationStatus.SCHEDULED
        if source is not NotificationStatus.FAILED:
            raise IllegalTransition(
                record.id, source.value, target.value, "only failed notifications can be redispatched"
            )

        limit = max_attempts if max_attempts is not None else self._max_redispatch_attempts
        if limit is not None and attempt > limit:
            raise RetryLimitExceeded(
                record.id, source.value, target.value, f"attempt {attempt} exceeds the limit of {limit}"
            )

        current = self._resolve_now(now)
        when = ensure_app_timezone(scheduled_at) or current
        if when < record.created_at:
            raise IllegalTransition(
                record.id, source.value, target.value, "scheduled_at cannot precede created_at"
            )
        if record.expires_at is not None and record.expires_at <= when:
            raise IllegalTransition(
                record.id, source.value, target.value, "the notification expires before it could be resent"
            )
        return self._apply(record, target, now=current, scheduled_at=when)

    def record_click(
        self, record: NotificationRecord, *, now: datetime | None = None
    ) -> NotificationRecord:
        """Count a click on the notification's action link.

        Clicks are tracked independently of status; only notifications that
        reached the recipient can be clicked.
        """

        status = NotificationStatus(record.status)
        if status not in (NotificationStatus.DELIVERED, NotificationStatus.READ):
            raise IllegalTransition(record.id, status.value, status.value, "only delivered notifications can be clicked")
        record.clicks.append(self._resolve_now(now))
        return record

    def _apply(
        self,
        record: NotificationRecord,
        target: NotificationStatus,
        *,
        now: datetime | None,
        reason: str | None = None,
        scheduled_at: datetime | None = None,
    ) -> NotificationRecord:
        source = NotificationStatus(record.status)
        if not is_allowed(source, target):
            raise IllegalTransition(record.id, source.value, target.value)

        current = self._resolve_now(now)
        changes: dict[str, object] = {"status": target}

        if source is NotificationStatus.READ:
            changes["read_at"] = None

        if target is NotificationStatus.SCHEDULED:
            changes["scheduled_at"] = scheduled_at
            changes["failure_reason"] = None
        elif target is NotificationStatus.SENT:
            changes["sent_at"] = current
        elif target is NotificationStatus.DELIVERED:
            if source is NotificationStatus.SENT:
                changes["delivered_at"] = current
        elif target is NotificationStatus.READ:
            changes["read_at"] = current
        elif target is NotificationStatus.FAILED:
            changes["failure_reason"] = reason or "dispatch_error"
        elif target is NotificationStatus.ARCHIVED:
            changes["archived_at"] = current

        for name, value in changes.items():
            setattr(record, name, value)

        logger.debug(
            "Notification %s moved from %s to %s", record.id, source.value, target.value
        )
        return record

    def _check_schedule(
        self, record: NotificationRecord, scheduled_at: datetime | None, now: datetime
    ) -> None:
        source = NotificationStatus(record.status).value
        target = NotificationStatus.SCHEDULED.value
        if scheduled_at is None or scheduled_at <= now:
            raise IllegalTransition(record.id, source, target, "scheduled_at must be in the future")
        if scheduled_at < record.created_at:
            raise IllegalTransition(record.id, source, target, "scheduled_at cannot precede created_at")
        if record.expires_at is not None and record.expires_at <= scheduled_at:
            raise IllegalTransition(record.id, source, target, "expires_at must be after scheduled_at")

    def _resolve_now(self, now: datetime | None) -> datetime:
        return ensure_app_timezone(now) or self._clock()


__all__ = ["LifecycleEngine", "Clock"]
