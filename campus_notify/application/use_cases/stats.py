"""Use case for computing notification metrics for dashboards."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from campus_notify.domain.entities import (
    ActivityBucket,
    Lookback,
    NotificationCategory,
    NotificationPriority,
    NotificationRecord,
    NotificationStatus,
    NotificationType,
    StatsSnapshot,
)
from campus_notify.utils import app_local_date, ensure_app_timezone, now_in_app_timezone

_UNREAD_STATUSES = frozenset({NotificationStatus.SENT, NotificationStatus.DELIVERED})


def aggregate_stats(
    records: Iterable[NotificationRecord],
    *,
    lookback: Lookback | str = Lookback.WEEK,
    now: datetime | None = None,
) -> StatsSnapshot:
    """Fold ``records`` into counts without touching any of them.

    Archived notifications only show up in ``by_status["archived"]``. Every
    enum value is present in the breakdowns and every day of the lookback
    window has a bucket, zero-filled when nothing happened.
    """

    current = ensure_app_timezone(now) or now_in_app_timezone()
    window = Lookback(lookback)
    days = _window_days(app_local_date(current), window.days)

    by_type = _zeroed(NotificationType)
    by_category = _zeroed(NotificationCategory)
    by_priority = _zeroed(NotificationPriority)
    by_status = _zeroed(NotificationStatus)
    activity: dict[date, Counter] = {day: Counter() for day in days}

    total = 0
    unread = 0
    for record in records:
        status = NotificationStatus(record.status)
        by_status[status.value] += 1
        _count_activity(activity, record)
        if status is NotificationStatus.ARCHIVED:
            continue

        total += 1
        if status in _UNREAD_STATUSES:
            unread += 1
        by_type[NotificationType(record.type).value] += 1
        by_category[NotificationCategory(record.category).value] += 1
        by_priority[NotificationPriority(record.priority).value] += 1

    return StatsSnapshot(
        total=total,
        unread=unread,
        by_type=by_type,
        by_category=by_category,
        by_priority=by_priority,
        by_status=by_status,
        activity=tuple(
            ActivityBucket(
                date=day,
                sent=activity[day]["sent"],
                delivered=activity[day]["delivered"],
                read=activity[day]["read"],
                clicked=activity[day]["clicked"],
            )
            for day in days
        ),
    )


def _window_days(today: date, length: int) -> list[date]:
    """Return ``length`` consecutive days ending with ``today``, oldest first."""

    start = today - timedelta(days=length - 1)
    return [start + timedelta(days=offset) for offset in range(length)]


def _zeroed(enum_cls) -> dict[str, int]:
    return {member.value: 0 for member in enum_cls}


def _count_activity(activity: dict[date, Counter], record: NotificationRecord) -> None:
    events = (
        ("sent", record.sent_at),
        ("delivered", record.delivered_at),
        ("read", record.read_at),
    )
    for name, moment in events:
        if moment is not None:
            _bump(activity, name, moment)
    for clicked_at in record.clicks:
        _bump(activity, "clicked", clicked_at)


def _bump(activity: dict[date, Counter], name: str, moment: datetime) -> None:
    day = app_local_date(moment)
    bucket = activity.get(day)
    if bucket is not None:
        bucket[name] += 1


__all__ = ["aggregate_stats"]
