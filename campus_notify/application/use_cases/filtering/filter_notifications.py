"""Filter, sort and paginate notification collections for display."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime

from campus_notify.domain.entities import (
    DateRange,
    FilteredView,
    FilterSpec,
    NotificationPriority,
    NotificationRecord,
    NotificationStatus,
    SortField,
    SortOrder,
)
from campus_notify.utils import ensure_app_timezone, now_in_app_timezone

PRIORITY_RANK: dict[NotificationPriority, int] = {
    NotificationPriority.LOW: 0,
    NotificationPriority.NORMAL: 1,
    NotificationPriority.HIGH: 2,
    NotificationPriority.URGENT: 3,
}

STATUS_RANK: dict[NotificationStatus, int] = {
    status: index for index, status in enumerate(NotificationStatus)
}

_SORT_KEYS: dict[SortField, Callable[[NotificationRecord], object]] = {
    SortField.CREATED_AT: lambda record: record.created_at,
    SortField.PRIORITY: lambda record: PRIORITY_RANK[NotificationPriority(record.priority)],
    SortField.STATUS: lambda record: STATUS_RANK[NotificationStatus(record.status)],
}


def filter_notifications(
    records: Iterable[NotificationRecord],
    spec: FilterSpec | None = None,
    *,
    now: datetime | None = None,
) -> FilteredView:
    """Return the ordered page of ``records`` matching ``spec``.

    The input collection is never mutated. Archived notifications are hidden
    unless the status axis asks for them, and expired ones unless
    ``include_expired`` is set. Records with equal sort keys are ordered by id
    so the same spec always yields the same sequence.
    """

    spec = spec or FilterSpec()
    current = ensure_app_timezone(now) or now_in_app_timezone()
    predicate = build_predicate(spec, now=current)
    matched = [record for record in records if predicate(record)]
    ordered = sort_notifications(matched, spec.sort_by, spec.sort_order)
    return FilteredView(
        records=tuple(_paginate(ordered, spec.limit, spec.offset)),
        total_count=len(ordered),
        spec=spec,
    )


def build_predicate(
    spec: FilterSpec, *, now: datetime
) -> Callable[[NotificationRecord], bool]:
    """Compile ``spec`` into a single record predicate (AND across axes)."""

    types = set(_values(spec.types))
    categories = set(_values(spec.categories))
    priorities = set(_values(spec.priorities))
    statuses = set(_values(spec.status))
    include_archived = NotificationStatus.ARCHIVED.value in statuses
    needle = (spec.search or "").strip().lower()
    date_range = _normalize_range(spec.date_range)

    def predicate(record: NotificationRecord) -> bool:
        status = NotificationStatus(record.status).value
        if status == NotificationStatus.ARCHIVED.value and not include_archived:
            return False
        if not spec.include_expired and record.is_expired(now):
            return False
        if types and _value(record.type) not in types:
            return False
        if categories and _value(record.category) not in categories:
            return False
        if priorities and _value(record.priority) not in priorities:
            return False
        if statuses and status not in statuses:
            return False
        if spec.unread_only and status == NotificationStatus.READ.value:
            return False
        if date_range is not None and not date_range.contains(record.created_at):
            return False
        if spec.sender_id and record.sender_id != spec.sender_id:
            return False
        if spec.recipient_id and record.recipient_id != spec.recipient_id:
            return False
        if needle and not _matches_search(record, needle):
            return False
        return True

    return predicate


def sort_notifications(
    records: Iterable[NotificationRecord],
    sort_by: SortField = SortField.CREATED_AT,
    sort_order: SortOrder = SortOrder.DESC,
) -> list[NotificationRecord]:
    """Sort by ``sort_by`` with an ascending id tie-break in both directions."""

    key = _SORT_KEYS[SortField(sort_by)]
    by_id = sorted(records, key=lambda record: record.id)
    if SortOrder(sort_order) is SortOrder.DESC:
        # ``reverse`` keeps equal elements in their original (id) order.
        return sorted(by_id, key=key, reverse=True)
    return sorted(by_id, key=key)


def _normalize_range(date_range: DateRange | None) -> DateRange | None:
    """Express naive bounds in the app timezone so they compare with ``created_at``."""

    if date_range is None:
        return None
    return DateRange(
        start=ensure_app_timezone(date_range.start),
        end=ensure_app_timezone(date_range.end),
    )


def _matches_search(record: NotificationRecord, needle: str) -> bool:
    haystacks = (record.title, record.content, record.sender_name or "")
    return any(needle in haystack.lower() for haystack in haystacks)


def _paginate(
    records: list[NotificationRecord], limit: int | None, offset: int
) -> list[NotificationRecord]:
    start = max(offset or 0, 0)
    if limit is None:
        return records[start:]
    return records[start : start + max(limit, 0)]


def _values(values) -> list[str]:
    return [_value(value) for value in values or ()]


def _value(value) -> str:
    return value.value if hasattr(value, "value") else str(value)


__all__ = [
    "PRIORITY_RANK",
    "STATUS_RANK",
    "build_predicate",
    "filter_notifications",
    "sort_notifications",
]
