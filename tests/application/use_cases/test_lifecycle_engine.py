"""Tests for the lifecycle state machine."""

from __future__ import annotations

from datetime import timedelta

import pytest

from campus_notify.application.use_cases.filtering import filter_notifications
from campus_notify.application.use_cases.lifecycle import ALLOWED_TRANSITIONS, LifecycleEngine
from campus_notify.domain.entities import NotificationStatus
from campus_notify.domain.errors import IllegalTransition, RetryLimitExceeded

from tests.conftest import NOW

Status = NotificationStatus

LEGAL = {
    (Status.DRAFT, Status.SCHEDULED),
    (Status.DRAFT, Status.SENT),
    (Status.DRAFT, Status.ARCHIVED),
    (Status.SCHEDULED, Status.SENT),
    (Status.SCHEDULED, Status.FAILED),
    (Status.SCHEDULED, Status.ARCHIVED),
    (Status.SENT, Status.DELIVERED),
    (Status.SENT, Status.FAILED),
    (Status.SENT, Status.ARCHIVED),
    (Status.DELIVERED, Status.READ),
    (Status.DELIVERED, Status.ARCHIVED),
    (Status.READ, Status.DELIVERED),
    (Status.READ, Status.ARCHIVED),
}

PAIRS = [(source, target) for source in Status for target in Status]


def test_table_matches_documented_lifecycle() -> None:
    """``failed -> scheduled`` is the only extra edge and it needs a redispatch."""

    declared = {
        (source, target) for source, targets in ALLOWED_TRANSITIONS.items() for target in targets
    }

    assert declared == LEGAL | {(Status.FAILED, Status.SCHEDULED)}


@pytest.mark.parametrize(("source", "target"), PAIRS, ids=lambda s: s.value)
def test_transition_table(engine: LifecycleEngine, make_record, source, target) -> None:
    """Every pair outside the table raises and leaves the record untouched."""

    record = make_record(status=source, scheduled_at=NOW + timedelta(days=1))
    before = (record.status, record.read_at, record.sent_at, record.archived_at)

    if (source, target) in LEGAL:
        engine.transition(record, target)
        assert record.status is target
        assert engine.can_transition(make_record(status=source), target)
    else:
        with pytest.raises(IllegalTransition) as excinfo:
            engine.transition(record, target)
        assert excinfo.value.source == source.value
        assert (record.status, record.read_at, record.sent_at, record.archived_at) == before
        assert not engine.can_transition(record, target)


def test_read_unread_round_trip(engine: LifecycleEngine, make_record) -> None:
    """``read_at`` is set when read and cleared again when marked unread."""

    record = make_record(status=Status.DELIVERED)
    later = NOW + timedelta(minutes=5)

    engine.mark_read(record, now=later)
    assert record.status is Status.READ
    assert record.read_at == later

    engine.mark_unread(record)
    assert record.status is Status.DELIVERED
    assert record.read_at is None


def test_mark_unread_requires_read(engine: LifecycleEngine, make_record) -> None:
    record = make_record(status=Status.DELIVERED)

    with pytest.raises(IllegalTransition):
        engine.mark_unread(record)


def test_mark_read_on_archived_raises(engine: LifecycleEngine, make_record) -> None:
    record = make_record(status=Status.ARCHIVED)

    with pytest.raises(IllegalTransition):
        engine.mark_read(record)
    assert record.read_at is None


def test_archiving_read_record_clears_read_at(engine: LifecycleEngine, make_record) -> None:
    record = make_record(status=Status.READ)

    engine.archive(record)

    assert record.status is Status.ARCHIVED
    assert record.read_at is None
    assert record.archived_at == NOW


def test_dispatch_and_delivery_timestamps(engine: LifecycleEngine, make_record) -> None:
    record = make_record(status=Status.DRAFT)

    engine.dispatch(record)
    engine.confirm_delivery(record, now=NOW + timedelta(seconds=30))

    assert record.sent_at == NOW
    assert record.delivered_at == NOW + timedelta(seconds=30)


def test_unread_does_not_move_delivered_at(engine: LifecycleEngine, make_record) -> None:
    record = make_record(status=Status.SENT)
    engine.confirm_delivery(record)
    engine.mark_read(record, now=NOW + timedelta(hours=1))

    engine.mark_unread(record, now=NOW + timedelta(hours=2))

    assert record.delivered_at == NOW


def test_cancel_twice_raises(engine: LifecycleEngine, make_record) -> None:
    """A cancelled notification leaves default views and cannot be cancelled again."""

    record = make_record(status=Status.SCHEDULED, scheduled_at=NOW + timedelta(days=1))

    engine.cancel(record)
    assert record.status is Status.ARCHIVED
    assert filter_notifications([record], now=NOW).records == ()

    with pytest.raises(IllegalTransition):
        engine.cancel(record)


@pytest.mark.parametrize("status", [Status.SENT, Status.DELIVERED, Status.READ, Status.FAILED])
def test_cancel_rejects_sent_notifications(engine: LifecycleEngine, make_record, status) -> None:
    record = make_record(status=status)

    with pytest.raises(IllegalTransition):
        engine.cancel(record)
    assert record.status is status


@pytest.mark.parametrize(
    ("offset", "expires_offset"),
    [
        (timedelta(0), None),
        (-timedelta(hours=1), None),
        (timedelta(days=2), timedelta(days=1)),
        (timedelta(days=1), timedelta(days=1)),
    ],
)
def test_schedule_rejects_bad_times(engine: LifecycleEngine, make_record, offset, expires_offset) -> None:
    """The send time must lie in the future and before expiry."""

    expires_at = NOW + expires_offset if expires_offset is not None else None
    record = make_record(status=Status.DRAFT, expires_at=expires_at)

    with pytest.raises(IllegalTransition):
        engine.schedule(record, NOW + offset)
    assert record.status is Status.DRAFT


def test_schedule_sets_scheduled_at(engine: LifecycleEngine, make_record) -> None:
    record = make_record(status=Status.DRAFT)

    engine.schedule(record, NOW + timedelta(hours=3))

    assert record.status is Status.SCHEDULED
    assert record.scheduled_at == NOW + timedelta(hours=3)


def test_mark_failed_records_reason(engine: LifecycleEngine, make_record) -> None:
    record = make_record(status=Status.SENT)

    engine.mark_failed(record, "smtp_timeout")

    assert record.status is Status.FAILED
    assert record.failure_reason == "smtp_timeout"


def test_failed_only_reschedules_through_redispatch(engine: LifecycleEngine, make_record) -> None:
    record = make_record(status=Status.FAILED, failure_reason="smtp_timeout")

    with pytest.raises(IllegalTransition):
        engine.transition(record, Status.SCHEDULED)

    engine.redispatch(record, attempt=1, scheduled_at=NOW + timedelta(minutes=10))

    assert record.status is Status.SCHEDULED
    assert record.scheduled_at == NOW + timedelta(minutes=10)
    assert record.failure_reason is None


def test_redispatch_limit(engine: LifecycleEngine, make_record) -> None:
    """Attempts beyond the configured limit raise a dedicated error."""

    record = make_record(status=Status.FAILED)

    with pytest.raises(RetryLimitExceeded) as excinfo:
        engine.redispatch(record, attempt=4)

    assert excinfo.value.reason == "retry_limit_exceeded"
    assert record.status is Status.FAILED


def test_redispatch_explicit_limit_overrides_default(make_record) -> None:
    engine = LifecycleEngine(clock=lambda: NOW)
    record = make_record(status=Status.FAILED)

    with pytest.raises(RetryLimitExceeded):
        engine.redispatch(record, attempt=2, max_attempts=1)

    engine.redispatch(record, attempt=1, max_attempts=1)
    assert record.status is Status.SCHEDULED


def test_redispatch_requires_failed(engine: LifecycleEngine, make_record) -> None:
    record = make_record(status=Status.SENT)

    with pytest.raises(IllegalTransition):
        engine.redispatch(record, attempt=1)


def test_redispatch_after_expiry_raises(engine: LifecycleEngine, make_record) -> None:
    record = make_record(status=Status.FAILED, expires_at=NOW - timedelta(minutes=1))

    with pytest.raises(IllegalTransition):
        engine.redispatch(record, attempt=1)


def test_record_click(engine: LifecycleEngine, make_record) -> None:
    """Clicks accumulate without changing the status."""

    record = make_record(status=Status.READ)

    engine.record_click(record)
    engine.record_click(record, now=NOW + timedelta(minutes=1))

    assert record.click_count == 2
    assert record.status is Status.READ


@pytest.mark.parametrize("status", [Status.DRAFT, Status.SENT, Status.ARCHIVED])
def test_record_click_requires_delivery(engine: LifecycleEngine, make_record, status) -> None:
    record = make_record(status=status)

    with pytest.raises(IllegalTransition):
        engine.record_click(record)
    assert record.clicks == []
