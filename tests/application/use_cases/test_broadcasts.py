"""Tests for broadcast creation and broadcast-wide operations."""

from __future__ import annotations

from datetime import timedelta

import pytest

from campus_notify.application.use_cases.broadcasts import (
    cancel_broadcast,
    create_broadcast,
    dispatch_broadcast,
    fire_due_scheduled,
    update_broadcast,
)
from campus_notify.domain.entities import (
    BulkNotificationRequest,
    NotificationCategory,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    Sender,
    TargetAudienceSpec,
    TargetType,
    UserRole,
)
from campus_notify.domain.errors import InvalidAudienceSpec

from tests.conftest import NOW

SENDER = Sender(id="t1", role=UserRole.TEACHER, name="Prof. Liu")


def _request(**overrides) -> BulkNotificationRequest:
    values = {
        "type": NotificationType.ASSIGNMENT,
        "category": NotificationCategory.ACADEMIC,
        "title": "  Lab 3 report due  ",
        "content": "Upload the report before Friday.",
        "priority": NotificationPriority.HIGH,
        "target_audience": TargetAudienceSpec(
            target_type=TargetType.DEPARTMENTS, department_ids=("CS",)
        ),
    }
    values.update(overrides)
    return BulkNotificationRequest(**values)


def test_create_without_schedule_yields_drafts(directory) -> None:
    """One draft per resolved recipient, all sharing the broadcast id."""

    records = create_broadcast(_request(), directory, sender=SENDER, now=NOW)

    assert [record.recipient_id for record in records] == ["1", "2", "3", "4"]
    assert {record.status for record in records} == {NotificationStatus.DRAFT}
    assert len({record.broadcast_id for record in records}) == 1
    assert len({record.id for record in records}) == 4
    assert records[0].title == "Lab 3 report due"
    assert records[0].sender_name == "Prof. Liu"
    assert records[0].created_at == NOW


def test_create_with_future_schedule_yields_scheduled(directory) -> None:
    request = _request(
        scheduled_at=NOW + timedelta(hours=2),
        expires_at=NOW + timedelta(days=3),
        metadata={"lab": 3},
        template_id="tpl-lab",
    )

    records = create_broadcast(request, directory, sender=SENDER, now=NOW)

    assert {record.status for record in records} == {NotificationStatus.SCHEDULED}
    assert records[0].metadata == {"lab": 3, "template_id": "tpl-lab"}
    records[0].metadata["lab"] = 4
    assert records[1].metadata["lab"] == 3


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "   "},
        {"title": "x" * 121},
        {"content": ""},
        {"scheduled_at": NOW - timedelta(minutes=1)},
        {"expires_at": NOW},
        {"scheduled_at": NOW + timedelta(days=2), "expires_at": NOW + timedelta(days=1)},
    ],
)
def test_invalid_requests_are_rejected(directory, overrides) -> None:
    with pytest.raises(ValueError):
        create_broadcast(_request(**overrides), directory, sender=SENDER, now=NOW)


def test_empty_audience_is_rejected(directory) -> None:
    audience = TargetAudienceSpec(target_type=TargetType.SPECIFIC_STUDENTS, student_ids=("404",))

    with pytest.raises(InvalidAudienceSpec):
        create_broadcast(_request(target_audience=audience), directory, sender=SENDER, now=NOW)


def test_dispatch_sends_drafts_only(engine, make_record) -> None:
    draft = make_record(status=NotificationStatus.DRAFT)
    scheduled = make_record(status=NotificationStatus.SCHEDULED)

    result = dispatch_broadcast(engine, [draft, scheduled])

    assert result.succeeded == [draft.id]
    assert [(entry.id, entry.reason) for entry in result.skipped] == [(scheduled.id, "not_draft")]
    assert draft.status is NotificationStatus.SENT
    assert draft.sent_at == NOW


def test_fire_due_scheduled(engine, make_record) -> None:
    """Due records are sent, expired ones fail and future ones wait."""

    due = make_record(status=NotificationStatus.SCHEDULED, scheduled_at=NOW - timedelta(minutes=1))
    future = make_record(status=NotificationStatus.SCHEDULED, scheduled_at=NOW + timedelta(hours=1))
    expired = make_record(
        status=NotificationStatus.SCHEDULED,
        scheduled_at=NOW - timedelta(hours=2),
        expires_at=NOW - timedelta(hours=1),
    )
    draft = make_record(status=NotificationStatus.DRAFT)

    result = fire_due_scheduled(engine, [due, future, expired, draft])

    assert result.succeeded == [due.id, expired.id]
    assert due.status is NotificationStatus.SENT
    assert future.status is NotificationStatus.SCHEDULED
    assert expired.status is NotificationStatus.FAILED
    assert expired.failure_reason == "expired"
    assert draft.status is NotificationStatus.DRAFT


def test_cancel_skips_sent_records(engine, make_record) -> None:
    """Cancelling a partly sent broadcast only withdraws unsent records."""

    scheduled = make_record(status=NotificationStatus.SCHEDULED)
    draft = make_record(status=NotificationStatus.DRAFT)
    sent = make_record(status=NotificationStatus.SENT)
    archived = make_record(status=NotificationStatus.ARCHIVED)

    result = cancel_broadcast(engine, [scheduled, draft, sent, archived])

    assert result.succeeded == [scheduled.id, draft.id]
    assert {entry.id: entry.reason for entry in result.skipped} == {
        sent.id: "already_sent",
        archived.id: "already_archived",
    }
    assert scheduled.status is NotificationStatus.ARCHIVED
    assert sent.status is NotificationStatus.SENT

    again = cancel_broadcast(engine, [scheduled])
    assert again.skipped_ids == [scheduled.id]


def test_update_edits_unsent_records(make_record) -> None:
    draft = make_record(status=NotificationStatus.DRAFT)
    sent = make_record(status=NotificationStatus.SENT)

    result = update_broadcast(
        [draft, sent], {"title": " Room change ", "priority": "urgent", "metadata": {"room": "204"}}
    )

    assert result.succeeded == [draft.id]
    assert result.skipped[0].reason == "already_sent"
    assert draft.title == "Room change"
    assert draft.priority is NotificationPriority.URGENT
    assert draft.metadata == {"room": "204"}
    assert sent.title != "Room change"


def test_update_rejects_expiry_before_schedule(make_record) -> None:
    record = make_record(status=NotificationStatus.SCHEDULED, scheduled_at=NOW + timedelta(days=2))

    result = update_broadcast([record], {"expires_at": NOW + timedelta(days=1)})

    assert result.skipped[0].reason == "invalid_schedule"
    assert record.expires_at is None


@pytest.mark.parametrize("changes", [{"status": "sent"}, {"title": ""}, {"content": "  "}])
def test_update_rejects_bad_changes(make_record, changes) -> None:
    with pytest.raises(ValueError):
        update_broadcast([make_record(status=NotificationStatus.DRAFT)], changes)


def test_title_limit_applies_after_stripping(directory, make_record) -> None:
    """Creation and edits share the same stripped 120-character rule."""

    padded = "  " + "x" * 120 + "  "

    records = create_broadcast(_request(title=padded), directory, sender=SENDER, now=NOW)
    result = update_broadcast([make_record(status=NotificationStatus.DRAFT)], {"title": padded})

    assert records[0].title == "x" * 120
    assert result.succeeded == ["n001"]

    with pytest.raises(ValueError):
        create_broadcast(_request(title=" " + "x" * 121), directory, sender=SENDER, now=NOW)
    with pytest.raises(ValueError):
        update_broadcast([make_record(status=NotificationStatus.DRAFT)], {"title": "x" * 121})
