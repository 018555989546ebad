"""Tests for the notification HTTP routes."""

from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from campus_notify.domain.entities import NotificationStatus
from campus_notify.infrastructure.store import InMemoryNotificationStore
from campus_notify.main import create_app

from tests.conftest import NOW


@pytest.fixture()
def store() -> InMemoryNotificationStore:
    return InMemoryNotificationStore()


@pytest.fixture()
def client(directory, store):
    app = create_app(directory=directory, store=store, clock=lambda: NOW)
    with TestClient(app) as test_client:
        yield test_client


def _broadcast_payload(**overrides) -> dict:
    payload = {
        "sender": {"id": "t1", "role": "teacher", "name": "Prof. Liu"},
        "type": "announcement",
        "category": "academic",
        "title": "Lab closed on Monday",
        "content": "The embedded lab is closed for maintenance.",
        "priority": "high",
        "target_audience": {"target_type": "classes", "class_ids": ["A"]},
    }
    payload.update(overrides)
    return payload


def test_create_broadcast_and_dispatch(client, store) -> None:
    """Creating a broadcast stores one record per recipient."""

    response = client.post("/broadcasts/", json=_broadcast_payload())

    assert response.status_code == 201
    body = response.json()
    assert sorted(item["recipient_id"] for item in body) == ["1", "2", "3"]
    assert {item["status"] for item in body} == {"draft"}
    assert len(store) == 3

    broadcast_id = body[0]["broadcast_id"]
    dispatched = client.post(f"/broadcasts/{broadcast_id}/dispatch")

    assert dispatched.status_code == 200
    assert len(dispatched.json()["succeeded"]) == 3
    assert {record.status for record in store.list()} == {NotificationStatus.SENT}


def test_create_scheduled_broadcast_then_cancel(client, store) -> None:
    payload = _broadcast_payload(scheduled_at=(NOW + timedelta(hours=1)).isoformat())

    body = client.post("/broadcasts/", json=payload).json()
    broadcast_id = body[0]["broadcast_id"]
    assert {item["status"] for item in body} == {"scheduled"}

    cancelled = client.post(f"/broadcasts/{broadcast_id}/cancel")

    assert cancelled.status_code == 200
    assert cancelled.json()["skipped"] == []
    assert {record.status for record in store.list()} == {NotificationStatus.ARCHIVED}


def test_create_broadcast_with_invalid_audience(client) -> None:
    payload = _broadcast_payload(
        target_audience={"target_type": "all_students", "class_ids": ["A"]}
    )

    response = client.post("/broadcasts/", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"]["reason"] == "invalid_audience"


def test_unknown_broadcast_returns_404(client) -> None:
    response = client.post("/broadcasts/missing/dispatch")

    assert response.status_code == 404
    assert response.json()["detail"] == "Difusión no encontrada"


def test_update_broadcast(client, store) -> None:
    body = client.post("/broadcasts/", json=_broadcast_payload()).json()

    response = client.patch(f"/broadcasts/{body[0]['broadcast_id']}", json={"title": "Lab reopened"})

    assert response.status_code == 200
    assert {record.title for record in store.list()} == {"Lab reopened"}


def test_fire_due_sends_scheduled_records(client, store, make_record) -> None:
    store.add_many(
        [
            make_record(status=NotificationStatus.SCHEDULED, scheduled_at=NOW - timedelta(minutes=5)),
            make_record(status=NotificationStatus.SCHEDULED, scheduled_at=NOW + timedelta(hours=5)),
        ]
    )

    response = client.post("/broadcasts/fire-due")

    assert response.json()["succeeded"] == ["n001"]
    assert store.get("n001").status is NotificationStatus.SENT
    assert store.get("n002").status is NotificationStatus.SCHEDULED


def test_list_notifications_with_filters(client, store, make_record) -> None:
    store.add_many(
        [
            make_record(priority="urgent"),
            make_record(status=NotificationStatus.READ),
            make_record(recipient_id="2"),
            make_record(status=NotificationStatus.ARCHIVED),
        ]
    )

    everything = client.get("/notifications/").json()
    urgent = client.get("/notifications/", params={"priorities": ["urgent", "high"]}).json()
    mine_unread = client.get(
        "/notifications/", params={"recipient_id": "1", "unread_only": "true"}
    ).json()
    paged = client.get("/notifications/", params={"limit": 1, "offset": 1}).json()

    assert [item["id"] for item in everything["records"]] == ["n001", "n002", "n003"]
    assert [item["id"] for item in urgent["records"]] == ["n001"]
    assert [item["id"] for item in mine_unread["records"]] == ["n001"]
    assert [item["id"] for item in paged["records"]] == ["n002"]
    assert paged["total_count"] == 3


def test_list_notifications_with_naive_start(client, store, make_record) -> None:
    """A start bound without an offset is accepted and read in the app timezone."""

    store.add_many([make_record(), make_record(created_at=NOW - timedelta(days=30))])

    response = client.get("/notifications/", params={"start": "2024-01-01T00:00:00"})

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["records"]] == ["n001"]


def test_single_record_transitions(client, store, make_record) -> None:
    store.add_many([make_record(status=NotificationStatus.DELIVERED)])

    read = client.post("/notifications/n001/read")
    click = client.post("/notifications/n001/click")
    unread = client.post("/notifications/n001/unread")

    assert read.status_code == 200
    assert read.json()["status"] == "read"
    assert click.json()["click_count"] == 1
    assert unread.json()["read_at"] is None

    client.post("/notifications/n001/archive")
    illegal = client.post("/notifications/n001/read")

    assert illegal.status_code == 409
    assert illegal.json()["detail"]["reason"] == "illegal_transition"


def test_missing_notification_returns_404(client) -> None:
    response = client.post("/notifications/missing/read")

    assert response.status_code == 404
    assert response.json()["detail"] == "Notificación no encontrada"


def test_failure_and_redispatch(client, store, make_record) -> None:
    store.add_many([make_record(status=NotificationStatus.SENT)])

    failed = client.post("/notifications/n001/failed", json={"reason": "smtp_timeout"})
    retried = client.post(
        "/notifications/n001/redispatch",
        json={"attempt": 1, "scheduled_at": (NOW + timedelta(minutes=10)).isoformat()},
    )
    too_many = client.post("/notifications/n001/redispatch", json={"attempt": 9})

    assert failed.json()["failure_reason"] == "smtp_timeout"
    assert retried.json()["status"] == "scheduled"
    assert too_many.status_code == 409


def test_batch_partial_success(client, store, make_record) -> None:
    """Already read records are reported as skipped while the rest succeed."""

    store.add_many([make_record(), make_record(status=NotificationStatus.READ), make_record()])

    response = client.post(
        "/notifications/batch",
        json={"operation": "mark_read", "selected_ids": ["n001", "n002", "n003"]},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["succeeded"] == ["n001", "n003"]
    assert [entry["id"] for entry in body["skipped"]] == ["n002"]
    assert store.get("n003").status is NotificationStatus.READ


def test_delete_all_requires_confirmation(client, store, make_record) -> None:
    store.add_many([make_record(), make_record()])
    request = {"operation": "delete", "scope": "all_in_view"}

    refused = client.post("/notifications/batch", json=request)
    assert refused.status_code == 428
    assert refused.json()["detail"]["count"] == 2
    assert {record.status for record in store.list()} == {NotificationStatus.DELIVERED}

    confirmation = client.post("/notifications/batch/confirmation", json=request).json()
    assert confirmation["required"] is True
    assert confirmation["count"] == 2

    accepted = client.post(
        "/notifications/batch", json={**request, "confirmation_token": confirmation["token"]}
    )
    assert accepted.status_code == 200
    assert {record.status for record in store.list()} == {NotificationStatus.ARCHIVED}


def test_stats_route(client, store, make_record) -> None:
    store.add_many(
        [
            make_record(status=NotificationStatus.SENT, sent_at=NOW),
            make_record(status=NotificationStatus.ARCHIVED),
        ]
    )

    body = client.get("/notifications/stats", params={"lookback": "week"}).json()

    assert body["total"] == 1
    assert body["unread"] == 1
    assert body["by_status"]["archived"] == 1
    assert len(body["activity"]) == 7
    assert body["activity"][-1]["sent"] == 1


def test_audience_preview_and_search(client) -> None:
    preview = client.post(
        "/audience/preview",
        json={"target_type": "specific_students", "student_ids": ["1", "404"]},
    ).json()
    students = client.get("/audience/students", params={"search": "dana"}).json()

    assert preview == {"recipient_count": 1, "dropped_ids": ["404"]}
    assert [student["id"] for student in students] == ["4"]


def test_batch_reports_records_archived_elsewhere(client, store, make_record) -> None:
    """Deleting five selected records where one is already archived skips that one."""

    store.add_many(
        [make_record() for _ in range(4)] + [make_record(status=NotificationStatus.ARCHIVED)]
    )

    response = client.post(
        "/notifications/batch",
        json={"operation": "delete", "selected_ids": ["n001", "n002", "n003", "n004", "n005"]},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["succeeded"] == ["n001", "n002", "n003", "n004"]
    assert [entry["id"] for entry in body["skipped"]] == ["n005"]
    assert body["skipped"][0]["reason"] == "not_in_view"
