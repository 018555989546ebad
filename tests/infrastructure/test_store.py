"""Tests for the in-memory store and the per-record lock registry."""

from __future__ import annotations

import threading
import time

import pytest

from campus_notify.infrastructure.locks import RecordLocks
from campus_notify.infrastructure.store import InMemoryNotificationStore


def test_store_round_trip(make_record) -> None:
    first = make_record(broadcast_id="b1")
    second = make_record(recipient_id="2", broadcast_id="b1")
    third = make_record(recipient_id="2")
    store = InMemoryNotificationStore([first, second, third])

    assert len(store) == 3
    assert store.get(first.id) is first
    assert store.get("missing") is None
    assert store.get_many([third.id, "missing", first.id]) == [third, first]
    assert store.list(recipient_id="2") == [second, third]
    assert store.list_by_broadcast("b1") == [first, second]


def test_store_rejects_duplicate_ids(make_record) -> None:
    record = make_record()
    store = InMemoryNotificationStore([record])

    with pytest.raises(ValueError):
        store.add_many([make_record(id=record.id)])
    with pytest.raises(ValueError):
        store.add_many([make_record(id="dup"), make_record(id="dup")])
    assert len(store) == 1


def test_save_many_requires_known_records(make_record) -> None:
    store = InMemoryNotificationStore()

    with pytest.raises(ValueError):
        store.save_many([make_record()])


def test_locks_serialize_holders_of_the_same_id() -> None:
    """A second holder waits until the first one releases the record."""

    locks = RecordLocks()
    events: list[str] = []
    entered = threading.Event()

    def first() -> None:
        with locks.hold(["n001", "n002"]):
            events.append("first-start")
            entered.set()
            time.sleep(0.05)
            events.append("first-end")

    def second() -> None:
        entered.wait()
        with locks.hold(["n002"]):
            events.append("second")

    threads = [threading.Thread(target=first), threading.Thread(target=second)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=2)

    assert events == ["first-start", "first-end", "second"]


def test_locks_are_released_on_error() -> None:
    locks = RecordLocks()

    with pytest.raises(RuntimeError):
        with locks.hold(["n001"]):
            raise RuntimeError("boom")

    with locks.hold(["n001", "n001"]):
        pass


def test_lock_registry_is_emptied_after_release() -> None:
    """Entries only exist while a record is held or awaited."""

    locks = RecordLocks()

    with locks.hold(["n002", "n001", "n002"]):
        assert len(locks) == 2
        with locks.hold(["n003"]):
            assert len(locks) == 3

    assert len(locks) == 0
