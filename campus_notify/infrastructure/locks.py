"""Per-record locks used to serialize transitions on the same notification."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager


class RecordLocks:
    """Hand out one ``threading.Lock`` per notification id.

    A lock lives in the registry only while someone holds or waits for it;
    the entry is dropped once its last user releases it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _checkout(self, record_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(record_id)
            if lock is None:
                lock = self._locks[record_id] = threading.Lock()
            self._users[record_id] = self._users.get(record_id, 0) + 1
            return lock

    def _checkin(self, record_id: str) -> None:
        with self._guard:
            remaining = self._users[record_id] - 1
            if remaining:
                self._users[record_id] = remaining
                return
            del self._users[record_id]
            del self._locks[record_id]

    @contextmanager
    def hold(self, record_ids: Iterable[str]) -> Iterator[None]:
        """Acquire the locks of ``record_ids`` in sorted order."""

        ids = sorted(set(record_ids))
        locks = [self._checkout(record_id) for record_id in ids]
        acquired: list[threading.Lock] = []
        try:
            for lock in locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for record_id in ids:
                self._checkin(record_id)


__all__ = ["RecordLocks"]
