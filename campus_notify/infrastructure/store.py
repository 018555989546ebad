"""In-memory arena of notification records keyed by id."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from campus_notify.domain.entities import NotificationRecord


class InMemoryNotificationStore:
    """Keep records in a dict; transitions mutate the stored objects in place."""

    def __init__(self, records: Iterable[NotificationRecord] = ()) -> None:
        self._records: dict[str, NotificationRecord] = {}
        self.add_many(records)

    def add_many(self, records: Iterable[NotificationRecord]) -> list[NotificationRecord]:
        incoming = list(records)
        ids = [record.id for record in incoming]
        duplicates = {record_id for record_id in ids if ids.count(record_id) > 1}
        duplicates |= {record_id for record_id in ids if record_id in self._records}
        if duplicates:
            raise ValueError(f"Notification ids already exist: {', '.join(sorted(duplicates))}")
        for record in incoming:
            self._records[record.id] = record
        return incoming

    def get(self, record_id: str) -> NotificationRecord | None:
        return self._records.get(record_id)

    def get_many(self, record_ids: Iterable[str]) -> list[NotificationRecord]:
        return [self._records[record_id] for record_id in record_ids if record_id in self._records]

    def list(self, *, recipient_id: str | None = None) -> Sequence[NotificationRecord]:
        if recipient_id is None:
            return list(self._records.values())
        return [record for record in self._records.values() if record.recipient_id == recipient_id]

    def list_by_broadcast(self, broadcast_id: str) -> Sequence[NotificationRecord]:
        return [record for record in self._records.values() if record.broadcast_id == broadcast_id]

    def save_many(self, records: Iterable[NotificationRecord]) -> None:
        for record in records:
            if record.id not in self._records:
                raise ValueError(f"Notification with id {record.id} not found")
            self._records[record.id] = record

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["InMemoryNotificationStore"]
