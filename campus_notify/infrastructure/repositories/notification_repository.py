"""Persistence helpers for notification records."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from campus_notify.domain.entities import (
    NotificationCategory,
    NotificationPriority,
    NotificationRecord,
    NotificationStatus,
    NotificationType,
    UserRole,
)
from campus_notify.infrastructure.models import NotificationModel
from campus_notify.utils import ensure_app_naive_datetime, ensure_app_timezone

_TIMESTAMP_FIELDS = (
    "created_at",
    "scheduled_at",
    "sent_at",
    "delivered_at",
    "read_at",
    "archived_at",
    "expires_at",
)


class NotificationRepository:
    """Store :class:`NotificationRecord` objects in the SQL database.

    Exposes the same interface as the in-memory store so the HTTP layer can
    use either one.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def add_many(self, records: Iterable[NotificationRecord]) -> list[NotificationRecord]:
        incoming = list(records)
        ids = [record.id for record in incoming]
        if len(set(ids)) != len(ids):
            raise ValueError("Notification ids must be unique")
        existing = (
            self.session.query(NotificationModel.id)
            .filter(NotificationModel.id.in_(ids))
            .all()
        ) if ids else []
        if existing:
            taken = ", ".join(sorted(row[0] for row in existing))
            raise ValueError(f"Notification ids already exist: {taken}")

        for record in incoming:
            model = NotificationModel(id=record.id)
            self._apply_entity_to_model(model, record)
            self.session.add(model)
        self.session.commit()
        return incoming

    def get(self, record_id: str) -> NotificationRecord | None:
        model = self.session.get(NotificationModel, record_id)
        if model is None:
            return None
        return self._to_entity(model)

    def get_many(self, record_ids: Iterable[str]) -> list[NotificationRecord]:
        ids = list(record_ids)
        if not ids:
            return []
        models = self.session.query(NotificationModel).filter(NotificationModel.id.in_(ids)).all()
        by_id = {model.id: self._to_entity(model) for model in models}
        return [by_id[record_id] for record_id in ids if record_id in by_id]

    def list(self, *, recipient_id: str | None = None) -> Sequence[NotificationRecord]:
        query = self.session.query(NotificationModel)
        if recipient_id is not None:
            query = query.filter(NotificationModel.recipient_id == recipient_id)
        query = query.order_by(NotificationModel.created_at.desc(), NotificationModel.id.asc())
        return [self._to_entity(model) for model in query.all()]

    def list_by_broadcast(self, broadcast_id: str) -> Sequence[NotificationRecord]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.broadcast_id == broadcast_id)
            .order_by(NotificationModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def save_many(self, records: Iterable[NotificationRecord]) -> None:
        for record in records:
            model = self.session.get(NotificationModel, record.id)
            if model is None:
                msg = f"Notification with id {record.id} not found"
                raise ValueError(msg)
            self._apply_entity_to_model(model, record)
            self.session.add(model)
        self.session.commit()

    def __len__(self) -> int:
        return self.session.query(NotificationModel).count()

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, record: NotificationRecord) -> None:
        model.broadcast_id = record.broadcast_id
        model.recipient_id = record.recipient_id
        model.sender_id = record.sender_id
        model.sender_role = UserRole(record.sender_role).value
        model.sender_name = record.sender_name
        model.type = NotificationType(record.type).value
        model.category = NotificationCategory(record.category).value
        model.priority = NotificationPriority(record.priority).value
        model.status = NotificationStatus(record.status).value
        model.title = record.title
        model.content = record.content
        for name in _TIMESTAMP_FIELDS:
            setattr(model, name, ensure_app_naive_datetime(getattr(record, name)))
        model.failure_reason = record.failure_reason
        model.clicks = [clicked_at.isoformat() for clicked_at in record.clicks]
        model.click_count = record.click_count
        model.payload = dict(record.metadata or {})

    @staticmethod
    def _to_entity(model: NotificationModel) -> NotificationRecord:
        return NotificationRecord(
            id=model.id,
            type=NotificationType(model.type),
            category=NotificationCategory(model.category),
            priority=NotificationPriority(model.priority),
            status=NotificationStatus(model.status),
            title=model.title,
            content=model.content,
            sender_id=model.sender_id,
            sender_role=UserRole(model.sender_role),
            sender_name=model.sender_name,
            recipient_id=model.recipient_id,
            broadcast_id=model.broadcast_id,
            created_at=ensure_app_timezone(model.created_at),
            scheduled_at=ensure_app_timezone(model.scheduled_at),
            sent_at=ensure_app_timezone(model.sent_at),
            delivered_at=ensure_app_timezone(model.delivered_at),
            read_at=ensure_app_timezone(model.read_at),
            archived_at=ensure_app_timezone(model.archived_at),
            expires_at=ensure_app_timezone(model.expires_at),
            failure_reason=model.failure_reason,
            clicks=[
                ensure_app_timezone(datetime.fromisoformat(value))
                for value in (model.clicks or [])
            ],
            metadata=dict(model.payload or {}),
        )


__all__ = ["NotificationRepository"]
