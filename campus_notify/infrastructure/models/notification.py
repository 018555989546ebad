"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from campus_notify.infrastructure.database import Base


class NotificationModel(Base):
    """Database representation for materialized notifications."""

    __tablename__ = "notification"

    id = Column(String(64), primary_key=True)
    broadcast_id = Column(String(64), nullable=True, index=True)
    recipient_id = Column(String(64), nullable=False, index=True)
    sender_id = Column(String(64), nullable=False)
    sender_role = Column(String(20), nullable=False)
    sender_name = Column(String(120), nullable=True)
    type = Column(String(30), nullable=False)
    category = Column(String(30), nullable=False)
    priority = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, index=True)
    title = Column(String(120), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(), nullable=False)
    scheduled_at = Column(DateTime(), nullable=True)
    sent_at = Column(DateTime(), nullable=True)
    delivered_at = Column(DateTime(), nullable=True)
    read_at = Column(DateTime(), nullable=True)
    archived_at = Column(DateTime(), nullable=True)
    expires_at = Column(DateTime(), nullable=True)
    failure_reason = Column(String(255), nullable=True)
    clicks = Column(JSON, nullable=False, default=list)
    payload = Column(JSON, nullable=False, default=dict)
    click_count = Column(Integer, nullable=False, default=0)


__all__ = ["NotificationModel"]
