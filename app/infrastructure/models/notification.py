"""SQLAlchemy model for persisted notifications."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text

from app.infrastructure.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user_created", "user_id", "created_at"),)

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=False, index=True)
    actor_id = Column(String(36), nullable=True)
    type = Column(String(50), nullable=False, default="info")
    reference_id = Column(String(64), nullable=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    is_clicked = Column(Boolean, nullable=False, default=False)
    # Stored as naive UTC.
    created_at = Column(DateTime(), nullable=False)


__all__ = ["NotificationModel"]
