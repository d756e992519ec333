"""SQLAlchemy model for persisted notifications."""

import uuid

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, String, Text

from app.infrastructure.database import Base
from app.utils import ensure_app_naive_datetime, now_in_app_timezone


def _new_notification_id() -> str:
    return uuid.uuid4().hex


def _now_naive():
    return ensure_app_naive_datetime(now_in_app_timezone())


class NotificationModel(Base):
    """Database representation for dashboard notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_read_created", "read", "created_at"),
        Index("ix_notification_category_created", "category", "created_at"),
    )

    id = Column(String(32), primary_key=True, default=_new_notification_id)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False)
    category = Column(String(20), nullable=False)
    importance = Column(String(10), nullable=False)
    link = Column(String(500), nullable=True)
    # ``metadata`` is reserved on declarative classes.
    extra = Column("metadata", JSON, nullable=False, default=dict)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(), nullable=False, default=_now_naive)
    expires_at = Column(DateTime(), nullable=True, index=True)


__all__ = ["NotificationModel"]
