"""SQLAlchemy model for tracked analytics events."""

from sqlalchemy import Column, DateTime, Index, Integer, String

from app.infrastructure.database import Base


class AnalyticsEventModel(Base):
    """Database representation for page views and client errors."""

    __tablename__ = "analytics_event"
    __table_args__ = (Index("ix_analytics_event_kind_created", "kind", "created_at"),)

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(String(20), nullable=False)
    visitor_id = Column(String(64), nullable=False)
    path = Column(String(500), nullable=True)
    created_at = Column(DateTime(), nullable=False, index=True)


__all__ = ["AnalyticsEventModel"]
