"""Persistence helpers for analytics events."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.domain.entities import EVENT_ERROR, EVENT_PAGE_VIEW, AnalyticsEvent
from app.infrastructure.models import AnalyticsEventModel
from app.utils import ensure_app_naive_datetime, ensure_app_timezone, now_in_app_timezone


class AnalyticsRepository:
    """Store tracked events and aggregate them over time windows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, event: AnalyticsEvent) -> AnalyticsEvent:
        model = AnalyticsEventModel(
            kind=event.kind,
            visitor_id=event.visitor_id,
            path=event.path,
            created_at=ensure_app_naive_datetime(event.created_at or now_in_app_timezone()),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return AnalyticsEvent(
            id=model.id,
            kind=model.kind,
            visitor_id=model.visitor_id,
            path=model.path,
            created_at=ensure_app_timezone(model.created_at),
        )

    def window_counts(self, since: datetime) -> tuple[int, int, int]:
        """Return ``(active_users, page_views, errors)`` recorded after ``since``."""

        cutoff = ensure_app_naive_datetime(since)
        base = self.session.query(AnalyticsEventModel).filter(
            AnalyticsEventModel.created_at >= cutoff
        )
        active_users = (
            base.with_entities(func.count(func.distinct(AnalyticsEventModel.visitor_id)))
            .scalar()
            or 0
        )
        page_views = base.filter(AnalyticsEventModel.kind == EVENT_PAGE_VIEW).count()
        errors = base.filter(AnalyticsEventModel.kind == EVENT_ERROR).count()
        return int(active_users), page_views, errors


__all__ = ["AnalyticsRepository"]
