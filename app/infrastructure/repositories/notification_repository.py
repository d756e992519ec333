"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from app.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationImportance,
    NotificationType,
)
from app.infrastructure.models import NotificationModel
from app.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects.

    Every write commits its own transaction. Bulk operations are issued as a
    single ``UPDATE``/``DELETE`` statement so they either apply to every
    matching row or to none.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(
        self,
        *,
        limit: int | None = 50,
        category: NotificationCategory | None = None,
        unread_only: bool = False,
    ) -> Sequence[Notification]:
        query = self._active_query()
        if category is not None:
            query = query.filter(NotificationModel.category == category.value)
        if unread_only:
            query = query.filter(NotificationModel.read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(self) -> int:
        return self._active_query().filter(NotificationModel.read.is_(False)).count()

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        return self._to_entity(model)

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            message=notification.message,
            type=notification.type.value,
            category=notification.category.value,
            importance=notification.importance.value,
            link=notification.link,
            extra=dict(notification.metadata or {}),
            read=False,
            created_at=ensure_app_naive_datetime(
                notification.created_at or now_in_app_timezone()
            ),
            expires_at=ensure_app_naive_datetime(notification.expires_at),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        if not model.read:
            model.read = True
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def mark_all_as_read(self) -> int:
        modified = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.read.is_(False))
            .update({NotificationModel.read: True}, synchronize_session=False)
        )
        self.session.commit()
        return modified

    def delete(self, notification_id: str) -> bool:
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return bool(deleted)

    def delete_all(self) -> int:
        deleted = self.session.query(NotificationModel).delete(synchronize_session=False)
        self.session.commit()
        return deleted

    def delete_expired(self, now: datetime | None = None) -> int:
        cutoff = ensure_app_naive_datetime(now or now_in_app_timezone())
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.expires_at.is_not(None))
            .filter(NotificationModel.expires_at <= cutoff)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    def _active_query(self) -> Query:
        cutoff = ensure_app_naive_datetime(now_in_app_timezone())
        return self.session.query(NotificationModel).filter(
            or_(
                NotificationModel.expires_at.is_(None),
                NotificationModel.expires_at > cutoff,
            )
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            message=model.message,
            type=NotificationType(model.type),
            category=NotificationCategory(model.category),
            importance=NotificationImportance(model.importance),
            link=model.link,
            metadata=dict(model.extra or {}),
            read=bool(model.read),
            created_at=ensure_app_timezone(model.created_at),
            expires_at=ensure_app_timezone(model.expires_at),
        )


__all__ = ["NotificationRepository"]
