"""Persist notifications and fan them out to live dashboard sessions."""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import Notification, NotificationImportance
from app.domain.exceptions import NotificationError, NotificationPersistenceError
from app.infrastructure.notifications import NotificationPublisher, notification_publisher
from app.infrastructure.repositories import NotificationRepository

from .factory import NotificationPayload

logger = logging.getLogger(__name__)

AlertSender = Callable[[Notification], bool]


class NotificationDispatcher:
    """Store a notification, then push it to every stream subscriber.

    The record is committed before any fan-out happens so subscribers never
    see a notification that is not stored. Fan-out and email alerts are
    best-effort; only a storage failure reaches the caller.
    """

    def __init__(
        self,
        session: Session,
        publisher: NotificationPublisher | None = None,
        alerts: AlertSender | None = None,
    ) -> None:
        self.session = session
        self.publisher = publisher or notification_publisher
        self.alerts = alerts
        self.repository = NotificationRepository(session)

    def dispatch(self, payload: NotificationPayload) -> Notification:
        notification = Notification(
            id=None,
            message=payload.message,
            type=payload.type,
            category=payload.category,
            importance=payload.importance,
            link=payload.link,
            metadata=dict(payload.metadata),
            read=False,
            expires_at=payload.expires_at,
        )
        try:
            saved = self.repository.create(notification)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception(
                "Failed to store %s notification in category %s",
                payload.type.value,
                payload.category.value,
            )
            raise NotificationPersistenceError("Notification could not be stored") from exc

        try:
            self.publisher.dispatch(saved)
        except Exception:
            logger.warning(
                "Realtime fan-out failed for notification %s", saved.id, exc_info=True
            )

        if self.alerts is not None and saved.importance is NotificationImportance.HIGH:
            try:
                self.alerts(saved)
            except Exception:
                logger.warning(
                    "Email alert failed for notification %s", saved.id, exc_info=True
                )
        return saved

    def dispatch_safely(self, payload: NotificationPayload) -> Notification | None:
        """Dispatch ``payload`` without letting a failure escape.

        Used after a primary action (a contact message, a login) has already
        succeeded: the action must not be undone because its notification
        could not be produced.
        """

        try:
            return self.dispatch(payload)
        except NotificationError as exc:
            logger.warning(
                "Notification for category %s was not delivered: %s",
                payload.category.value,
                exc,
            )
            return None


__all__ = ["AlertSender", "NotificationDispatcher"]
