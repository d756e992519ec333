"""Utility helpers to generate and dispatch domain notifications.

Each helper is called once the primary action has completed; notification
failures, including payloads the factory rejects, are logged and never
propagate to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.orm import Session

from app.domain.entities import ContactMessage, Notification
from app.domain.exceptions import NotificationValidationError
from app.infrastructure.email import send_notification_alert

from . import factory
from .dispatcher import NotificationDispatcher
from .factory import NotificationPayload

logger = logging.getLogger(__name__)


def _emit(
    session: Session, event: str, build: Callable[[], NotificationPayload]
) -> Notification | None:
    try:
        payload = build()
    except NotificationValidationError as exc:
        logger.warning("Skipping %s notification: %s", event, exc)
        return None
    dispatcher = NotificationDispatcher(session, alerts=send_notification_alert)
    return dispatcher.dispatch_safely(payload)


def notify(session: Session, payload: NotificationPayload) -> Notification | None:
    """Dispatch an already built payload."""

    return _emit(session, payload.category.value, lambda: payload)


def notify_contact_message(
    session: Session, *, message: ContactMessage
) -> Notification | None:
    """Alert the administrator about a message left through the contact form."""

    if message.urgent:
        return _emit(session, "urgent message", lambda: factory.urgent_message(message))
    return _emit(session, "new message", lambda: factory.new_message(message))


def notify_login_attempt(
    session: Session, *, success: bool, username: str, ip_address: str | None
) -> Notification | None:
    return _emit(
        session,
        "login attempt",
        lambda: factory.login_attempt(success, username, ip_address),
    )


def notify_blog_created(session: Session, *, blog: Any) -> Notification | None:
    return _emit(session, "blog created", lambda: factory.blog_created(blog))


def notify_blog_published(session: Session, *, blog: Any) -> Notification | None:
    return _emit(session, "blog published", lambda: factory.blog_published(blog))


def notify_project_created(session: Session, *, project: Any) -> Notification | None:
    return _emit(session, "project created", lambda: factory.project_created(project))


def notify_project_status_changed(
    session: Session, *, project: Any, old_status: str, new_status: str
) -> Notification | None:
    return _emit(
        session,
        "project status changed",
        lambda: factory.project_status_changed(project, old_status, new_status),
    )


def notify_ai_completed(session: Session, *, task: str, subject: str) -> Notification | None:
    return _emit(session, "AI completed", lambda: factory.ai_completed(task, subject))


def notify_ai_failed(
    session: Session, *, task: str, error: BaseException | str
) -> Notification | None:
    return _emit(session, "AI failed", lambda: factory.ai_failed(task, error))


def notify_ai_quota_exceeded(session: Session, *, provider: str) -> Notification | None:
    return _emit(session, "AI quota exceeded", lambda: factory.ai_quota_exceeded(provider))


def notify_error(
    session: Session, *, error: BaseException | str, context: str
) -> Notification | None:
    """Record an unexpected failure in a background or request context."""

    return _emit(session, "error", lambda: factory.error_occurred(error, context))


__all__ = [
    "notify",
    "notify_ai_completed",
    "notify_ai_failed",
    "notify_ai_quota_exceeded",
    "notify_blog_created",
    "notify_blog_published",
    "notify_contact_message",
    "notify_error",
    "notify_login_attempt",
    "notify_project_created",
    "notify_project_status_changed",
]
