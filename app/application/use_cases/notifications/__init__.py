"""Public helpers for building and emitting dashboard notifications."""

from . import factory
from .dispatcher import AlertSender, NotificationDispatcher
from .events import (
    notify,
    notify_ai_completed,
    notify_ai_failed,
    notify_ai_quota_exceeded,
    notify_blog_created,
    notify_blog_published,
    notify_contact_message,
    notify_error,
    notify_login_attempt,
    notify_project_created,
    notify_project_status_changed,
)
from .factory import NotificationPayload, build_payload

__all__ = [
    "AlertSender",
    "NotificationDispatcher",
    "NotificationPayload",
    "build_payload",
    "factory",
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
