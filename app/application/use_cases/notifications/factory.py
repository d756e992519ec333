"""Builders translating domain events into notification payloads.

Every builder validates the fields it interpolates and raises
:class:`NotificationValidationError` instead of emitting a malformed
notification. Domain objects may be mappings (``{"title": ...}``) or plain
objects exposing the same attributes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from app.domain.entities import (
    NotificationCategory,
    NotificationImportance,
    NotificationType,
)
from app.domain.exceptions import NotificationValidationError

_MISSING = object()


@dataclass(frozen=True)
class NotificationPayload:
    """Normalized creation request for a notification."""

    message: str
    type: NotificationType
    category: NotificationCategory
    importance: NotificationImportance = NotificationImportance.LOW
    link: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    expires_at: datetime | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "type": self.type.value,
            "category": self.category.value,
            "link": self.link,
            "importance": self.importance.value,
            "metadata": dict(self.metadata),
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
        }


def _coerce_enum(enum_cls, value: Any, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise NotificationValidationError(
            f"Unrecognized {field_name} {value!r}; expected one of: {allowed}"
        ) from exc


def build_payload(
    *,
    message: str,
    type: NotificationType | str = NotificationType.INFO,
    category: NotificationCategory | str = NotificationCategory.GENERAL,
    importance: NotificationImportance | str = NotificationImportance.LOW,
    link: str | None = None,
    metadata: Mapping[str, Any] | None = None,
    expires_at: datetime | None = None,
) -> NotificationPayload:
    """Validate raw fields and return a :class:`NotificationPayload`."""

    if not isinstance(message, str) or not message.strip():
        raise NotificationValidationError("Notification message must be a non-empty string")
    return NotificationPayload(
        message=message.strip(),
        type=_coerce_enum(NotificationType, type, "type"),
        category=_coerce_enum(NotificationCategory, category, "category"),
        importance=_coerce_enum(NotificationImportance, importance, "importance"),
        link=link or None,
        metadata=dict(metadata or {}),
        expires_at=expires_at,
    )


def _require(entity: Any, name: str, *, kind: str) -> Any:
    """Return ``entity.name`` (or ``entity[name]``) or fail when absent or blank."""

    if entity is None:
        raise NotificationValidationError(f"A {kind} is required")
    if isinstance(entity, Mapping):
        value = entity.get(name, _MISSING)
    else:
        value = getattr(entity, name, _MISSING)
    if value is _MISSING or value is None or (isinstance(value, str) and not value.strip()):
        raise NotificationValidationError(f"{kind.capitalize()} is missing required field '{name}'")
    return value


def _entity_id(entity: Any, *, kind: str) -> Any:
    for name in ("_id", "id"):
        value = entity.get(name) if isinstance(entity, Mapping) else getattr(entity, name, None)
        if value is not None:
            return value
    raise NotificationValidationError(f"{kind.capitalize()} is missing required field '_id'")


def _require_text(value: Any, name: str) -> str:
    if value is None or not str(value).strip():
        raise NotificationValidationError(f"'{name}' is required")
    return str(value)


# Blog

def blog_created(blog: Any) -> NotificationPayload:
    title = _require(blog, "title", kind="blog post")
    slug = _require(blog, "slug", kind="blog post")
    return build_payload(
        message=f"New blog post created: {title}",
        type=NotificationType.SUCCESS,
        category=NotificationCategory.BLOG,
        link=f"/blog/{slug}",
        importance=NotificationImportance.MEDIUM,
        metadata={"blogId": _entity_id(blog, kind="blog post")},
    )


def blog_published(blog: Any) -> NotificationPayload:
    title = _require(blog, "title", kind="blog post")
    slug = _require(blog, "slug", kind="blog post")
    return build_payload(
        message=f"Blog post published: {title}",
        type=NotificationType.SUCCESS,
        category=NotificationCategory.BLOG,
        link=f"/blog/{slug}",
        importance=NotificationImportance.MEDIUM,
        metadata={"blogId": _entity_id(blog, kind="blog post")},
    )


def blog_commented(blog: Any, comment: Any) -> NotificationPayload:
    title = _require(blog, "title", kind="blog post")
    slug = _require(blog, "slug", kind="blog post")
    author = _require(comment, "author", kind="comment")
    comment_id = _entity_id(comment, kind="comment")
    return build_payload(
        message=f'New comment on "{title}" from {author}',
        type=NotificationType.INFO,
        category=NotificationCategory.BLOG,
        link=f"/blog/{slug}#comment-{comment_id}",
        importance=NotificationImportance.LOW,
        metadata={"blogId": _entity_id(blog, kind="blog post"), "commentId": comment_id},
    )


# Projects

def project_created(project: Any) -> NotificationPayload:
    name = _require(project, "name", kind="project")
    slug = _require(project, "slug", kind="project")
    return build_payload(
        message=f"New project created: {name}",
        type=NotificationType.SUCCESS,
        category=NotificationCategory.PROJECT,
        link=f"/projects/{slug}",
        importance=NotificationImportance.MEDIUM,
        metadata={"projectId": _entity_id(project, kind="project")},
    )


def project_updated(project: Any) -> NotificationPayload:
    name = _require(project, "name", kind="project")
    slug = _require(project, "slug", kind="project")
    return build_payload(
        message=f"Project updated: {name}",
        type=NotificationType.INFO,
        category=NotificationCategory.PROJECT,
        link=f"/projects/{slug}",
        metadata={"projectId": _entity_id(project, kind="project")},
    )


def project_status_changed(project: Any, old_status: str, new_status: str) -> NotificationPayload:
    name = _require(project, "name", kind="project")
    slug = _require(project, "slug", kind="project")
    old_status = _require_text(old_status, "old_status")
    new_status = _require_text(new_status, "new_status")
    return build_payload(
        message=f'Project "{name}" status changed from {old_status} to {new_status}',
        type=NotificationType.INFO,
        category=NotificationCategory.PROJECT,
        link=f"/projects/{slug}",
        importance=NotificationImportance.MEDIUM,
        metadata={
            "projectId": _entity_id(project, kind="project"),
            "oldStatus": old_status,
            "newStatus": new_status,
        },
    )


# Contact messages

def new_message(message: Any) -> NotificationPayload:
    name = _require(message, "name", kind="message")
    return build_payload(
        message=f"New message from {name}",
        type=NotificationType.INFO,
        category=NotificationCategory.MESSAGE,
        link="/admin/messages",
        importance=NotificationImportance.HIGH,
        metadata={"messageId": _entity_id(message, kind="message")},
    )


def urgent_message(message: Any) -> NotificationPayload:
    name = _require(message, "name", kind="message")
    subject = _require(message, "subject", kind="message")
    return build_payload(
        message=f"Urgent message from {name}: {subject}",
        type=NotificationType.WARNING,
        category=NotificationCategory.MESSAGE,
        link="/admin/messages",
        importance=NotificationImportance.HIGH,
        metadata={"messageId": _entity_id(message, kind="message")},
    )


# System

def system_update(
    message: str, importance: NotificationImportance | str = NotificationImportance.MEDIUM
) -> NotificationPayload:
    return build_payload(
        message=_require_text(message, "message"),
        type=NotificationType.INFO,
        category=NotificationCategory.SYSTEM,
        importance=importance,
    )


def system_maintenance(start_time: datetime | str, duration: str) -> NotificationPayload:
    start = start_time.isoformat() if isinstance(start_time, datetime) else start_time
    start = _require_text(start, "start_time")
    duration = _require_text(duration, "duration")
    return build_payload(
        message=f"System maintenance scheduled for {start} (Duration: {duration})",
        type=NotificationType.WARNING,
        category=NotificationCategory.SYSTEM,
        importance=NotificationImportance.HIGH,
        metadata={"startTime": start, "duration": duration},
    )


def backup_complete(status: str, details: str) -> NotificationPayload:
    status = _require_text(status, "status")
    details = _require_text(details, "details")
    return build_payload(
        message=f"System backup {status}: {details}",
        type=NotificationType.SUCCESS if status == "completed" else NotificationType.ERROR,
        category=NotificationCategory.SYSTEM,
        importance=NotificationImportance.MEDIUM,
        metadata={"status": status, "details": details},
    )


def error_occurred(error: BaseException | str, context: str) -> NotificationPayload:
    context = _require_text(context, "context")
    detail = _require_text(str(error), "error")
    return build_payload(
        message=f"Error in {context}: {detail}",
        type=NotificationType.ERROR,
        category=NotificationCategory.SYSTEM,
        importance=NotificationImportance.HIGH,
        metadata={"error": detail, "errorType": type(error).__name__, "context": context},
    )


# Authentication

def login_attempt(success: bool, username: str, ip_address: str | None) -> NotificationPayload:
    username = _require_text(username, "username")
    ip_address = ip_address or "unknown address"
    outcome = "Successful" if success else "Failed"
    return build_payload(
        message=f"{outcome} login attempt for {username} from {ip_address}",
        type=NotificationType.SUCCESS if success else NotificationType.WARNING,
        category=NotificationCategory.AUTH,
        importance=NotificationImportance.LOW if success else NotificationImportance.HIGH,
        metadata={"username": username, "ipAddress": ip_address, "success": success},
    )


def security_alert(message: str, details: Mapping[str, Any] | None = None) -> NotificationPayload:
    return build_payload(
        message=_require_text(message, "message"),
        type=NotificationType.ERROR,
        category=NotificationCategory.AUTH,
        importance=NotificationImportance.HIGH,
        metadata=dict(details or {}),
    )


# AI assistant

def ai_completed(task: str, subject: str) -> NotificationPayload:
    task = _require_text(task, "task")
    subject = _require_text(subject, "subject")
    return build_payload(
        message=f"AI {task} completed: {subject}",
        type=NotificationType.SUCCESS,
        category=NotificationCategory.AI,
        importance=NotificationImportance.LOW,
        metadata={"task": task, "subject": subject},
    )


def ai_failed(task: str, error: BaseException | str) -> NotificationPayload:
    task = _require_text(task, "task")
    detail = _require_text(str(error), "error")
    return build_payload(
        message=f"AI {task} failed: {detail}",
        type=NotificationType.ERROR,
        category=NotificationCategory.AI,
        importance=NotificationImportance.HIGH,
        metadata={"task": task, "error": detail},
    )


def ai_quota_exceeded(provider: str) -> NotificationPayload:
    provider = _require_text(provider, "provider")
    return build_payload(
        message=f"{provider} API quota exceeded; AI features are paused until it resets",
        type=NotificationType.WARNING,
        category=NotificationCategory.AI,
        link="/admin/settings/api-keys",
        importance=NotificationImportance.HIGH,
        metadata={"provider": provider},
    )


# Analytics

def analytics_threshold(metric: str, value: float, threshold: float) -> NotificationPayload:
    metric = _require_text(metric, "metric")
    return build_payload(
        message=f"Performance alert: {metric} ({value:g}) exceeded threshold ({threshold:g})",
        type=NotificationType.WARNING,
        category=NotificationCategory.ANALYTICS,
        link="/admin/analytics",
        importance=NotificationImportance.HIGH,
        metadata={"metric": metric, "value": value, "threshold": threshold},
    )


def traffic_spike(current: float, baseline: float) -> NotificationPayload:
    return build_payload(
        message=f"Traffic spike detected: {current:g} page views against a baseline of {baseline:.1f}",
        type=NotificationType.INFO,
        category=NotificationCategory.ANALYTICS,
        link="/admin/analytics",
        importance=NotificationImportance.MEDIUM,
        metadata={"current": current, "baseline": round(baseline, 2)},
    )


# Reminders

def reminder(message: str, due: datetime) -> NotificationPayload:
    if not isinstance(due, datetime):
        raise NotificationValidationError("Reminder due date must be a datetime")
    return build_payload(
        message=_require_text(message, "message"),
        type=NotificationType.INFO,
        category=NotificationCategory.GENERAL,
        importance=NotificationImportance.MEDIUM,
        metadata={"dueDate": due.isoformat()},
        expires_at=due,
    )


__all__ = [
    "NotificationPayload",
    "ai_completed",
    "ai_failed",
    "ai_quota_exceeded",
    "analytics_threshold",
    "backup_complete",
    "blog_commented",
    "blog_created",
    "blog_published",
    "build_payload",
    "error_occurred",
    "login_attempt",
    "new_message",
    "project_created",
    "project_status_changed",
    "project_updated",
    "reminder",
    "security_alert",
    "system_maintenance",
    "system_update",
    "traffic_spike",
    "urgent_message",
]
