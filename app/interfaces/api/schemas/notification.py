"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationImportance,
    NotificationType,
)


class NotificationCreate(BaseModel):
    """Payload accepted when a notification is created over HTTP."""

    model_config = ConfigDict(extra="forbid")

    message: str = Field(..., min_length=1, max_length=2000)
    type: NotificationType = NotificationType.INFO
    category: NotificationCategory = NotificationCategory.GENERAL
    importance: NotificationImportance = NotificationImportance.LOW
    link: str | None = Field(default=None, max_length=500)
    metadata: dict[str, Any] = Field(default_factory=dict)
    expires_at: datetime | None = None

    @field_validator("message")
    @classmethod
    def _message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be blank")
        return value


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    message: str
    type: NotificationType
    category: NotificationCategory
    importance: NotificationImportance
    link: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    read: bool
    created_at: datetime
    expires_at: datetime | None = None
    title: str
    icon: str
    action_link: str
    action_label: str

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationRead":
        treatment = notification.category.treatment
        return cls(
            id=notification.id or "",
            message=notification.message,
            type=notification.type,
            category=notification.category,
            importance=notification.importance,
            link=notification.link,
            metadata=notification.metadata or {},
            read=notification.read,
            created_at=notification.created_at,
            expires_at=notification.expires_at,
            title=treatment.title,
            icon=treatment.icon,
            action_link=notification.resolved_link(),
            action_label=treatment.action_label,
        )


class UnreadCountRead(BaseModel):
    unread: int


class BulkModifiedRead(BaseModel):
    modified: int


class BulkDeletedRead(BaseModel):
    deleted: int


__all__ = [
    "BulkDeletedRead",
    "BulkModifiedRead",
    "NotificationCreate",
    "NotificationRead",
    "UnreadCountRead",
]
