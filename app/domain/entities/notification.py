"""Domain entity representing a dashboard notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    """Severity of a notification; drives color and sound treatment."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"

    @property
    def sound_cue(self) -> str:
        return _TYPE_SOUND_CUES[self]


class NotificationCategory(str, Enum):
    """Domain area a notification belongs to."""

    BLOG = "blog"
    PROJECT = "project"
    SERVICE = "service"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    MESSAGE = "message"
    SYSTEM = "system"
    AI = "ai"
    ANALYTICS = "analytics"
    AUTH = "auth"
    GENERAL = "general"

    @property
    def treatment(self) -> "CategoryTreatment":
        return CATEGORY_TREATMENTS[self]


class NotificationImportance(str, Enum):
    """Priority of a notification; drives sorting and audible alerts."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _IMPORTANCE_RANKS[self]

    @property
    def is_audible(self) -> bool:
        return self is not NotificationImportance.LOW


@dataclass(frozen=True)
class CategoryTreatment:
    """Presentation attributes attached to a :class:`NotificationCategory`."""

    title: str
    icon: str
    default_link: str
    action_label: str


CATEGORY_TREATMENTS: dict[NotificationCategory, CategoryTreatment] = {
    NotificationCategory.BLOG: CategoryTreatment(
        "Blog Update", "newspaper", "/admin/blog", "View Blog"
    ),
    NotificationCategory.PROJECT: CategoryTreatment(
        "Project Update", "folder", "/admin/project", "View Project"
    ),
    NotificationCategory.SERVICE: CategoryTreatment(
        "Service Update", "cube", "/admin/services", "View Service"
    ),
    NotificationCategory.EXPERIENCE: CategoryTreatment(
        "Experience Update", "briefcase", "/admin/experience", "View Experience"
    ),
    NotificationCategory.EDUCATION: CategoryTreatment(
        "Education Update", "graduation-cap", "/admin/education", "View Education"
    ),
    NotificationCategory.MESSAGE: CategoryTreatment(
        "New Message", "envelope", "/admin/messages", "View Message"
    ),
    NotificationCategory.SYSTEM: CategoryTreatment(
        "System Notification", "cog", "/admin/settings", "View Settings"
    ),
    NotificationCategory.AI: CategoryTreatment(
        "AI Assistant", "robot", "/admin/settings/api-keys", "View AI Settings"
    ),
    NotificationCategory.ANALYTICS: CategoryTreatment(
        "Analytics Alert", "chart-line", "/admin/analytics", "View Analytics"
    ),
    NotificationCategory.AUTH: CategoryTreatment(
        "Security", "lock", "/admin/settings/profile", "Review Access"
    ),
    NotificationCategory.GENERAL: CategoryTreatment(
        "Notification", "bell", "/admin", "View Details"
    ),
}

_TYPE_SOUND_CUES: dict[NotificationType, str] = {
    NotificationType.INFO: "notification",
    NotificationType.SUCCESS: "success",
    NotificationType.WARNING: "warning",
    NotificationType.ERROR: "error",
}

_IMPORTANCE_RANKS: dict[NotificationImportance, int] = {
    NotificationImportance.LOW: 0,
    NotificationImportance.MEDIUM: 1,
    NotificationImportance.HIGH: 2,
}

for _mapping, _enum in (
    (CATEGORY_TREATMENTS, NotificationCategory),
    (_TYPE_SOUND_CUES, NotificationType),
    (_IMPORTANCE_RANKS, NotificationImportance),
):
    _missing = set(_enum) - set(_mapping)
    if _missing:
        raise RuntimeError(
            f"{_enum.__name__} members without presentation data: "
            + ", ".join(sorted(member.value for member in _missing))
        )


@dataclass
class Notification:
    """Persisted record describing a noteworthy domain event."""

    id: str | None
    message: str
    type: NotificationType
    category: NotificationCategory
    importance: NotificationImportance = NotificationImportance.LOW
    link: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    read: bool = False
    created_at: datetime | None = None
    expires_at: datetime | None = None

    def resolved_link(self) -> str:
        """Return the explicit link or the category's default destination."""

        return self.link or self.category.treatment.default_link

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now


__all__ = [
    "CATEGORY_TREATMENTS",
    "CategoryTreatment",
    "Notification",
    "NotificationCategory",
    "NotificationImportance",
    "NotificationType",
]
