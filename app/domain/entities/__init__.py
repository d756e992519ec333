"""Domain entities exposed by the application."""

from .analytics import (
    EVENT_ERROR,
    EVENT_KINDS,
    EVENT_PAGE_VIEW,
    AnalyticsEvent,
    MetricsSnapshot,
)
from .contact_message import ContactMessage
from .notification import (
    CATEGORY_TREATMENTS,
    CategoryTreatment,
    Notification,
    NotificationCategory,
    NotificationImportance,
    NotificationType,
)

__all__ = [
    "AnalyticsEvent",
    "CATEGORY_TREATMENTS",
    "CategoryTreatment",
    "ContactMessage",
    "EVENT_ERROR",
    "EVENT_KINDS",
    "EVENT_PAGE_VIEW",
    "MetricsSnapshot",
    "Notification",
    "NotificationCategory",
    "NotificationImportance",
    "NotificationType",
]
