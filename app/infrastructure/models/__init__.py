"""ORM models used by the application infrastructure."""

from .analytics_event import AnalyticsEventModel
from .contact_message import ContactMessageModel
from .notification import NotificationModel

__all__ = [
    "AnalyticsEventModel",
    "ContactMessageModel",
    "NotificationModel",
]
