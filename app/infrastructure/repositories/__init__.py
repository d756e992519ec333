from .analytics_repository import AnalyticsRepository
from .contact_message_repository import ContactMessageRepository
from .notification_repository import NotificationRepository

__all__ = [
    "AnalyticsRepository",
    "ContactMessageRepository",
    "NotificationRepository",
]
