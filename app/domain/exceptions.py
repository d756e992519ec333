"""Exceptions raised by the notification pipeline."""


class NotificationError(Exception):
    """Base class for notification pipeline failures."""


class NotificationValidationError(NotificationError, ValueError):
    """Raised when a notification payload is malformed."""


class NotificationPersistenceError(NotificationError):
    """Raised when the notification store rejects or cannot perform a write."""


class NotificationNotFoundError(NotificationError, LookupError):
    """Raised when a notification identifier does not exist in the store."""

    def __init__(self, notification_id: str) -> None:
        super().__init__(f"Notification with id {notification_id} not found")
        self.notification_id = notification_id


__all__ = [
    "NotificationError",
    "NotificationNotFoundError",
    "NotificationPersistenceError",
    "NotificationValidationError",
]
