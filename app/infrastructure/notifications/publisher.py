"""Utility helpers to push notifications to stream subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from anyio import from_thread

from app.domain.entities import Notification

from .manager import NotificationStreamManager, notification_manager

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Serialize notifications and schedule their delivery.

    Delivery is best-effort: failures are logged and never reach the caller.
    From a worker thread the call blocks until the message is queued on every
    subscription, so consecutive dispatches keep their order.
    """

    def __init__(self, manager: NotificationStreamManager) -> None:
        self._manager = manager
        self._pending: set[asyncio.Task[int]] = set()

    def dispatch(self, notification: Notification) -> None:
        """Schedule ``notification`` to be delivered to every subscriber."""

        self.publish({"type": "notification", "data": serialize_notification(notification)})

    def publish(self, message: dict[str, Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._publish_from_thread(message)
        else:
            task = loop.create_task(self._manager.broadcast(message))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    def _publish_from_thread(self, message: dict[str, Any]) -> None:
        try:
            from_thread.run(self._manager.broadcast, message)
        except RuntimeError:
            logger.debug(
                "No event loop reachable from this thread; skipping realtime %s event",
                message.get("type"),
            )
        except Exception:
            logger.warning(
                "Realtime delivery of %s event failed", message.get("type"), exc_info=True
            )


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the stream payload representation for ``notification``."""

    return {
        "id": notification.id,
        "message": notification.message,
        "type": notification.type.value,
        "category": notification.category.value,
        "importance": notification.importance.value,
        "link": notification.link,
        "metadata": notification.metadata or {},
        "read": notification.read,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "expires_at": notification.expires_at.isoformat()
        if notification.expires_at
        else None,
    }


notification_publisher = NotificationPublisher(notification_manager)


def dispatch_notification(notification: Notification) -> None:
    """Public helper that delegates to the shared publisher instance."""

    notification_publisher.dispatch(notification)


__all__ = [
    "NotificationPublisher",
    "dispatch_notification",
    "notification_publisher",
    "serialize_notification",
]
