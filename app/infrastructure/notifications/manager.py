"""Connection management helpers for the notification event stream."""

from __future__ import annotations

import asyncio
import copy
import logging
import uuid
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_MAX_QUEUE_SIZE = 1000


class StreamState(str, Enum):
    """Lifecycle of a single stream subscription."""

    CONNECTING = "connecting"
    OPEN = "open"
    STREAMING = "streaming"
    IDLE = "idle"
    CLOSED = "closed"


class CloseReason(str, Enum):
    """Why a subscription reached :attr:`StreamState.CLOSED`."""

    CLIENT = "client"
    SERVER = "server"
    ERROR = "error"


class SubscriptionClosedError(RuntimeError):
    """Raised when pushing to a subscription that is already closed."""


_CLOSE_SIGNAL = object()


class StreamSubscription:
    """Ephemeral push channel for one connected dashboard client."""

    def __init__(self, subscription_id: str, *, max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE) -> None:
        self.id = subscription_id
        self.state = StreamState.CONNECTING
        self.closed_reason: CloseReason | None = None
        self._queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=max_queue_size)

    @property
    def is_open(self) -> bool:
        return self.state is not StreamState.CLOSED

    def open(self) -> None:
        if self.state is StreamState.CONNECTING:
            self.state = StreamState.OPEN

    def push(self, message: dict[str, Any]) -> None:
        """Queue ``message`` for delivery; raises when the queue is full or closed."""

        if not self.is_open:
            raise SubscriptionClosedError(f"Subscription {self.id} is closed")
        self._queue.put_nowait(message)

    async def next_message(self, timeout: float | None = None) -> dict[str, Any] | None:
        """Wait for the next queued message, or ``None`` on timeout or close."""

        try:
            message = await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None
        if message is _CLOSE_SIGNAL:
            return None
        return message

    def mark_streaming(self) -> None:
        if self.is_open:
            self.state = StreamState.STREAMING

    def mark_idle(self) -> None:
        if self.is_open:
            self.state = StreamState.IDLE

    def close(self, reason: CloseReason) -> None:
        if not self.is_open:
            return
        self.state = StreamState.CLOSED
        self.closed_reason = reason
        try:
            self._queue.put_nowait(_CLOSE_SIGNAL)
        except asyncio.QueueFull:
            # The reader checks ``is_open`` after every message.
            pass


class NotificationStreamManager:
    """Track active stream subscriptions and fan messages out to them."""

    def __init__(self, *, max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE) -> None:
        self._subscriptions: dict[str, StreamSubscription] = {}
        self._max_queue_size = max_queue_size

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    @property
    def subscriptions(self) -> tuple[StreamSubscription, ...]:
        return tuple(self._subscriptions.values())

    def connect(self) -> StreamSubscription:
        """Register a new subscription and move it to the open state."""

        subscription = StreamSubscription(
            uuid.uuid4().hex, max_queue_size=self._max_queue_size
        )
        subscription.open()
        self._subscriptions[subscription.id] = subscription
        logger.info(
            "Stream subscription %s opened. Active subscriptions: %s",
            subscription.id,
            self.subscriber_count,
        )
        return subscription

    def disconnect(
        self, subscription: StreamSubscription, reason: CloseReason = CloseReason.CLIENT
    ) -> None:
        """Remove ``subscription`` from the pool and close it."""

        removed = self._subscriptions.pop(subscription.id, None)
        subscription.close(reason)
        if removed is not None:
            logger.info(
                "Stream subscription %s closed (%s). Active subscriptions: %s",
                subscription.id,
                subscription.closed_reason.value if subscription.closed_reason else reason.value,
                self.subscriber_count,
            )

    async def broadcast(self, message: dict[str, Any]) -> int:
        """Queue ``message`` on every open subscription.

        A subscriber that cannot accept the message is closed and skipped; the
        remaining subscribers still receive it. Returns the number of
        subscriptions the message was queued on.
        """

        delivered = 0
        for subscription in list(self._subscriptions.values()):
            try:
                subscription.push(copy.deepcopy(message))
            except Exception:
                logger.warning(
                    "Dropping stream subscription %s after failed delivery",
                    subscription.id,
                    exc_info=True,
                )
                self.disconnect(subscription, CloseReason.ERROR)
                continue
            delivered += 1
        return delivered

    def close_all(self, reason: CloseReason = CloseReason.SERVER) -> None:
        for subscription in list(self._subscriptions.values()):
            self.disconnect(subscription, reason)


notification_manager = NotificationStreamManager()


__all__ = [
    "CloseReason",
    "NotificationStreamManager",
    "StreamState",
    "StreamSubscription",
    "SubscriptionClosedError",
    "notification_manager",
]
