"""Realtime notification helpers for the infrastructure layer."""

from .manager import (
    CloseReason,
    NotificationStreamManager,
    StreamState,
    StreamSubscription,
    SubscriptionClosedError,
    notification_manager,
)
from .publisher import (
    NotificationPublisher,
    dispatch_notification,
    notification_publisher,
    serialize_notification,
)
from .realtime import MetricsBroadcaster
from .sse import CLIENT_RETRY_MILLISECONDS, KEEPALIVE_FRAME, format_sse, stream_events

__all__ = [
    "CLIENT_RETRY_MILLISECONDS",
    "CloseReason",
    "KEEPALIVE_FRAME",
    "MetricsBroadcaster",
    "NotificationPublisher",
    "NotificationStreamManager",
    "StreamState",
    "StreamSubscription",
    "SubscriptionClosedError",
    "dispatch_notification",
    "format_sse",
    "notification_manager",
    "notification_publisher",
    "serialize_notification",
    "stream_events",
]
