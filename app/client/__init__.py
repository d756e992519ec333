"""Async admin client for the notification API."""

from .api import NotificationApiClient, NotificationApiError, notification_from_payload
from .panel import NotificationPanel, ReconcileResult
from .sounds import CueBackend, SoundCueService, TerminalBellBackend
from .stream import (
    RECONNECT_DELAY_SECONDS,
    NotificationStreamListener,
    SseEvent,
    SseParser,
    parse_sse_lines,
)
from .timefmt import format_relative_time

__all__ = [
    "CueBackend",
    "NotificationApiClient",
    "NotificationApiError",
    "NotificationPanel",
    "NotificationStreamListener",
    "RECONNECT_DELAY_SECONDS",
    "ReconcileResult",
    "SoundCueService",
    "SseEvent",
    "SseParser",
    "TerminalBellBackend",
    "format_relative_time",
    "notification_from_payload",
]
