"""Server-Sent Events framing for the notification stream."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from .manager import CloseReason, NotificationStreamManager, StreamSubscription

logger = logging.getLogger(__name__)

CLIENT_RETRY_MILLISECONDS = 5000
KEEPALIVE_FRAME = ": keepalive\n\n"


def format_sse(
    data: Any,
    *,
    event: str | None = None,
    event_id: str | None = None,
    retry: int | None = None,
) -> str:
    """Encode ``data`` as a single SSE frame."""

    lines: list[str] = []
    if event_id is not None:
        lines.append(f"id: {event_id}")
    if event is not None:
        lines.append(f"event: {event}")
    if retry is not None:
        lines.append(f"retry: {retry}")
    payload = data if isinstance(data, str) else json.dumps(data, default=str)
    lines.extend(f"data: {line}" for line in payload.splitlines() or [""])
    return "\n".join(lines) + "\n\n"


async def stream_events(
    manager: NotificationStreamManager,
    *,
    is_disconnected: Callable[[], Awaitable[bool]],
    keepalive_seconds: float,
) -> AsyncIterator[str]:
    """Open a subscription on ``manager`` and yield its SSE frames.

    The subscription is registered on the first iteration, so a response that
    is never streamed leaves nothing behind. Queued messages are emitted in the
    order they were broadcast. While no message arrives within
    ``keepalive_seconds`` the subscription is idle and a comment frame keeps
    intermediaries from closing the connection.
    """

    reason = CloseReason.CLIENT
    subscription: StreamSubscription | None = None
    try:
        subscription = manager.connect()
        yield format_sse(
            {"subscription": subscription.id},
            event="ready",
            retry=CLIENT_RETRY_MILLISECONDS,
        )
        while subscription.is_open:
            if await is_disconnected():
                break
            message = await subscription.next_message(timeout=keepalive_seconds)
            if not subscription.is_open:
                break
            if message is None:
                subscription.mark_idle()
                yield KEEPALIVE_FRAME
                continue
            subscription.mark_streaming()
            data = message.get("data", {})
            yield format_sse(
                data,
                event=message.get("type", "message"),
                event_id=data.get("id") if isinstance(data, dict) else None,
            )
    except Exception:
        reason = CloseReason.ERROR
        logger.warning(
            "Stream subscription %s failed",
            subscription.id if subscription is not None else "(unopened)",
            exc_info=True,
        )
        raise
    finally:
        if subscription is not None:
            manager.disconnect(subscription, reason)


__all__ = [
    "CLIENT_RETRY_MILLISECONDS",
    "KEEPALIVE_FRAME",
    "format_sse",
    "stream_events",
]
