"""Server-Sent Events listener with a fixed reconnect delay."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import AsyncIterator, Callable, Iterable
from dataclasses import dataclass
from typing import Any, AsyncContextManager, Protocol

logger = logging.getLogger(__name__)

RECONNECT_DELAY_SECONDS = 5.0


@dataclass
class SseEvent:
    """One dispatched Server-Sent Event."""

    event: str = "message"
    data: str = ""
    id: str | None = None
    retry: int | None = None

    def json(self) -> Any:
        return json.loads(self.data) if self.data else None


class SseParser:
    """Incremental parser fed one line at a time."""

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self._event: str | None = None
        self._data: list[str] = []
        self._id: str | None = None
        self._retry: int | None = None

    def feed(self, line: str) -> SseEvent | None:
        line = line.rstrip("\r\n")
        if not line:
            if not self._data and self._event is None and self._retry is None:
                self._reset()
                return None
            event = SseEvent(
                event=self._event or "message",
                data="\n".join(self._data),
                id=self._id,
                retry=self._retry,
            )
            self._reset()
            return event
        if line.startswith(":"):
            return None

        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "data":
            self._data.append(value)
        elif field == "event":
            self._event = value
        elif field == "id":
            self._id = value
        elif field == "retry" and value.isdigit():
            self._retry = int(value)
        return None


def parse_sse_lines(lines: Iterable[str]) -> list[SseEvent]:
    """Parse a complete sequence of lines into events."""

    parser = SseParser()
    events = []
    for line in lines:
        event = parser.feed(line)
        if event is not None:
            events.append(event)
    return events


class Cancellable(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], Cancellable]
StreamConnector = Callable[[], AsyncContextManager[AsyncIterator[str]]]


def _loop_scheduler(delay: float, callback: Callable[[], None]) -> Cancellable:
    return asyncio.get_running_loop().call_later(delay, callback)


class NotificationStreamListener:
    """Consume the notification stream and reconnect after unexpected drops.

    An unexpected end of stream or a connection error schedules exactly one
    reconnect ``reconnect_delay`` seconds later. :meth:`close` is deliberate:
    it cancels any pending reconnect and never schedules a new one.
    """

    def __init__(
        self,
        connect: StreamConnector,
        on_event: Callable[[SseEvent], Any],
        *,
        reconnect_delay: float = RECONNECT_DELAY_SECONDS,
        scheduler: Scheduler | None = None,
    ) -> None:
        self._connect = connect
        self._on_event = on_event
        self.reconnect_delay = reconnect_delay
        self._scheduler = scheduler or _loop_scheduler
        self._task: asyncio.Task[None] | None = None
        self._pending_reconnect: Cancellable | None = None
        self._closed = False
        self.connected = False
        self.connection_attempts = 0

    @property
    def task(self) -> asyncio.Task[None] | None:
        return self._task

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def reconnect_pending(self) -> bool:
        return self._pending_reconnect is not None

    def start(self) -> None:
        if self._closed:
            raise RuntimeError("Listener has been closed")
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        self.connection_attempts += 1
        try:
            async with self._connect() as lines:
                self.connected = True
                parser = SseParser()
                async for line in lines:
                    event = parser.feed(line)
                    if event is not None:
                        self._dispatch(event)
            logger.warning("Notification stream ended unexpectedly")
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.warning("Notification stream connection failed", exc_info=True)
        finally:
            self.connected = False
        if not self._closed:
            self._schedule_reconnect()

    def _dispatch(self, event: SseEvent) -> None:
        if event.retry is not None:
            self.reconnect_delay = event.retry / 1000
        try:
            self._on_event(event)
        except Exception:
            logger.exception("Notification stream handler failed for %s event", event.event)

    def _schedule_reconnect(self) -> None:
        if self._pending_reconnect is not None:
            return
        logger.info("Reconnecting to notification stream in %s seconds", self.reconnect_delay)
        self._pending_reconnect = self._scheduler(self.reconnect_delay, self._reconnect)

    def _reconnect(self) -> None:
        self._pending_reconnect = None
        if not self._closed:
            self.start()

    async def close(self) -> None:
        self._closed = True
        if self._pending_reconnect is not None:
            self._pending_reconnect.cancel()
            self._pending_reconnect = None
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


__all__ = [
    "NotificationStreamListener",
    "RECONNECT_DELAY_SECONDS",
    "SseEvent",
    "SseParser",
    "parse_sse_lines",
]
