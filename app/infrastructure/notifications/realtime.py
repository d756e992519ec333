"""Periodic metric snapshots pushed to stream subscribers."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

from anyio import to_thread

from app.domain.entities import MetricsSnapshot

from .manager import NotificationStreamManager

logger = logging.getLogger(__name__)


class MetricsBroadcaster:
    """Collect a metric snapshot on a fixed interval and broadcast it.

    ``collect`` is a blocking callable executed in a worker thread; it may also
    perform housekeeping (threshold alerts, expiry purges). The snapshot is only
    broadcast while at least one subscriber is connected.
    """

    def __init__(
        self,
        manager: NotificationStreamManager,
        collect: Callable[[], MetricsSnapshot | None],
        *,
        interval_seconds: float,
    ) -> None:
        self._manager = manager
        self._collect = collect
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> MetricsSnapshot | None:
        try:
            snapshot = await to_thread.run_sync(self._collect)
        except Exception:
            logger.exception("Failed to collect realtime metrics")
            return None
        if snapshot is not None and self._manager.subscriber_count:
            await self._manager.broadcast({"type": "metrics", "data": snapshot.as_dict()})
        return snapshot

    async def run(self) -> None:
        while True:
            await self.tick()
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        if not self.running:
            self._task = asyncio.get_running_loop().create_task(self.run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None


__all__ = ["MetricsBroadcaster"]
