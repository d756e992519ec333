"""Admin notification panel state kept in sync with the API."""

from __future__ import annotations

import asyncio
import contextlib
import dataclasses
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from app.domain.entities import Notification

from .api import NotificationApiClient, notification_from_payload
from .sounds import SoundCueService
from .stream import NotificationStreamListener, SseEvent
from .timefmt import format_relative_time

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 60.0
BADGE_LIMIT = 99

ErrorHandler = Callable[[str, Exception], None]
ListenerFactory = Callable[..., NotificationStreamListener]


def _log_action_error(action: str, exc: Exception) -> None:
    logger.error("Notification action %s failed: %s", action, exc)


def _sort_key(notification: Notification) -> datetime:
    return notification.created_at or datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class ReconcileResult:
    """Ids touched while merging a server listing into local state."""

    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed or self.updated)


class NotificationPanel:
    """Visible notification list with its unread count and user actions.

    Local state changes only after the server confirms an action. The unread
    count is always derived from the list itself. Pushed stream events are the
    primary update path; the periodic poll only reconciles differences.
    """

    def __init__(
        self,
        api: NotificationApiClient,
        *,
        sounds: SoundCueService | None = None,
        on_error: ErrorHandler | None = None,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        listener_factory: ListenerFactory = NotificationStreamListener,
    ) -> None:
        self.api = api
        self.sounds = sounds
        self.on_error = on_error or _log_action_error
        self.poll_interval = poll_interval
        self._listener_factory = listener_factory
        self._items: list[Notification] = []
        self.metrics: dict[str, Any] | None = None
        self.listener: NotificationStreamListener | None = None
        self._poll_task: asyncio.Task[None] | None = None
        self._fetches_in_flight = 0
        self._deleted_during_fetch: list[str] = []

    @property
    def notifications(self) -> tuple[Notification, ...]:
        return tuple(self._items)

    @property
    def unread_count(self) -> int:
        return sum(1 for notification in self._items if not notification.read)

    @property
    def badge(self) -> str:
        count = self.unread_count
        return f"{BADGE_LIMIT}+" if count > BADGE_LIMIT else str(count)

    def relative_times(self, now: datetime | None = None) -> dict[str, str]:
        return {
            notification.id: format_relative_time(notification.created_at, now)
            for notification in self._items
            if notification.id and notification.created_at
        }

    def _fail(self, action: str, exc: Exception) -> bool:
        self.on_error(action, exc)
        return False

    def _record_deletions(self, ids: Iterable[str]) -> None:
        if self._fetches_in_flight:
            self._deleted_during_fetch.extend(ids)

    async def fetch(self) -> bool:
        """Reconcile local state with the server listing.

        The listing may be older than actions confirmed while it was in
        flight, so only ids known when the request started can be removed and
        ids deleted meanwhile are not brought back.
        """

        known_ids = {item.id for item in self._items}
        mark = len(self._deleted_during_fetch)
        self._fetches_in_flight += 1
        try:
            items = await self.api.list_notifications()
        except Exception as exc:
            return self._fail("fetch", exc)
        else:
            deleted_ids = set(self._deleted_during_fetch[mark:])
        finally:
            self._fetches_in_flight -= 1
            if not self._fetches_in_flight:
                self._deleted_during_fetch.clear()
        self.reconcile(items, known_ids=known_ids, deleted_ids=deleted_ids)
        return True

    def reconcile(
        self,
        server_items: Iterable[Notification],
        *,
        known_ids: Iterable[str] | None = None,
        deleted_ids: Iterable[str] = (),
    ) -> ReconcileResult:
        """Merge the server listing into local state without replacing it.

        A record read locally stays read. Local records missing from the
        listing are removed only when they are in ``known_ids`` (all local
        records when omitted); listed ids in ``deleted_ids`` are ignored.
        """

        result = ReconcileResult()
        current = {notification.id: notification for notification in self._items}
        removable = set(current) if known_ids is None else set(known_ids)
        skipped = set(deleted_ids)
        merged: list[Notification] = []
        seen: set[str] = set()
        for item in server_items:
            if item.id in seen or item.id in skipped:
                continue
            seen.add(item.id)
            existing = current.get(item.id)
            if existing is None:
                result.added.append(item.id)
                merged.append(item)
                continue
            if existing.read and not item.read:
                item = dataclasses.replace(item, read=True)
            if existing != item:
                result.updated.append(item.id)
                merged.append(item)
            else:
                merged.append(existing)
        for item_id, existing in current.items():
            if item_id in seen:
                continue
            if item_id in removable:
                result.removed.append(item_id)
            else:
                merged.append(existing)
        if result.changed:
            merged.sort(key=_sort_key, reverse=True)
            self._items = merged
        return result

    async def mark_as_read(self, notification_id: str) -> bool:
        try:
            await self.api.mark_as_read(notification_id)
        except Exception as exc:
            return self._fail("mark_as_read", exc)
        self._items = [
            dataclasses.replace(item, read=True) if item.id == notification_id else item
            for item in self._items
        ]
        return True

    async def mark_all_as_read(self) -> bool:
        try:
            await self.api.mark_all_as_read()
        except Exception as exc:
            return self._fail("mark_all_as_read", exc)
        self._items = [dataclasses.replace(item, read=True) for item in self._items]
        return True

    async def delete(self, notification_id: str) -> bool:
        try:
            await self.api.delete(notification_id)
        except Exception as exc:
            return self._fail("delete", exc)
        self._items = [item for item in self._items if item.id != notification_id]
        self._record_deletions([notification_id])
        return True

    async def clear_all(self) -> bool:
        try:
            await self.api.clear_all()
        except Exception as exc:
            return self._fail("clear_all", exc)
        self._record_deletions(item.id for item in self._items)
        self._items = []
        return True

    def handle_event(self, event: SseEvent) -> bool:
        """Apply a pushed stream event; returns whether local state changed."""

        if event.event == "notification":
            notification = notification_from_payload(event.json())
            if any(item.id == notification.id for item in self._items):
                return False
            self._items.append(notification)
            self._items.sort(key=_sort_key, reverse=True)
            if self.sounds is not None:
                self.sounds.play_for(notification)
            return True
        if event.event == "metrics":
            self.metrics = event.json()
            return True
        return False

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self.poll_interval)
            await self.fetch()

    async def start(self) -> None:
        """Load the list, open the stream and begin periodic reconciliation."""

        if self.sounds is not None:
            self.sounds.init()
        await self.fetch()
        self.listener = self._listener_factory(self.api.open_stream, self.handle_event)
        self.listener.start()
        self._poll_task = asyncio.get_running_loop().create_task(self._poll())

    async def close(self) -> None:
        poll_task, self._poll_task = self._poll_task, None
        if poll_task is not None:
            poll_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await poll_task
        if self.listener is not None:
            await self.listener.close()
        if self.sounds is not None:
            self.sounds.dispose()
        await self.api.aclose()

    async def __aenter__(self) -> "NotificationPanel":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


__all__ = ["NotificationPanel", "ReconcileResult"]
