"""Tests for the notification publisher and the metrics broadcaster."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.domain.entities import (
    MetricsSnapshot,
    Notification,
    NotificationCategory,
    NotificationImportance,
    NotificationType,
)
from app.infrastructure.notifications import (
    MetricsBroadcaster,
    NotificationPublisher,
    NotificationStreamManager,
    serialize_notification,
)

CREATED_AT = datetime(2030, 5, 1, 12, 0, tzinfo=timezone.utc)


def _notification() -> Notification:
    return Notification(
        id="abc",
        message="New blog post created: Hello World",
        type=NotificationType.SUCCESS,
        category=NotificationCategory.BLOG,
        importance=NotificationImportance.MEDIUM,
        link="/blog/hello-world",
        metadata={"blogId": "b1"},
        created_at=CREATED_AT,
    )


def _snapshot() -> MetricsSnapshot:
    return MetricsSnapshot(
        timestamp=CREATED_AT, window_seconds=60, active_users=4, page_views=20, errors=1
    )


def test_serialize_notification_uses_plain_values() -> None:
    payload = serialize_notification(_notification())

    assert payload["type"] == "success"
    assert payload["category"] == "blog"
    assert payload["importance"] == "medium"
    assert payload["read"] is False
    assert payload["created_at"] == CREATED_AT.isoformat()
    assert payload["expires_at"] is None


@pytest.mark.asyncio
async def test_publisher_schedules_broadcast_on_running_loop() -> None:
    manager = NotificationStreamManager()
    subscription = manager.connect()

    NotificationPublisher(manager).dispatch(_notification())

    message = await subscription.next_message(timeout=0.5)
    assert message["type"] == "notification"
    assert message["data"]["id"] == "abc"


def test_publisher_without_event_loop_drops_message() -> None:
    manager = MagicMock()

    NotificationPublisher(manager).dispatch(_notification())

    manager.broadcast.assert_not_called()


def test_metrics_snapshot_reports_rounded_error_rate() -> None:
    snapshot = MetricsSnapshot(
        timestamp=CREATED_AT, window_seconds=60, active_users=1, page_views=3, errors=1
    )

    assert snapshot.as_dict()["error_rate"] == 33.33
    assert MetricsSnapshot(
        timestamp=CREATED_AT, window_seconds=60, active_users=0, page_views=0, errors=2
    ).error_rate == 200.0


@pytest.mark.asyncio
async def test_tick_broadcasts_only_with_subscribers() -> None:
    manager = MagicMock()
    manager.broadcast = AsyncMock(return_value=1)
    manager.subscriber_count = 0
    broadcaster = MetricsBroadcaster(manager, _snapshot, interval_seconds=60)

    await broadcaster.tick()
    manager.broadcast.assert_not_awaited()

    manager.subscriber_count = 1
    await broadcaster.tick()
    manager.broadcast.assert_awaited_once_with({"type": "metrics", "data": _snapshot().as_dict()})


@pytest.mark.asyncio
async def test_tick_survives_collection_failure() -> None:
    manager = MagicMock()
    manager.broadcast = AsyncMock()
    manager.subscriber_count = 1

    def _collect():
        raise RuntimeError("database unavailable")

    assert await MetricsBroadcaster(manager, _collect, interval_seconds=60).tick() is None
    manager.broadcast.assert_not_awaited()


@pytest.mark.asyncio
async def test_broadcaster_start_and_stop() -> None:
    manager = NotificationStreamManager()
    collect = MagicMock(return_value=_snapshot())
    broadcaster = MetricsBroadcaster(manager, collect, interval_seconds=60)

    broadcaster.start()
    await asyncio.sleep(0.2)
    assert broadcaster.running
    await broadcaster.stop()

    assert not broadcaster.running
    collect.assert_called_once_with()
