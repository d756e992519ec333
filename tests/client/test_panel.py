"""Tests for the admin notification panel state."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.client import NotificationApiError, NotificationPanel, SseEvent
from app.domain.entities import (
    Notification,
    NotificationCategory,
    NotificationImportance,
    NotificationType,
)

BASE_TIME = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)


def _notification(
    notification_id: str,
    *,
    minutes_ago: int = 0,
    read: bool = False,
    importance: NotificationImportance = NotificationImportance.LOW,
) -> Notification:
    return Notification(
        id=notification_id,
        message=f"Notification {notification_id}",
        type=NotificationType.INFO,
        category=NotificationCategory.SYSTEM,
        importance=importance,
        read=read,
        created_at=BASE_TIME - timedelta(minutes=minutes_ago),
    )


def _api(items: list[Notification] | None = None) -> AsyncMock:
    api = AsyncMock()
    api.list_notifications.return_value = list(items or [])
    return api


def _panel(api: AsyncMock, **kwargs) -> tuple[NotificationPanel, MagicMock]:
    on_error = MagicMock()
    return NotificationPanel(api, on_error=on_error, **kwargs), on_error


@pytest.mark.asyncio
async def test_mark_all_as_read_clears_the_badge() -> None:
    api = _api(
        [
            _notification("a", minutes_ago=1),
            _notification("b", minutes_ago=2),
            _notification("c", minutes_ago=3, read=True),
        ]
    )
    panel, on_error = _panel(api)

    assert await panel.fetch()
    assert panel.badge == "2"

    assert await panel.mark_all_as_read()

    assert panel.badge == "0"
    assert [item.read for item in panel.notifications] == [True, True, True]
    api.mark_all_as_read.assert_awaited_once()
    on_error.assert_not_called()


@pytest.mark.asyncio
async def test_fetch_orders_newest_first() -> None:
    panel, _ = _panel(
        _api([_notification("old", minutes_ago=30), _notification("new", minutes_ago=1)])
    )

    await panel.fetch()

    assert [item.id for item in panel.notifications] == ["new", "old"]


@pytest.mark.asyncio
async def test_mark_as_read_is_idempotent() -> None:
    api = _api([_notification("a"), _notification("b", minutes_ago=1)])
    panel, _ = _panel(api)
    await panel.fetch()

    assert await panel.mark_as_read("a")
    assert await panel.mark_as_read("a")

    assert panel.unread_count == 1
    assert {item.id: item.read for item in panel.notifications} == {"a": True, "b": False}


@pytest.mark.asyncio
async def test_delete_last_item_empties_the_list() -> None:
    api = _api([_notification("only")])
    panel, _ = _panel(api)
    await panel.fetch()

    assert await panel.delete("only")

    assert panel.notifications == ()
    assert panel.badge == "0"
    api.delete.assert_awaited_once_with("only")


@pytest.mark.asyncio
async def test_clear_all_on_empty_list_is_a_successful_no_op() -> None:
    api = _api([])
    panel, on_error = _panel(api)
    await panel.fetch()

    assert await panel.clear_all()

    assert panel.notifications == ()
    on_error.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("action", "args", "api_method"),
    [
        ("mark_as_read", ("a",), "mark_as_read"),
        ("mark_all_as_read", (), "mark_all_as_read"),
        ("delete", ("a",), "delete"),
        ("clear_all", (), "clear_all"),
    ],
)
async def test_failed_action_leaves_local_state_untouched(action, args, api_method) -> None:
    api = _api([_notification("a"), _notification("b", minutes_ago=1)])
    panel, on_error = _panel(api)
    await panel.fetch()
    before = panel.notifications
    error = NotificationApiError("server unavailable", status_code=503)
    getattr(api, api_method).side_effect = error

    assert not await getattr(panel, action)(*args)

    assert panel.notifications == before
    assert panel.unread_count == 2
    on_error.assert_called_once_with(action, error)


@pytest.mark.asyncio
async def test_deleting_unknown_id_reports_failure() -> None:
    api = _api([_notification("a")])
    api.delete.side_effect = NotificationApiError("not found", status_code=404)
    panel, on_error = _panel(api)
    await panel.fetch()

    assert not await panel.delete("missing")

    assert [item.id for item in panel.notifications] == ["a"]
    on_error.assert_called_once()


@pytest.mark.asyncio
async def test_failed_fetch_keeps_previous_list() -> None:
    api = _api([_notification("a")])
    panel, on_error = _panel(api)
    await panel.fetch()
    api.list_notifications.side_effect = NotificationApiError("offline")

    assert not await panel.fetch()

    assert [item.id for item in panel.notifications] == ["a"]
    assert on_error.call_args.args[0] == "fetch"


def test_reconcile_reports_differences() -> None:
    panel, _ = _panel(_api())
    panel.reconcile([_notification("a"), _notification("b", minutes_ago=1)])

    result = panel.reconcile(
        [_notification("a", read=True), _notification("c", minutes_ago=2)]
    )

    assert result.added == ["c"]
    assert result.removed == ["b"]
    assert result.updated == ["a"]
    assert [item.id for item in panel.notifications] == ["a", "c"]


def test_reconcile_without_changes_keeps_existing_objects() -> None:
    panel, _ = _panel(_api())
    panel.reconcile([_notification("a")])
    original = panel.notifications[0]

    result = panel.reconcile([_notification("a")])

    assert not result.changed
    assert panel.notifications[0] is original


def test_badge_caps_at_ninety_nine() -> None:
    panel, _ = _panel(_api())
    panel.reconcile([_notification(str(index), minutes_ago=index) for index in range(120)])

    assert panel.unread_count == 120
    assert panel.badge == "99+"


def _notification_event(notification_id: str, importance: str = "high") -> SseEvent:
    return SseEvent(
        event="notification",
        id=notification_id,
        data=json.dumps(
            {
                "id": notification_id,
                "message": "New contact message from Ada",
                "type": "warning",
                "category": "message",
                "importance": importance,
                "read": False,
                "created_at": "2030-01-01T12:05:00Z",
            }
        ),
    )


def test_pushed_notification_is_added_once_and_plays_a_cue() -> None:
    sounds = MagicMock()
    panel, _ = _panel(_api(), sounds=sounds)
    panel.reconcile([_notification("a")])

    assert panel.handle_event(_notification_event("pushed"))
    assert not panel.handle_event(_notification_event("pushed"))

    assert [item.id for item in panel.notifications] == ["pushed", "a"]
    assert panel.unread_count == 2
    sounds.play_for.assert_called_once()
    assert sounds.play_for.call_args.args[0].id == "pushed"


def test_metrics_event_updates_snapshot() -> None:
    panel, _ = _panel(_api())

    assert panel.handle_event(SseEvent(event="metrics", data='{"active_users": 4}'))
    assert not panel.handle_event(SseEvent(event="ready", data="{}"))

    assert panel.metrics == {"active_users": 4}
    assert panel.notifications == ()


def test_relative_times_use_reference_clock() -> None:
    panel, _ = _panel(_api())
    panel.reconcile([_notification("a", minutes_ago=5)])

    assert panel.relative_times(BASE_TIME) == {"a": "5m ago"}


@pytest.mark.asyncio
async def test_context_manager_runs_full_lifecycle() -> None:
    api = _api([_notification("a")])
    listener = MagicMock()
    listener.close = AsyncMock()
    listener_factory = MagicMock(return_value=listener)
    sounds = MagicMock()

    async with NotificationPanel(
        api, sounds=sounds, listener_factory=listener_factory, poll_interval=3600
    ) as panel:
        assert [item.id for item in panel.notifications] == ["a"]
        listener_factory.assert_called_once_with(api.open_stream, panel.handle_event)
        listener.start.assert_called_once()
        sounds.init.assert_called_once()

    listener.close.assert_awaited_once()
    sounds.dispose.assert_called_once()
    api.aclose.assert_awaited_once()


def _held_listing(api: AsyncMock, items: list[Notification]) -> asyncio.Event:
    release = asyncio.Event()

    async def _list_notifications():
        await release.wait()
        return list(items)

    api.list_notifications.side_effect = _list_notifications
    return release


@pytest.mark.asyncio
async def test_stale_poll_does_not_unread_a_confirmed_read() -> None:
    api = _api([_notification("a"), _notification("b", minutes_ago=1)])
    panel, _ = _panel(api)
    await panel.fetch()
    release = _held_listing(api, [_notification("a"), _notification("b", minutes_ago=1)])

    poll = asyncio.create_task(panel.fetch())
    await asyncio.sleep(0)
    assert await panel.mark_as_read("a")
    release.set()

    assert await poll
    assert {item.id: item.read for item in panel.notifications} == {"a": True, "b": False}
    assert panel.unread_count == 1


@pytest.mark.asyncio
async def test_push_during_poll_is_kept() -> None:
    api = _api([_notification("a")])
    panel, _ = _panel(api)
    await panel.fetch()
    release = _held_listing(api, [_notification("a")])

    poll = asyncio.create_task(panel.fetch())
    await asyncio.sleep(0)
    assert panel.handle_event(_notification_event("pushed"))
    release.set()

    assert await poll
    assert [item.id for item in panel.notifications] == ["pushed", "a"]


@pytest.mark.asyncio
async def test_delete_during_poll_is_not_undone() -> None:
    api = _api([_notification("a"), _notification("b", minutes_ago=1)])
    panel, _ = _panel(api)
    await panel.fetch()
    release = _held_listing(api, [_notification("a"), _notification("b", minutes_ago=1)])

    poll = asyncio.create_task(panel.fetch())
    await asyncio.sleep(0)
    assert await panel.delete("b")
    release.set()

    assert await poll
    assert [item.id for item in panel.notifications] == ["a"]


@pytest.mark.asyncio
async def test_server_removal_is_applied_by_poll() -> None:
    api = _api([_notification("a"), _notification("b", minutes_ago=1)])
    panel, _ = _panel(api)
    await panel.fetch()
    api.list_notifications.return_value = [_notification("a")]

    assert await panel.fetch()

    assert [item.id for item in panel.notifications] == ["a"]


@pytest.mark.asyncio
async def test_deleting_read_item_keeps_unread_count() -> None:
    api = _api([_notification("unread"), _notification("seen", minutes_ago=1, read=True)])
    panel, _ = _panel(api)
    await panel.fetch()
    assert panel.unread_count == 1

    assert await panel.delete("seen")

    assert panel.unread_count == 1
    assert [item.id for item in panel.notifications] == ["unread"]


@pytest.mark.asyncio
async def test_deleting_unread_item_drops_count_by_one() -> None:
    api = _api(
        [
            _notification("first"),
            _notification("second", minutes_ago=1),
            _notification("seen", minutes_ago=2, read=True),
        ]
    )
    panel, _ = _panel(api)
    await panel.fetch()
    assert panel.unread_count == 2

    assert await panel.delete("first")

    assert panel.unread_count == 1
    assert panel.badge == "1"
