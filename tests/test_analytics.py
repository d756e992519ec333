"""Tests for analytics tracking, snapshots and threshold alerts."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from app.application.use_cases import MetricsCollector, MetricsMonitor, compute_snapshot, record_event
from app.domain.entities import EVENT_ERROR, EVENT_PAGE_VIEW, MetricsSnapshot, NotificationCategory
from app.infrastructure.database import SessionLocal
from app.infrastructure.repositories import NotificationRepository

NOW = datetime(2030, 5, 1, 12, 0, tzinfo=timezone.utc)


def _snapshot(*, active_users: int = 1, page_views: int = 10, errors: int = 0) -> MetricsSnapshot:
    return MetricsSnapshot(
        timestamp=NOW,
        window_seconds=60,
        active_users=active_users,
        page_views=page_views,
        errors=errors,
    )


def _monitor() -> MetricsMonitor:
    return MetricsMonitor(error_rate_threshold=5.0, active_users_threshold=100, spike_factor=3.0)


def test_record_event_rejects_unknown_kind(db_session) -> None:
    with pytest.raises(ValueError):
        record_event(db_session, kind="click", visitor_id="v1")


def test_compute_snapshot_counts_window(db_session) -> None:
    record_event(db_session, kind=EVENT_PAGE_VIEW, visitor_id="v1", path="/")
    record_event(db_session, kind=EVENT_PAGE_VIEW, visitor_id="v1", path="/blog")
    record_event(db_session, kind=EVENT_PAGE_VIEW, visitor_id="v2", path="/")
    record_event(db_session, kind=EVENT_ERROR, visitor_id="v2", path="/broken")

    snapshot = compute_snapshot(db_session, window_seconds=60)

    assert snapshot.active_users == 2
    assert snapshot.page_views == 3
    assert snapshot.errors == 1
    assert round(snapshot.error_rate, 2) == 33.33


def test_compute_snapshot_ignores_events_outside_window(db_session) -> None:
    record_event(db_session, kind=EVENT_PAGE_VIEW, visitor_id="v1")

    later = datetime.now(timezone.utc) + timedelta(minutes=5)
    snapshot = compute_snapshot(db_session, now=later, window_seconds=60)

    assert snapshot.page_views == 0
    assert snapshot.active_users == 0


def test_threshold_alert_is_edge_triggered() -> None:
    monitor = _monitor()

    first = monitor.evaluate(_snapshot(page_views=10, errors=2))
    second = monitor.evaluate(_snapshot(page_views=10, errors=3))
    recovered = monitor.evaluate(_snapshot(page_views=10, errors=0))
    again = monitor.evaluate(_snapshot(page_views=10, errors=1))

    assert [payload.metadata["metric"] for payload in first] == ["Error rate"]
    assert first[0].category is NotificationCategory.ANALYTICS
    assert second == []
    assert recovered == []
    assert [payload.metadata["metric"] for payload in again] == ["Error rate"]


def test_active_users_threshold() -> None:
    alerts = _monitor().evaluate(_snapshot(active_users=150))

    assert [payload.metadata["metric"] for payload in alerts] == ["Active users"]
    assert alerts[0].link == "/admin/analytics"


def test_traffic_spike_against_moving_baseline() -> None:
    monitor = _monitor()

    assert monitor.evaluate(_snapshot(page_views=10)) == []
    assert monitor.evaluate(_snapshot(page_views=12)) == []
    spike = monitor.evaluate(_snapshot(page_views=50))

    assert len(spike) == 1
    assert spike[0].message.startswith("Traffic spike detected: 50 page views")
    assert monitor.evaluate(_snapshot(page_views=60)) == []


def test_collector_purges_and_dispatches_alerts(db_session, monkeypatch) -> None:
    publisher = MagicMock()
    monkeypatch.setattr(
        "app.application.use_cases.notifications.dispatcher.notification_publisher", publisher
    )
    for visitor in range(3):
        record_event(db_session, kind=EVENT_ERROR, visitor_id=f"v{visitor}")
    collector = MetricsCollector(SessionLocal, _monitor(), window_seconds=60)

    snapshot = collector()

    assert snapshot.errors == 3
    stored = NotificationRepository(db_session).list()
    assert [item.category for item in stored] == [NotificationCategory.ANALYTICS]
    assert publisher.dispatch.call_count == 1
