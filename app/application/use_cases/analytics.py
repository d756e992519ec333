"""Use cases for tracking site activity and deriving realtime metrics."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from app.application.use_cases.notifications import NotificationPayload, factory, notify
from app.config import get_settings
from app.domain.entities import EVENT_KINDS, AnalyticsEvent, MetricsSnapshot
from app.infrastructure.repositories import AnalyticsRepository, NotificationRepository
from app.utils import ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)


def record_event(
    session: Session, *, kind: str, visitor_id: str, path: str | None = None
) -> AnalyticsEvent:
    """Store a page view or client error reported by the public site."""

    if kind not in EVENT_KINDS:
        raise ValueError(f"Unsupported analytics event kind '{kind}'")
    visitor_id = (visitor_id or "").strip()
    if not visitor_id:
        raise ValueError("visitor_id is required")

    event = AnalyticsEvent(
        id=None,
        kind=kind,
        visitor_id=visitor_id,
        path=path,
        created_at=now_in_app_timezone(),
    )
    return AnalyticsRepository(session).add(event)


def compute_snapshot(
    session: Session,
    *,
    now: datetime | None = None,
    window_seconds: int | None = None,
) -> MetricsSnapshot:
    """Aggregate the events recorded during the last ``window_seconds``."""

    if window_seconds is None:
        window_seconds = get_settings().metrics_window_seconds
    timestamp = ensure_app_timezone(now) or now_in_app_timezone()
    since = timestamp - timedelta(seconds=window_seconds)
    active_users, page_views, errors = AnalyticsRepository(session).window_counts(since)
    return MetricsSnapshot(
        timestamp=timestamp,
        window_seconds=window_seconds,
        active_users=active_users,
        page_views=page_views,
        errors=errors,
    )


class MetricsMonitor:
    """Turn metric snapshots into analytics notifications.

    Threshold alerts fire when a metric crosses its limit from below and stay
    silent while it remains above. A traffic spike is reported when page views
    exceed ``spike_factor`` times an exponential moving average of previous
    snapshots.
    """

    def __init__(
        self,
        *,
        error_rate_threshold: float,
        active_users_threshold: int,
        spike_factor: float,
        smoothing: float = 0.2,
    ) -> None:
        if not 0 < smoothing <= 1:
            raise ValueError("smoothing must be within (0, 1]")
        self.error_rate_threshold = error_rate_threshold
        self.active_users_threshold = active_users_threshold
        self.spike_factor = spike_factor
        self.smoothing = smoothing
        self.baseline: float | None = None
        self._above: dict[str, bool] = {}

    @classmethod
    def from_settings(cls) -> "MetricsMonitor":
        settings = get_settings()
        return cls(
            error_rate_threshold=settings.error_rate_threshold,
            active_users_threshold=settings.active_users_threshold,
            spike_factor=settings.traffic_spike_factor,
        )

    def evaluate(self, snapshot: MetricsSnapshot) -> list[NotificationPayload]:
        payloads: list[NotificationPayload] = []
        checks = (
            ("Error rate", snapshot.error_rate, self.error_rate_threshold),
            ("Active users", float(snapshot.active_users), float(self.active_users_threshold)),
        )
        for metric, value, threshold in checks:
            above = value > threshold
            if above and not self._above.get(metric, False):
                payloads.append(factory.analytics_threshold(metric, round(value, 2), threshold))
            self._above[metric] = above

        page_views = float(snapshot.page_views)
        if self.baseline is None:
            self.baseline = page_views
            return payloads

        spiking = self.baseline > 0 and page_views > self.spike_factor * self.baseline
        if spiking and not self._above.get("traffic", False):
            payloads.append(factory.traffic_spike(page_views, self.baseline))
        self._above["traffic"] = spiking
        self.baseline += self.smoothing * (page_views - self.baseline)
        return payloads


class MetricsCollector:
    """Blocking collection cycle run by the realtime broadcaster.

    Each call opens its own session, purges expired notifications, computes
    the current snapshot and dispatches any alert the monitor raises.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        monitor: MetricsMonitor,
        *,
        window_seconds: int,
    ) -> None:
        self._session_factory = session_factory
        self.monitor = monitor
        self.window_seconds = window_seconds

    def __call__(self) -> MetricsSnapshot:
        session = self._session_factory()
        try:
            purged = NotificationRepository(session).delete_expired()
            if purged:
                logger.info("Purged %s expired notifications", purged)
            snapshot = compute_snapshot(session, window_seconds=self.window_seconds)
            for payload in self.monitor.evaluate(snapshot):
                notify(session, payload)
            return snapshot
        finally:
            session.close()


__all__ = [
    "MetricsCollector",
    "MetricsMonitor",
    "compute_snapshot",
    "record_event",
]
