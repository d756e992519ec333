"""Domain entities used by the realtime analytics feed."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

EVENT_PAGE_VIEW = "page_view"
EVENT_ERROR = "error"
EVENT_KINDS = (EVENT_PAGE_VIEW, EVENT_ERROR)


@dataclass
class AnalyticsEvent:
    """Single tracked interaction on the public site."""

    id: int | None
    kind: str
    visitor_id: str
    path: str | None
    created_at: datetime | None = None


@dataclass(frozen=True)
class MetricsSnapshot:
    """Derived metrics over a sliding time window."""

    timestamp: datetime
    window_seconds: int
    active_users: int
    page_views: int
    errors: int

    @property
    def error_rate(self) -> float:
        """Errors as a percentage of page views within the window."""

        return self.errors / max(self.page_views, 1) * 100

    def as_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["timestamp"] = self.timestamp.isoformat()
        payload["error_rate"] = round(self.error_rate, 2)
        return payload


__all__ = [
    "AnalyticsEvent",
    "EVENT_ERROR",
    "EVENT_KINDS",
    "EVENT_PAGE_VIEW",
    "MetricsSnapshot",
]
