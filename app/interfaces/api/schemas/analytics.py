"""Schemas for tracked site events and realtime metrics."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class AnalyticsEventCreate(BaseModel):
    kind: Literal["page_view", "error"]
    visitor_id: str = Field(..., min_length=1, max_length=64)
    path: str | None = Field(default=None, max_length=500)


class AnalyticsEventRead(BaseModel):
    id: int
    kind: str
    visitor_id: str
    path: str | None = None
    created_at: datetime


class MetricsSnapshotRead(BaseModel):
    """Derived activity metrics for the last ``window_seconds``."""

    timestamp: datetime
    window_seconds: int
    active_users: int
    page_views: int
    errors: int
    error_rate: float


__all__ = ["AnalyticsEventCreate", "AnalyticsEventRead", "MetricsSnapshotRead"]
