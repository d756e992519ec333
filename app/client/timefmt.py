"""Relative timestamps for notification lists."""

from __future__ import annotations

from datetime import datetime, timezone

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY


def format_relative_time(created_at: datetime, now: datetime | None = None) -> str:
    """Render ``created_at`` relative to ``now``.

    Returns ``"Just now"`` below one minute, ``"Nm ago"``, ``"Nh ago"`` and
    ``"Nd ago"`` up to a week, and the locale date representation beyond.
    Timestamps in the future are treated as just created.
    """

    if now is None:
        now = datetime.now(created_at.tzinfo or timezone.utc)
        if created_at.tzinfo is None:
            now = now.replace(tzinfo=None)
    elif (now.tzinfo is None) != (created_at.tzinfo is None):
        # Naive values are taken to be UTC.
        now = now if now.tzinfo else now.replace(tzinfo=timezone.utc)
        created_at = created_at if created_at.tzinfo else created_at.replace(tzinfo=timezone.utc)

    seconds = int((now - created_at).total_seconds())
    if seconds < MINUTE:
        return "Just now"
    if seconds < HOUR:
        return f"{seconds // MINUTE}m ago"
    if seconds < DAY:
        return f"{seconds // HOUR}h ago"
    if seconds < WEEK:
        return f"{seconds // DAY}d ago"
    return created_at.strftime("%x")


__all__ = ["format_relative_time"]
