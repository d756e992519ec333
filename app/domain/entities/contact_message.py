"""Domain entity representing a message sent through the public contact form."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ContactMessage:
    """Message left by a site visitor for the portfolio owner."""

    id: int | None
    name: str
    email: str
    subject: str
    body: str
    urgent: bool = False
    read: bool = False
    created_at: datetime | None = None


__all__ = ["ContactMessage"]
