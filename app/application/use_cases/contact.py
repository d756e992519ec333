"""Use case for storing messages sent through the public contact form."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.application.use_cases.notifications import notify_contact_message
from app.domain.entities import ContactMessage
from app.infrastructure.repositories import ContactMessageRepository
from app.utils import now_in_app_timezone


def submit_contact_message(
    session: Session,
    *,
    name: str,
    email: str,
    subject: str,
    body: str,
    urgent: bool = False,
) -> ContactMessage:
    """Persist the message and alert the administrator.

    The message is stored even when the notification cannot be produced.
    """

    message = ContactMessage(
        id=None,
        name=name.strip(),
        email=email.strip(),
        subject=subject.strip(),
        body=body,
        urgent=urgent,
        created_at=now_in_app_timezone(),
    )
    saved = ContactMessageRepository(session).create(message)
    notify_contact_message(session, message=saved)
    return saved


def list_contact_messages(session: Session, *, limit: int | None = 50) -> list[ContactMessage]:
    return list(ContactMessageRepository(session).list(limit=limit))


__all__ = ["list_contact_messages", "submit_contact_message"]
