"""Persistence helpers for contact form messages."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import ContactMessage
from app.infrastructure.models import ContactMessageModel
from app.utils import ensure_app_naive_datetime, ensure_app_timezone, now_in_app_timezone


class ContactMessageRepository:
    """Provide storage operations for :class:`ContactMessage` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, message: ContactMessage) -> ContactMessage:
        model = ContactMessageModel(
            name=message.name,
            email=message.email,
            subject=message.subject,
            body=message.body,
            urgent=message.urgent,
            read=False,
            created_at=ensure_app_naive_datetime(
                message.created_at or now_in_app_timezone()
            ),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list(self, *, limit: int | None = 50) -> Sequence[ContactMessage]:
        query = self.session.query(ContactMessageModel).order_by(
            ContactMessageModel.created_at.desc(), ContactMessageModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: ContactMessageModel) -> ContactMessage:
        return ContactMessage(
            id=model.id,
            name=model.name,
            email=model.email,
            subject=model.subject,
            body=model.body,
            urgent=bool(model.urgent),
            read=bool(model.read),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["ContactMessageRepository"]
