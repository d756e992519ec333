"""Tests for persisting and fanning out notifications."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.application.use_cases.notifications import NotificationDispatcher, factory
from app.domain.entities import NotificationImportance
from app.domain.exceptions import NotificationPersistenceError
from app.infrastructure.repositories import NotificationRepository
from app.utils import now_in_app_timezone

BLOG = {"title": "Hello World", "slug": "hello-world", "_id": "b1"}


def test_dispatch_persists_unread_record_with_generated_id(db_session) -> None:
    publisher = MagicMock()
    payload = factory.blog_created(BLOG)

    saved = NotificationDispatcher(db_session, publisher).dispatch(payload)

    records = NotificationRepository(db_session).list()
    assert len(records) == 1
    stored = records[0]
    assert stored.id == saved.id
    assert stored.id
    assert stored.read is False
    assert stored.created_at <= now_in_app_timezone()
    assert stored.message == payload.message
    assert stored.category is payload.category
    assert stored.type is payload.type
    assert stored.link == payload.link
    assert stored.metadata == {"blogId": "b1"}
    publisher.dispatch.assert_called_once_with(saved)


def test_dispatch_raises_and_skips_fan_out_when_store_fails(db_session, monkeypatch) -> None:
    publisher = MagicMock()

    def _fail(self, notification):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr(NotificationRepository, "create", _fail)

    with pytest.raises(NotificationPersistenceError):
        NotificationDispatcher(db_session, publisher).dispatch(factory.blog_created(BLOG))

    publisher.dispatch.assert_not_called()


def test_dispatch_safely_returns_none_on_store_failure(db_session, monkeypatch) -> None:
    def _fail(self, notification):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(NotificationRepository, "create", _fail)

    result = NotificationDispatcher(db_session, MagicMock()).dispatch_safely(
        factory.system_update("Deploy finished")
    )

    assert result is None


def test_fan_out_failure_does_not_affect_stored_record(db_session) -> None:
    publisher = MagicMock()
    publisher.dispatch.side_effect = RuntimeError("subscriber gone")

    saved = NotificationDispatcher(db_session, publisher).dispatch(
        factory.system_update("Deploy finished")
    )

    assert NotificationRepository(db_session).get(saved.id) is not None


def test_alerts_only_sent_for_high_importance(db_session) -> None:
    alerts = MagicMock(return_value=True)
    dispatcher = NotificationDispatcher(db_session, MagicMock(), alerts=alerts)

    dispatcher.dispatch(factory.blog_created(BLOG))
    urgent = dispatcher.dispatch(factory.security_alert("Token reuse detected"))

    assert urgent.importance is NotificationImportance.HIGH
    alerts.assert_called_once_with(urgent)


def test_alert_failure_is_swallowed(db_session) -> None:
    alerts = MagicMock(side_effect=RuntimeError("smtp down"))
    dispatcher = NotificationDispatcher(db_session, MagicMock(), alerts=alerts)

    saved = dispatcher.dispatch(factory.security_alert("Token reuse detected"))

    assert saved.id is not None
