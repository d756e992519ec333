"""Tests for the public contact form endpoints."""

from __future__ import annotations

from sqlalchemy.exc import OperationalError

from app.domain.entities import NotificationCategory
from app.infrastructure.repositories import ContactMessageRepository, NotificationRepository

MESSAGE = {
    "name": "Ada Lovelace",
    "email": "ada@example.com",
    "subject": "Project inquiry",
    "body": "Could we talk about a new analytics dashboard?",
}


def _message_notifications(db_session):
    return NotificationRepository(db_session).list(category=NotificationCategory.MESSAGE)


def test_submit_message_stores_it_and_notifies(client, db_session) -> None:
    response = client.post("/contact/", json=MESSAGE)

    assert response.status_code == 201
    body = response.json()
    assert body["id"] > 0
    assert body["read"] is False

    notifications = _message_notifications(db_session)
    assert len(notifications) == 1
    assert notifications[0].message == "New message from Ada Lovelace"
    assert notifications[0].importance.value == "high"


def test_urgent_message_uses_urgent_notification(client, db_session) -> None:
    response = client.post("/contact/", json={**MESSAGE, "urgent": True})

    assert response.status_code == 201
    notifications = _message_notifications(db_session)
    assert notifications[0].message == "Urgent message from Ada Lovelace: Project inquiry"
    assert notifications[0].type.value == "warning"


def test_message_is_kept_when_notification_store_fails(client, db_session, monkeypatch) -> None:
    def _fail(self, notification):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr(NotificationRepository, "create", _fail)

    response = client.post("/contact/", json=MESSAGE)

    assert response.status_code == 201
    monkeypatch.undo()
    assert len(ContactMessageRepository(db_session).list()) == 1
    assert _message_notifications(db_session) == []


def test_invalid_email_is_rejected(client) -> None:
    response = client.post("/contact/", json={**MESSAGE, "email": "not-an-email"})

    assert response.status_code == 422


def test_listing_messages_requires_admin(client, auth_headers) -> None:
    client.post("/contact/", json=MESSAGE)

    assert client.get("/contact/").status_code == 401
    listed = client.get("/contact/", headers=auth_headers)
    assert listed.status_code == 200
    assert [item["email"] for item in listed.json()] == ["ada@example.com"]


def test_blank_name_still_stores_message(client, db_session) -> None:
    response = client.post("/contact/", json={**MESSAGE, "name": "   "})

    assert response.status_code == 201
    assert response.json()["name"] == ""
    assert len(ContactMessageRepository(db_session).list()) == 1
    assert _message_notifications(db_session) == []
