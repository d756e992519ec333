"""Tests for the authentication token endpoint."""

from __future__ import annotations

from datetime import datetime, timezone

from jose import jwt

from app.config import get_settings
from app.domain.entities import NotificationCategory
from app.infrastructure.repositories import NotificationRepository
from app.infrastructure.security import ALGORITHM

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "Secret123!"


def _auth_notifications(db_session):
    return NotificationRepository(db_session).list(category=NotificationCategory.AUTH)


def test_login_returns_bearer_token(client, db_session) -> None:
    response = client.post(
        "/auth/token", data={"username": ADMIN_EMAIL.upper(), "password": ADMIN_PASSWORD}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == get_settings().access_token_expire_minutes * 60

    claims = jwt.decode(body["access_token"], "test-secret", algorithms=[ALGORITHM])
    assert claims["sub"] == ADMIN_EMAIL
    assert datetime.fromtimestamp(claims["exp"], tz=timezone.utc) > datetime.now(timezone.utc)

    notifications = _auth_notifications(db_session)
    assert len(notifications) == 1
    assert notifications[0].message.startswith(f"Successful login attempt for {ADMIN_EMAIL.upper()}")
    assert notifications[0].importance.value == "low"


def test_wrong_password_is_rejected_and_reported(client, db_session) -> None:
    response = client.post(
        "/auth/token", data={"username": ADMIN_EMAIL, "password": "not-the-password"}
    )

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"

    notifications = _auth_notifications(db_session)
    assert len(notifications) == 1
    assert notifications[0].message == f"Failed login attempt for {ADMIN_EMAIL} from testclient"
    assert notifications[0].type.value == "warning"
    assert notifications[0].importance.value == "high"


def test_unknown_user_is_rejected(client) -> None:
    response = client.post(
        "/auth/token", data={"username": "intruder@example.com", "password": ADMIN_PASSWORD}
    )

    assert response.status_code == 401


def test_token_for_other_subject_is_refused(client) -> None:
    from app.infrastructure.security import create_access_token

    token = create_access_token({"sub": "someone@example.com"})

    response = client.get("/notifications/", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_blank_username_is_rejected_without_notification(client, db_session) -> None:
    response = client.post("/auth/token", data={"username": "   ", "password": "x"})

    assert response.status_code == 401
    assert _auth_notifications(db_session) == []
