"""Shared fixtures: a throwaway SQLite database and an authenticated client."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest
from passlib.hash import pbkdf2_sha256

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "portfolio_notifications_test.db"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "Secret123!"

os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ADMIN_EMAIL"] = ADMIN_EMAIL
os.environ["ADMIN_PASSWORD_HASH"] = pbkdf2_sha256.hash(ADMIN_PASSWORD)
os.environ["APP_TIMEZONE"] = "UTC"
os.environ["STREAM_METRICS_INTERVAL_SECONDS"] = "3600"
for _name in (
    "OPENAI_API_KEY",
    "SENDGRID_API_KEY",
    "SENDGRID_SENDER",
    "NOTIFICATION_EMAIL_RECIPIENT",
):
    os.environ.pop(_name, None)

from app.config import get_settings  # noqa: E402

get_settings.cache_clear()

from app.infrastructure.database import Base, SessionLocal, engine, initialize_database  # noqa: E402
from app.infrastructure.notifications import notification_manager  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure every test starts from empty tables."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    notification_manager.close_all()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient

    from main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers(client) -> dict[str, str]:
    response = client.post(
        "/auth/token", data={"username": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
