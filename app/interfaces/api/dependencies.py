"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import NotificationDispatcher
from app.config import get_settings
from app.infrastructure.database import get_db
from app.infrastructure.email import send_notification_alert
from app.infrastructure.notifications import notification_publisher
from app.infrastructure.openai_client import (
    ContentAssistantService,
    OpenAIConfigurationError,
)
from app.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")

_CREDENTIALS_ERROR_DETAIL = "Could not validate credentials"


def resolve_admin(token: str | None) -> str:
    """Return the administrator login encoded in ``token``."""

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_CREDENTIALS_ERROR_DETAIL,
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    subject = payload.get("sub")
    if not isinstance(subject, str) or subject != get_settings().admin_email.strip().lower():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_CREDENTIALS_ERROR_DETAIL,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return subject


def require_admin(token: str = Depends(oauth2_scheme)) -> str:
    """Ensure the request carries a valid administrator bearer token."""

    return resolve_admin(token)


def require_stream_admin(token: str | None = Query(default=None)) -> str:
    """Authenticate an ``EventSource`` connection, which cannot send headers."""

    return resolve_admin(token)


def get_dispatcher(db: Session = Depends(get_db)) -> NotificationDispatcher:
    return NotificationDispatcher(db, notification_publisher, alerts=send_notification_alert)


def get_content_assistant() -> ContentAssistantService:
    """Return a configured instance of :class:`ContentAssistantService`."""

    try:
        return ContentAssistantService()
    except OpenAIConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
