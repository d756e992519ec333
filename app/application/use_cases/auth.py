"""Use case for authenticating the dashboard administrator."""

from secrets import compare_digest

from sqlalchemy.orm import Session

from app.application.use_cases.notifications import notify_login_attempt
from app.config import get_settings
from app.infrastructure.security import verify_password


def authenticate_admin(
    session: Session, email: str, password: str, *, ip_address: str | None = None
) -> bool:
    """Return whether the credentials match the configured administrator.

    Every attempt, successful or not, produces a login notification.
    """

    settings = get_settings()
    success = bool(
        settings.admin_password_hash
        and compare_digest(email.strip().lower(), settings.admin_email.strip().lower())
        and verify_password(password, settings.admin_password_hash)
    )
    notify_login_attempt(
        session, success=success, username=email or "unknown", ip_address=ip_address
    )
    return success
