"""Endpoints related to administrator authentication."""

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.application.use_cases import authenticate_admin
from app.config import get_settings
from app.infrastructure.database import get_db
from app.infrastructure.security import create_access_token
from app.interfaces.api.schemas import Token

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/token", response_model=Token)
def login_for_access_token(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
) -> Token:
    """Authenticate the administrator and return a JWT access token."""

    ip_address = request.client.host if request.client else None
    if not authenticate_admin(db, form_data.username, form_data.password, ip_address=ip_address):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    settings = get_settings()
    expires = timedelta(minutes=settings.access_token_expire_minutes)
    access_token = create_access_token(
        data={"sub": settings.admin_email.strip().lower()},
        expires_delta=expires,
    )
    return Token(
        access_token=access_token,
        token_type="bearer",
        expires_in=int(expires.total_seconds()),
    )
