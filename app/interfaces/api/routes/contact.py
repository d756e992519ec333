"""Public contact form endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.application.use_cases import list_contact_messages, submit_contact_message
from app.domain.entities import ContactMessage
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import require_admin
from app.interfaces.api.schemas import ContactMessageCreate, ContactMessageRead

router = APIRouter(prefix="/contact", tags=["contact"])


def _to_schema(message: ContactMessage) -> ContactMessageRead:
    return ContactMessageRead(
        id=message.id or 0,
        name=message.name,
        email=message.email,
        subject=message.subject,
        body=message.body,
        urgent=message.urgent,
        read=message.read,
        created_at=message.created_at,
    )


@router.post("/", response_model=ContactMessageRead, status_code=status.HTTP_201_CREATED)
def submit_message(
    payload: ContactMessageCreate,
    db: Session = Depends(get_db),
) -> ContactMessageRead:
    """Store a visitor message and alert the administrator."""

    try:
        message = submit_contact_message(db, **payload.model_dump())
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Message could not be stored",
        ) from exc
    return _to_schema(message)


@router.get("/", response_model=list[ContactMessageRead])
def list_messages(
    limit: int = Query(default=50, ge=1, le=500),
    db: Session = Depends(get_db),
    _: str = Depends(require_admin),
) -> list[ContactMessageRead]:
    return [_to_schema(message) for message in list_contact_messages(db, limit=limit)]
