"""Endpoints and event stream for dashboard notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import NotificationDispatcher, build_payload
from app.config import get_settings
from app.domain.entities import NotificationCategory
from app.domain.exceptions import (
    NotificationNotFoundError,
    NotificationPersistenceError,
    NotificationValidationError,
)
from app.infrastructure.database import get_db
from app.infrastructure.notifications import notification_manager, stream_events
from app.infrastructure.repositories import NotificationRepository
from app.interfaces.api.dependencies import (
    get_dispatcher,
    require_admin,
    require_stream_admin,
)
from app.interfaces.api.schemas import (
    BulkDeletedRead,
    BulkModifiedRead,
    NotificationCreate,
    NotificationRead,
    UnreadCountRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])

T = TypeVar("T")

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def _run_store_operation(db: Session, operation: Callable[[], T]) -> T:
    """Execute ``operation`` translating store failures into HTTP 503."""

    try:
        return operation()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Notification store operation failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification store unavailable",
        ) from exc


def _not_found(exc: NotificationNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    limit: int = Query(default=50, ge=1, le=500),
    category: NotificationCategory | None = Query(default=None),
    unread_only: bool = Query(default=False),
    db: Session = Depends(get_db),
    _: str = Depends(require_admin),
) -> list[NotificationRead]:
    """Return the most recent notifications, newest first."""

    repository = NotificationRepository(db)
    notifications = _run_store_operation(
        db,
        lambda: repository.list(limit=limit, category=category, unread_only=unread_only),
    )
    return [NotificationRead.from_entity(notification) for notification in notifications]


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    _: str = Depends(require_admin),
) -> NotificationRead:
    try:
        notification = dispatcher.dispatch(build_payload(**payload.model_dump()))
    except NotificationValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except NotificationPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return NotificationRead.from_entity(notification)


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    db: Session = Depends(get_db),
    _: str = Depends(require_admin),
) -> UnreadCountRead:
    repository = NotificationRepository(db)
    return UnreadCountRead(unread=_run_store_operation(db, repository.count_unread))


@router.put("/read-all", response_model=BulkModifiedRead)
def mark_all_notifications_as_read(
    db: Session = Depends(get_db),
    _: str = Depends(require_admin),
) -> BulkModifiedRead:
    """Mark every unread notification as read in a single statement."""

    repository = NotificationRepository(db)
    return BulkModifiedRead(modified=_run_store_operation(db, repository.mark_all_as_read))


@router.delete("/", response_model=BulkDeletedRead)
def clear_notifications(
    db: Session = Depends(get_db),
    _: str = Depends(require_admin),
) -> BulkDeletedRead:
    repository = NotificationRepository(db)
    return BulkDeletedRead(deleted=_run_store_operation(db, repository.delete_all))


@router.get("/stream")
async def stream_notifications(
    request: Request,
    _: str = Depends(require_stream_admin),
) -> StreamingResponse:
    """Server-Sent Events feed of new notifications and metric snapshots."""

    return StreamingResponse(
        stream_events(
            notification_manager,
            is_disconnected=request.is_disconnected,
            keepalive_seconds=get_settings().stream_keepalive_seconds,
        ),
        media_type="text/event-stream",
        headers=STREAM_HEADERS,
    )


@router.get("/{notification_id}", response_model=NotificationRead)
def get_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    _: str = Depends(require_admin),
) -> NotificationRead:
    repository = NotificationRepository(db)
    notification = _run_store_operation(db, lambda: repository.get(notification_id))
    if notification is None:
        raise _not_found(NotificationNotFoundError(notification_id))
    return NotificationRead.from_entity(notification)


@router.api_route(
    "/{notification_id}/read",
    methods=["PUT", "PATCH"],
    response_model=NotificationRead,
)
def mark_notification_as_read(
    notification_id: str,
    db: Session = Depends(get_db),
    _: str = Depends(require_admin),
) -> NotificationRead:
    """Set ``read`` on one notification; repeated calls leave it read."""

    repository = NotificationRepository(db)
    notification = _run_store_operation(db, lambda: repository.mark_as_read(notification_id))
    if notification is None:
        raise _not_found(NotificationNotFoundError(notification_id))
    return NotificationRead.from_entity(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    _: str = Depends(require_admin),
) -> Response:
    repository = NotificationRepository(db)
    if not _run_store_operation(db, lambda: repository.delete(notification_id)):
        raise _not_found(NotificationNotFoundError(notification_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
