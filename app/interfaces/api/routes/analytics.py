"""Endpoints for tracking site activity and reading realtime metrics."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.application.use_cases import compute_snapshot, record_event
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import require_admin
from app.interfaces.api.schemas import (
    AnalyticsEventCreate,
    AnalyticsEventRead,
    MetricsSnapshotRead,
)

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post("/events", response_model=AnalyticsEventRead, status_code=status.HTTP_201_CREATED)
def track_event(
    payload: AnalyticsEventCreate,
    db: Session = Depends(get_db),
) -> AnalyticsEventRead:
    try:
        event = record_event(
            db, kind=payload.kind, visitor_id=payload.visitor_id, path=payload.path
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return AnalyticsEventRead(
        id=event.id or 0,
        kind=event.kind,
        visitor_id=event.visitor_id,
        path=event.path,
        created_at=event.created_at,
    )


@router.get("/snapshot", response_model=MetricsSnapshotRead)
def current_snapshot(
    db: Session = Depends(get_db),
    _: str = Depends(require_admin),
) -> MetricsSnapshotRead:
    """Return the metrics currently pushed over the notification stream."""

    return MetricsSnapshotRead(**compute_snapshot(db).as_dict())
