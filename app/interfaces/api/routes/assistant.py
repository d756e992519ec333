"""Endpoints for the OpenAI based content assistant."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import (
    notify_ai_completed,
    notify_ai_failed,
    notify_ai_quota_exceeded,
)
from app.infrastructure.database import get_db
from app.infrastructure.openai_client import (
    PROVIDER_NAME,
    ContentAssistantService,
    OpenAIQuotaExceededError,
    OpenAIServiceError,
)
from app.interfaces.api.dependencies import get_content_assistant, require_admin
from app.interfaces.api.schemas import BlogDraftRequest, BlogDraftResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assistant", tags=["assistant"])

_TASK = "blog draft"


@router.post("/blog-draft", response_model=BlogDraftResponse)
def draft_blog_post(
    payload: BlogDraftRequest,
    db: Session = Depends(get_db),
    service: ContentAssistantService = Depends(get_content_assistant),
    _: str = Depends(require_admin),
) -> BlogDraftResponse:
    """Ask the assistant for a blog post draft and report the outcome."""

    try:
        draft = service.draft_blog_fields(payload.prompt, image_url=payload.image_url)
    except OpenAIQuotaExceededError as exc:
        notify_ai_quota_exceeded(db, provider=PROVIDER_NAME)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(exc)
        ) from exc
    except OpenAIServiceError as exc:
        logger.warning("Blog draft generation failed: %s", exc)
        notify_ai_failed(db, task=_TASK, error=exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    notify_ai_completed(db, task=_TASK, subject=draft["title"])
    return BlogDraftResponse(**draft)
