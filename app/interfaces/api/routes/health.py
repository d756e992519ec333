from fastapi import APIRouter

from app.infrastructure.notifications import notification_manager

router = APIRouter(tags=["health"])


@router.get("/")
async def root() -> dict[str, object]:
    return {"status": "ok", "stream_subscribers": notification_manager.subscriber_count}
