from fastapi import FastAPI

from .analytics import router as analytics_router
from .assistant import router as assistant_router
from .auth import router as auth_router
from .contact import router as contact_router
from .health import router as health_router
from .notifications import router as notifications_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(notifications_router)
    app.include_router(contact_router)
    app.include_router(analytics_router)
    app.include_router(assistant_router)
