import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.application.use_cases import MetricsCollector, MetricsMonitor
from app.config import get_settings
from app.infrastructure.database import SessionLocal, engine, initialize_database
from app.infrastructure.notifications import MetricsBroadcaster, notification_manager
from app.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and run the metrics feed while the application is up."""

    settings = get_settings()
    initialize_database()
    collector = MetricsCollector(
        SessionLocal,
        MetricsMonitor.from_settings(),
        window_seconds=settings.metrics_window_seconds,
    )
    broadcaster = MetricsBroadcaster(
        notification_manager,
        collector,
        interval_seconds=settings.stream_metrics_interval_seconds,
    )
    broadcaster.start()
    app.state.metrics_broadcaster = broadcaster
    try:
        yield
    finally:
        await broadcaster.stop()
        notification_manager.close_all()
        engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title="Portfolio Notifications API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
