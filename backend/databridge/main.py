"""Main FastAPI application for the DataBridge alert engine."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .database import init_db, close_db
from .routers import alerts_router, sync_logs_router
from .services.scheduler import scheduler_service

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("Starting DataBridge alert engine")

    await init_db()
    logger.info("Database initialized")

    if settings.alert_schedule_enabled:
        scheduler_service.start()

    yield

    scheduler_service.stop()
    await close_db()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="DataBridge Alerts",
        description="Email alerts for failed and stale DataBridge syncs",
        version="1.0.0",
        lifespan=lifespan,
    )

    # The trigger is called from the admin UI and from external schedulers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(alerts_router)
    app.include_router(sync_logs_router)

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "scheduler": scheduler_service.running,
        }

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.web_port)
