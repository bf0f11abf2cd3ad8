"""API routers."""
from .alerts import router as alerts_router
from .sync_logs import router as sync_logs_router

__all__ = ["alerts_router", "sync_logs_router"]
