"""Database models."""
from .sync_log import SyncLog
from .alert_log import AlertLog

__all__ = ["SyncLog", "AlertLog"]
