"""Pydantic schemas for API request/response models."""
from .alerts import (
    AlertRecipient,
    AlertRunRequest,
    AlertRunResults,
    AlertRunResponse,
    AlertLogResponse,
)
from .sync_log import (
    SyncLogEntry,
    SyncLogCreate,
    SyncOverview,
)

__all__ = [
    "AlertRecipient",
    "AlertRunRequest",
    "AlertRunResults",
    "AlertRunResponse",
    "AlertLogResponse",
    "SyncLogEntry",
    "SyncLogCreate",
    "SyncOverview",
]
