"""Sync log schemas."""
from datetime import datetime, timezone
from typing import Dict, Literal, Optional
from pydantic import BaseModel, Field, field_validator

SyncStatus = Literal["success", "stale", "error"]


class SyncLogEntry(BaseModel):
    """Immutable snapshot of a databridge_logs row."""
    id: str
    module_name: str
    status: SyncStatus
    last_synced_at: datetime
    error_message: Optional[str] = None
    retry_count: int = 0
    origin_module: Optional[str] = None
    target_module: Optional[str] = None
    sync_duration_ms: Optional[int] = None
    records_processed: int = 0
    created_at: datetime

    class Config:
        from_attributes = True
        frozen = True


class SyncLogCreate(BaseModel):
    """Schema for recording a sync attempt."""
    module_name: str = Field(..., min_length=1)
    status: SyncStatus
    last_synced_at: Optional[datetime] = None  # Defaults to now
    error_message: Optional[str] = None
    retry_count: int = Field(default=0, ge=0)
    origin_module: Optional[str] = None
    target_module: Optional[str] = None
    sync_duration_ms: Optional[int] = Field(default=None, ge=0)
    records_processed: int = Field(default=0, ge=0)

    @field_validator("last_synced_at")
    @classmethod
    def to_naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        """Columns hold naive UTC; convert offset-aware input."""
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class SyncOverview(BaseModel):
    """Counts of sync log entries by status."""
    total: int
    by_status: Dict[str, int]
    pending_alerts: int  # Entries the next alert pass would pick up
