"""Alert pass schemas - recipients, run summary and trigger response."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class AlertRecipient(BaseModel):
    """Where a sync failure alert is delivered."""
    email: str
    name: Optional[str] = None


class AlertRunRequest(BaseModel):
    """Optional body for the trigger endpoint."""
    recipients: Optional[List[AlertRecipient]] = Field(default=None, min_length=1)


class AlertRunResults(BaseModel):
    """Aggregate counts for one alert pass."""
    processed: int = 0
    alerted: int = 0
    errors: int = 0


class AlertRunResponse(BaseModel):
    """Trigger endpoint response body."""
    success: bool
    message: Optional[str] = None
    results: Optional[AlertRunResults] = None
    error: Optional[str] = None


class AlertLogResponse(BaseModel):
    """An alert attempt as stored in the alert log."""
    id: int
    log_id: str
    recipient_email: str
    status: str  # sent, failed
    alert_type: str
    created_at: datetime

    class Config:
        from_attributes = True
