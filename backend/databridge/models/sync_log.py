"""SyncLog model - one recorded DataBridge synchronization attempt."""
import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from ..database import Base


class SyncLog(Base):
    """A sync attempt between two modules, written by the sync subsystem."""
    
    __tablename__ = "databridge_logs"
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    module_name = Column(String, nullable=False)
    status = Column(String, nullable=False)  # success, stale, error
    last_synced_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    error_message = Column(String, nullable=True)  # Set when status = error
    retry_count = Column(Integer, nullable=False, default=0)
    origin_module = Column(String, nullable=True)
    target_module = Column(String, nullable=True)
    sync_duration_ms = Column(Integer, nullable=True)
    records_processed = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    
    # Relationships
    alerts = relationship("AlertLog", back_populates="sync_log")
