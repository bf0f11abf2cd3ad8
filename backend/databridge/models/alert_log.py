"""AlertLog model - log of sync failure alert attempts."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from ..database import Base


class AlertLog(Base):
    """Record of one alert email attempt for one recipient."""
    
    __tablename__ = "databridge_alert_logs"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    log_id = Column(String, ForeignKey("databridge_logs.id"), nullable=False, index=True)
    recipient_email = Column(String, nullable=False)
    status = Column(String, nullable=False)  # sent, failed
    alert_type = Column(String, nullable=False, default="sync_failure")
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    
    # Relationship
    sync_log = relationship("SyncLog", back_populates="alerts")
