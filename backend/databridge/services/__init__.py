"""Services for selecting, formatting, dispatching and scheduling sync failure alerts."""
from .alerter import AlertOrchestrator
from .dispatcher import NotificationDispatcher
from .selector import FailureSelector
from .scheduler import SchedulerService

__all__ = ["AlertOrchestrator", "NotificationDispatcher", "FailureSelector", "SchedulerService"]
