"""Notification dispatcher - delivers one alert to every recipient and logs each attempt."""
import logging
from dataclasses import dataclass
from typing import List, Optional

from ..schemas.alerts import AlertRecipient
from ..schemas.sync_log import SyncLogEntry
from .email_sender import EmailConfig, EmailSenderService, email_config_from_settings
from .formatter import build_alert_subject
from .log_store import AlertLogStore

logger = logging.getLogger(__name__)


@dataclass
class DispatchOutcome:
    """Per-entry dispatch counts."""
    sent: int = 0
    failed: int = 0
    write_failures: int = 0


class NotificationDispatcher:
    """Sends the alert email to each recipient and records sent/failed per recipient."""

    def __init__(
        self,
        alert_logs: AlertLogStore,
        sender: EmailSenderService,
        email_config: Optional[EmailConfig] = None,
    ):
        self.alert_logs = alert_logs
        self.sender = sender
        self.email_config = email_config

    def _config(self) -> EmailConfig:
        return self.email_config or email_config_from_settings()

    async def _send(self, config: EmailConfig, recipient: AlertRecipient, subject: str, html: str) -> bool:
        try:
            return await self.sender.send_email(config, recipient.email, subject, html)
        except Exception as e:
            logger.error(f"Unexpected error sending alert to {recipient.email}: {type(e).__name__}: {e}")
            return False

    async def _record(self, entry: SyncLogEntry, recipient: AlertRecipient, status: str) -> bool:
        try:
            write = await self.alert_logs.record(entry.id, recipient.email, status)
        except Exception as e:
            logger.error(f"Unexpected error recording alert for {entry.id} to {recipient.email}: {e}")
            return False
        return write.ok

    async def dispatch(
        self,
        entry: SyncLogEntry,
        html: str,
        recipients: List[AlertRecipient],
    ) -> DispatchOutcome:
        """Deliver the alert for one entry.

        Each recipient is attempted independently and gets exactly one alert
        record, written after its send attempt.
        """
        if not recipients:
            raise ValueError("At least one alert recipient is required")

        config = self._config()
        subject = build_alert_subject(entry)
        outcome = DispatchOutcome()

        for recipient in recipients:
            delivered = await self._send(config, recipient, subject, html)
            status = "sent" if delivered else "failed"
            if delivered:
                outcome.sent += 1
            else:
                outcome.failed += 1

            if not await self._record(entry, recipient, status):
                outcome.write_failures += 1

        return outcome
