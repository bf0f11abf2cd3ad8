"""Alerter service - runs DataBridge sync failure alert passes.

One pass selects the failed/stale syncs that have not been alerted in the
last 24 hours, renders one email per failure and sends it to every
recipient. Entries are processed sequentially; one entry failing does not
stop the rest.

Two passes that overlap (e.g. two schedulers firing at once) can both
select the same entry before either records a sent alert, and so alert it
twice. There is no cross-process lock.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..config import get_alert_recipients
from ..database import async_session
from ..schemas.alerts import AlertRecipient, AlertRunResults
from ..schemas.sync_log import SyncLogEntry
from .dispatcher import NotificationDispatcher
from .email_sender import email_sender_service
from .formatter import render_alert_html
from .log_store import AlertLogStore, SyncLogStore
from .selector import FailureSelector

logger = logging.getLogger(__name__)


class AlertOrchestrator:
    """Ties selection, formatting and dispatch into one alert pass."""

    def __init__(self, selector: FailureSelector, dispatcher: NotificationDispatcher):
        self.selector = selector
        self.dispatcher = dispatcher

    async def pending(self, now: Optional[datetime] = None) -> List[SyncLogEntry]:
        """Get the entries the next pass would alert on, without sending anything."""
        return await self.selector.select(now)

    async def run_alert_pass(
        self,
        recipients: Optional[List[AlertRecipient]] = None,
        now: Optional[datetime] = None,
    ) -> AlertRunResults:
        """Run one complete alert pass.

        Raises only if selection fails; per-entry errors are counted.
        """
        failures = await self.selector.select(now)
        if not failures:
            logger.info("No sync failures to alert on")
            return AlertRunResults(processed=0, alerted=0, errors=0)

        recipients = recipients or get_alert_recipients()
        logger.info(f"Alerting on {len(failures)} sync failure(s) to {len(recipients)} recipient(s)")

        results = AlertRunResults(processed=len(failures))
        for entry in failures:
            try:
                html = render_alert_html(entry)
                outcome = await self.dispatcher.dispatch(entry, html, recipients)
            except Exception as e:
                results.errors += 1
                logger.error(f"Error alerting on sync log {entry.id} ({entry.module_name}): {e}")
                continue

            results.alerted += 1
            if outcome.failed:
                logger.warning(
                    f"Sync log {entry.id}: {outcome.failed}/{len(recipients)} alert email(s) failed, "
                    f"will retry on next pass"
                )
            if outcome.write_failures:
                # Alert logging is best-effort; a lost "sent" row may cause a duplicate next pass
                logger.warning(f"Sync log {entry.id}: {outcome.write_failures} alert record(s) not saved")

        logger.info(
            f"Alert pass complete: processed={results.processed} "
            f"alerted={results.alerted} errors={results.errors}"
        )
        return results


def build_alert_orchestrator(
    session_factory: async_sessionmaker[AsyncSession] = async_session,
) -> AlertOrchestrator:
    """Wire an orchestrator against the given session factory."""
    alert_logs = AlertLogStore(session_factory)
    selector = FailureSelector(SyncLogStore(session_factory), alert_logs)
    dispatcher = NotificationDispatcher(alert_logs, email_sender_service)
    return AlertOrchestrator(selector, dispatcher)


# Global instance
alert_orchestrator = build_alert_orchestrator()


def get_alert_orchestrator() -> AlertOrchestrator:
    """Dependency to get the alert orchestrator."""
    return alert_orchestrator
