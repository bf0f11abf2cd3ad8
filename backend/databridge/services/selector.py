"""Failure selector - picks the sync log entries that need an alert."""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from ..schemas.sync_log import SyncLogEntry
from .log_store import AlertLogStore, SyncLogStore

logger = logging.getLogger(__name__)

# A stale sync is only worth an alert once it has been stale this long
STALE_THRESHOLD = timedelta(minutes=15)

# A successfully sent alert suppresses re-alerting for this long
DEDUP_WINDOW = timedelta(hours=24)


class FailureSelector:
    """Selects failed and stale syncs that have not been alerted recently."""

    def __init__(
        self,
        sync_logs: SyncLogStore,
        alert_logs: AlertLogStore,
        stale_threshold: timedelta = STALE_THRESHOLD,
        dedup_window: timedelta = DEDUP_WINDOW,
    ):
        self.sync_logs = sync_logs
        self.alert_logs = alert_logs
        self.stale_threshold = stale_threshold
        self.dedup_window = dedup_window

    async def select(self, now: Optional[datetime] = None) -> List[SyncLogEntry]:
        """Get the entries that warrant an alert right now.

        Errors are always eligible; stale entries once they are older than the
        stale threshold. Entries with a sent alert inside the dedup window are
        skipped. Failed sends do not count, so those entries are retried on
        the next pass.

        Read failures from either store propagate: no partial selection.
        """
        now = now or datetime.utcnow()
        failures = await self.sync_logs.list_failures(now - self.stale_threshold)
        already_alerted = await self.alert_logs.alerted_log_ids(now - self.dedup_window)

        selected = [entry for entry in failures if entry.id not in already_alerted]
        logger.debug(
            f"Selected {len(selected)} of {len(failures)} failures "
            f"({len(failures) - len(selected)} already alerted)"
        )
        return selected
