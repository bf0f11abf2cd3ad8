"""Store adapters for the DataBridge sync log and alert log tables.

Each call opens its own short-lived session from the injected session
factory, so a failed alert write never poisons the session used for reads.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Set

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..models import AlertLog, SyncLog
from ..schemas.sync_log import SyncLogCreate, SyncLogEntry
from ..utils.db_utils import retry_on_lock

logger = logging.getLogger(__name__)

ALERT_TYPE_SYNC_FAILURE = "sync_failure"


@dataclass
class AlertWriteResult:
    """Outcome of appending an alert record. Write errors are reported, not raised."""
    ok: bool
    error: Optional[str] = None


class SyncLogStore:
    """Read access to databridge_logs, plus ingest for the sync subsystem."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def list_failures(self, stale_cutoff: datetime) -> List[SyncLogEntry]:
        """Get every errored entry and every stale entry last synced at or before the cutoff."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(SyncLog).where(
                    or_(
                        SyncLog.status == "error",
                        and_(
                            SyncLog.status == "stale",
                            SyncLog.last_synced_at <= stale_cutoff,
                        ),
                    )
                )
            )
            return [SyncLogEntry.model_validate(row) for row in result.scalars().all()]

    async def list_recent(self, status: Optional[str] = None, limit: int = 100) -> List[SyncLogEntry]:
        """Get the newest entries, optionally filtered by status."""
        query = select(SyncLog).order_by(SyncLog.created_at.desc()).limit(limit)
        if status:
            query = query.where(SyncLog.status == status)
        async with self._session_factory() as session:
            result = await session.execute(query)
            return [SyncLogEntry.model_validate(row) for row in result.scalars().all()]

    async def status_counts(self) -> Dict[str, int]:
        """Count entries per status."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(SyncLog.status, func.count(SyncLog.id)).group_by(SyncLog.status)
            )
            return {status: count for status, count in result.all()}

    async def _insert(self, values: dict) -> SyncLogEntry:
        async with self._session_factory() as session:
            row = SyncLog(**values)
            session.add(row)
            await session.commit()
            await session.refresh(row)
            return SyncLogEntry.model_validate(row)

    async def add(self, data: SyncLogCreate) -> SyncLogEntry:
        """Record a sync attempt."""
        values = data.model_dump(exclude_none=True)
        # Fresh session per attempt: a failed flush leaves the old one unusable
        return await retry_on_lock(lambda: self._insert(values))


class AlertLogStore:
    """Append-only access to databridge_alert_logs."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def alerted_log_ids(self, since: datetime) -> Set[str]:
        """Get log ids with a successfully sent alert created at or after `since`."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(AlertLog.log_id).where(
                    and_(
                        AlertLog.status == "sent",
                        AlertLog.created_at >= since,
                    )
                )
            )
            return set(result.scalars().all())

    async def record(self, log_id: str, recipient_email: str, status: str) -> AlertWriteResult:
        """Append one alert attempt.

        Alert bookkeeping is best-effort: a database error here is logged and
        returned as a failed result so the caller can keep dispatching.
        """
        try:
            await retry_on_lock(lambda: self._insert(log_id, recipient_email, status))
        except Exception as e:
            logger.error(f"Failed to record {status} alert for log {log_id} to {recipient_email}: {e}")
            return AlertWriteResult(ok=False, error=str(e))
        return AlertWriteResult(ok=True)

    async def _insert(self, log_id: str, recipient_email: str, status: str):
        async with self._session_factory() as session:
            session.add(AlertLog(
                log_id=log_id,
                recipient_email=recipient_email,
                status=status,
                alert_type=ALERT_TYPE_SYNC_FAILURE,
            ))
            await session.commit()

    async def list_recent(self, limit: int = 100) -> List[AlertLog]:
        """Get the newest alert records."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(AlertLog).order_by(AlertLog.created_at.desc(), AlertLog.id.desc()).limit(limit)
            )
            return list(result.scalars().all())
