"""Sync log API endpoints - ingest and overview for DataBridge syncs."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..database import async_session
from ..schemas.sync_log import SyncLogCreate, SyncLogEntry, SyncOverview, SyncStatus
from ..services.alerter import AlertOrchestrator, get_alert_orchestrator
from ..services.log_store import SyncLogStore

router = APIRouter(prefix="/api/sync-logs", tags=["sync-logs"])


def get_sync_log_store() -> SyncLogStore:
    """Dependency to get the sync log store."""
    return SyncLogStore(async_session)


@router.post("", response_model=SyncLogEntry, status_code=201)
async def record_sync(
    data: SyncLogCreate,
    store: SyncLogStore = Depends(get_sync_log_store),
):
    """Record a sync attempt between two modules."""
    return await store.add(data)


@router.get("", response_model=List[SyncLogEntry])
async def list_sync_logs(
    status: Optional[SyncStatus] = None,
    limit: int = Query(100, ge=1, le=1000),
    store: SyncLogStore = Depends(get_sync_log_store),
):
    """List recent sync attempts, newest first."""
    return await store.list_recent(status=status, limit=limit)


@router.get("/overview", response_model=SyncOverview)
async def get_sync_overview(
    store: SyncLogStore = Depends(get_sync_log_store),
    orchestrator: AlertOrchestrator = Depends(get_alert_orchestrator),
):
    """Get sync counts by status and how many entries are waiting on an alert."""
    counts = await store.status_counts()
    pending = await orchestrator.pending()
    by_status = {"success": 0, "stale": 0, "error": 0}
    by_status.update(counts)
    return SyncOverview(
        total=sum(counts.values()),
        by_status=by_status,
        pending_alerts=len(pending),
    )
