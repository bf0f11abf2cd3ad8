"""Sync failure alert API endpoints."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response
from fastapi.responses import JSONResponse

from ..database import async_session
from ..schemas.alerts import AlertLogResponse, AlertRunRequest, AlertRunResponse
from ..schemas.sync_log import SyncLogEntry
from ..services.alerter import AlertOrchestrator, get_alert_orchestrator
from ..services.log_store import AlertLogStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/alerts", tags=["alerts"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def get_alert_log_store() -> AlertLogStore:
    """Dependency to get the alert log store."""
    return AlertLogStore(async_session)


@router.options("/sync-failures")
async def sync_failures_preflight():
    """CORS preflight for the trigger endpoint."""
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post("/sync-failures", response_model=AlertRunResponse)
async def trigger_sync_failure_alerts(
    request: Optional[AlertRunRequest] = Body(default=None),
    orchestrator: AlertOrchestrator = Depends(get_alert_orchestrator),
):
    """Run one alert pass over failed and stale syncs."""
    recipients = request.recipients if request else None
    try:
        results = await orchestrator.run_alert_pass(recipients)
    except Exception as e:
        logger.error(f"Alert pass failed: {type(e).__name__}: {e}")
        body = AlertRunResponse(success=False, error=str(e))
        return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True), headers=CORS_HEADERS)

    if results.processed == 0:
        message = "No sync failures require alerting"
    else:
        message = f"Processed {results.processed} sync failure(s)"
    body = AlertRunResponse(success=True, message=message, results=results)
    return JSONResponse(status_code=200, content=body.model_dump(exclude_none=True), headers=CORS_HEADERS)


@router.get("/pending", response_model=List[SyncLogEntry])
async def list_pending_alerts(orchestrator: AlertOrchestrator = Depends(get_alert_orchestrator)):
    """List the entries the next alert pass would pick up. Sends nothing."""
    return await orchestrator.pending()


@router.get("/history", response_model=List[AlertLogResponse])
async def list_alert_history(
    limit: int = Query(100, ge=1, le=1000),
    store: AlertLogStore = Depends(get_alert_log_store),
):
    """List recent alert attempts, newest first."""
    alerts = await store.list_recent(limit)
    return [AlertLogResponse.model_validate(a) for a in alerts]
