"""Fixtures for API tests: app wired to the in-memory database."""
import httpx
import pytest
import pytest_asyncio

from databridge.main import create_app
from databridge.routers.alerts import get_alert_log_store
from databridge.routers.sync_logs import get_sync_log_store
from databridge.services.alerter import AlertOrchestrator, get_alert_orchestrator
from databridge.services.dispatcher import NotificationDispatcher
from databridge.services.selector import FailureSelector


@pytest.fixture(name="orchestrator")
def orchestrator_fixture(sync_logs, alert_logs, sender, email_config) -> AlertOrchestrator:
    selector = FailureSelector(sync_logs, alert_logs)
    dispatcher = NotificationDispatcher(alert_logs, sender, email_config)
    return AlertOrchestrator(selector, dispatcher)


@pytest.fixture(name="app")
def app_fixture(orchestrator, sync_logs, alert_logs):
    app = create_app()
    app.dependency_overrides[get_alert_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_sync_log_store] = lambda: sync_logs
    app.dependency_overrides[get_alert_log_store] = lambda: alert_logs
    return app


@pytest_asyncio.fixture(name="client")
async def client_fixture(app):
    # ASGITransport skips the lifespan, so the real database is never touched
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
