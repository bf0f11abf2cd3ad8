"""Shared test fixtures."""
import uuid
from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from databridge.database import Base
from databridge.models import AlertLog, SyncLog
from databridge.schemas.alerts import AlertRecipient
from databridge.schemas.sync_log import SyncLogEntry
from databridge.services.email_sender import EmailConfig
from databridge.services.log_store import AlertLogStore, SyncLogStore

# Fixed "now" for selection tests
NOW = datetime(2025, 1, 15, 12, 0, 0)


def make_entry(**overrides) -> SyncLogEntry:
    """Build a SyncLogEntry snapshot without touching the database."""
    values = {
        "id": str(uuid.uuid4()),
        "module_name": "payroll-sync",
        "status": "error",
        "last_synced_at": NOW - timedelta(minutes=30),
        "retry_count": 0,
        "records_processed": 0,
        "created_at": NOW - timedelta(minutes=30),
    }
    values.update(overrides)
    return SyncLogEntry(**values)


@pytest_asyncio.fixture(name="engine")
async def engine_fixture():
    """In-memory SQLite engine. Tables recreated fresh for each test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture(name="session_factory")
def session_factory_fixture(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(name="sync_logs")
def sync_logs_fixture(session_factory) -> SyncLogStore:
    return SyncLogStore(session_factory)


@pytest.fixture(name="alert_logs")
def alert_logs_fixture(session_factory) -> AlertLogStore:
    return AlertLogStore(session_factory)


@pytest.fixture(name="add_sync_log")
def add_sync_log_fixture(session_factory):
    """Insert a SyncLog row; returns its id."""
    async def _add(**overrides) -> str:
        values = {
            "module_name": "payroll-sync",
            "status": "error",
            "last_synced_at": NOW - timedelta(minutes=30),
            "created_at": NOW - timedelta(minutes=30),
        }
        values.update(overrides)
        async with session_factory() as session:
            row = SyncLog(**values)
            session.add(row)
            await session.commit()
            return row.id
    return _add


@pytest.fixture(name="add_alert_log")
def add_alert_log_fixture(session_factory):
    """Insert an AlertLog row for a sync log id."""
    async def _add(log_id: str, status: str = "sent", created_at: datetime = NOW, email: str = "ops@example.com"):
        async with session_factory() as session:
            session.add(AlertLog(
                log_id=log_id,
                recipient_email=email,
                status=status,
                alert_type="sync_failure",
                created_at=created_at,
            ))
            await session.commit()
    return _add


@pytest.fixture(name="email_config")
def email_config_fixture() -> EmailConfig:
    return EmailConfig(
        api_url="https://mail.test/emails",
        api_key="test-key",
        from_address="DataBridge Alerts <noreply@example.com>",
        reply_to="support@example.com",
        timeout=5.0,
    )


@pytest.fixture(name="recipients")
def recipients_fixture():
    return [
        AlertRecipient(email="admin@example.com", name="Admin"),
        AlertRecipient(email="ops@example.com"),
    ]


@pytest.fixture(name="sender")
def sender_fixture():
    """An email sender whose sends all succeed."""
    sender = AsyncMock()
    sender.send_email = AsyncMock(return_value=True)
    return sender
