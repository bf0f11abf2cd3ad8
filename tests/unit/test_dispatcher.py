"""Tests for NotificationDispatcher per-recipient delivery and logging."""
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select

from databridge.models import AlertLog
from databridge.schemas.alerts import AlertRecipient
from databridge.services.dispatcher import NotificationDispatcher
from databridge.services.log_store import AlertWriteResult
from tests.conftest import make_entry


async def _alert_rows(session_factory):
    async with session_factory() as session:
        result = await session.execute(select(AlertLog).order_by(AlertLog.id))
        return list(result.scalars().all())


@pytest.fixture
def entry():
    return make_entry(id="log-1", origin_module="Payroll", target_module="VaultPay")


class TestDispatch:
    @pytest.mark.asyncio
    async def test_all_recipients_sent(self, alert_logs, sender, email_config, recipients, entry, session_factory):
        dispatcher = NotificationDispatcher(alert_logs, sender, email_config)
        outcome = await dispatcher.dispatch(entry, "<p>alert</p>", recipients)

        assert outcome.sent == 2
        assert outcome.failed == 0
        rows = await _alert_rows(session_factory)
        assert [(r.log_id, r.recipient_email, r.status, r.alert_type) for r in rows] == [
            ("log-1", "admin@example.com", "sent", "sync_failure"),
            ("log-1", "ops@example.com", "sent", "sync_failure"),
        ]

    @pytest.mark.asyncio
    async def test_send_uses_subject_and_html(self, alert_logs, sender, email_config, recipients, entry):
        dispatcher = NotificationDispatcher(alert_logs, sender, email_config)
        await dispatcher.dispatch(entry, "<p>alert</p>", recipients[:1])

        sender.send_email.assert_awaited_once_with(
            email_config,
            "admin@example.com",
            "[Alert] Sync Failed: Payroll → VaultPay",
            "<p>alert</p>",
        )

    @pytest.mark.asyncio
    async def test_second_recipient_raises(self, alert_logs, email_config, recipients, entry, session_factory):
        sender = AsyncMock()
        sender.send_email = AsyncMock(side_effect=[True, RuntimeError("provider down")])
        dispatcher = NotificationDispatcher(alert_logs, sender, email_config)

        outcome = await dispatcher.dispatch(entry, "<p>alert</p>", recipients)

        assert outcome.sent == 1
        assert outcome.failed == 1
        rows = await _alert_rows(session_factory)
        assert [(r.recipient_email, r.status) for r in rows] == [
            ("admin@example.com", "sent"),
            ("ops@example.com", "failed"),
        ]

    @pytest.mark.asyncio
    async def test_every_recipient_attempted_when_one_fails(self, alert_logs, email_config, entry, session_factory):
        recipients = [AlertRecipient(email=f"user{i}@example.com") for i in range(5)]
        sender = AsyncMock()
        sender.send_email = AsyncMock(side_effect=[True, False, TimeoutError("slow"), True, True])
        dispatcher = NotificationDispatcher(alert_logs, sender, email_config)

        outcome = await dispatcher.dispatch(entry, "<p/>", recipients)

        assert sender.send_email.await_count == 5
        assert (outcome.sent, outcome.failed) == (3, 2)
        rows = await _alert_rows(session_factory)
        assert len(rows) == 5
        assert [r.status for r in rows] == ["sent", "failed", "failed", "sent", "sent"]

    @pytest.mark.asyncio
    async def test_record_written_after_send(self, email_config, recipients, entry):
        calls = []
        sender = AsyncMock()

        async def send(*args):
            calls.append("send")
            return True

        async def record(*args):
            calls.append("record")
            return AlertWriteResult(ok=True)

        sender.send_email = send
        alert_logs = AsyncMock()
        alert_logs.record = record
        dispatcher = NotificationDispatcher(alert_logs, sender, email_config)

        await dispatcher.dispatch(entry, "<p/>", recipients)

        assert calls == ["send", "record", "send", "record"]

    @pytest.mark.asyncio
    async def test_write_failure_does_not_abort(self, sender, email_config, recipients, entry):
        alert_logs = AsyncMock()
        alert_logs.record = AsyncMock(side_effect=[
            AlertWriteResult(ok=False, error="database is locked"),
            AlertWriteResult(ok=True),
        ])
        dispatcher = NotificationDispatcher(alert_logs, sender, email_config)

        outcome = await dispatcher.dispatch(entry, "<p/>", recipients)

        assert outcome.sent == 2
        assert outcome.write_failures == 1
        assert alert_logs.record.await_count == 2

    @pytest.mark.asyncio
    async def test_empty_recipients_rejected(self, alert_logs, sender, email_config, entry):
        dispatcher = NotificationDispatcher(alert_logs, sender, email_config)
        with pytest.raises(ValueError):
            await dispatcher.dispatch(entry, "<p/>", [])
        sender.send_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_record_exception_does_not_skip_recipients(sender, email_config, recipients):
    alert_logs = AsyncMock()
    alert_logs.record = AsyncMock(side_effect=[RuntimeError("rollback failed"), AlertWriteResult(ok=True)])
    dispatcher = NotificationDispatcher(alert_logs, sender, email_config)

    outcome = await dispatcher.dispatch(make_entry(), "<p/>", recipients)

    assert sender.send_email.await_count == 2
    assert alert_logs.record.await_count == 2
    assert (outcome.sent, outcome.write_failures) == (2, 1)
