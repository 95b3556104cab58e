"""Unit tests for the processed-message ledger"""

from datetime import datetime, timedelta, timezone

import pytest

from domain.documents.ports.processed_message_repository_port import ProcessedMessage
from events.idempotency import ProcessedMessageLedger

from fakes import StoreUnavailable


class Action:

    def __init__(self, error=None):
        self.calls = 0
        self.error = error

    async def __call__(self):
        self.calls += 1
        if self.error is not None:
            raise self.error


class TestRunOnce:

    @pytest.mark.asyncio
    async def test_first_delivery_runs_and_records(self, ledger, processed_messages):
        action = Action()

        ran = await ledger.run_once("msg-1", "doc-1", "test-handler", action)

        assert ran is True
        assert action.calls == 1
        entry = processed_messages.entries["msg-1"]
        assert entry.document_id == "doc-1"
        assert entry.processed_by == "test-handler"

    @pytest.mark.asyncio
    async def test_duplicate_is_skipped(self, ledger):
        action = Action()

        await ledger.run_once("msg-1", "doc-1", "test-handler", action)
        ran = await ledger.run_once("msg-1", "doc-1", "test-handler", action)

        assert ran is False
        assert action.calls == 1

    @pytest.mark.asyncio
    async def test_failed_action_is_not_recorded(self, ledger, processed_messages):
        with pytest.raises(RuntimeError):
            await ledger.run_once("msg-1", "doc-1", "test-handler", Action(RuntimeError("db down")))

        assert processed_messages.entries == {}

        retry = Action()
        assert await ledger.run_once("msg-1", "doc-1", "test-handler", retry) is True
        assert retry.calls == 1

    @pytest.mark.asyncio
    async def test_without_message_id_always_runs(self, ledger, processed_messages):
        action = Action()

        await ledger.run_once(None, "doc-1", "test-handler", action)
        await ledger.run_once(None, "doc-1", "test-handler", action)

        assert action.calls == 2
        assert processed_messages.entries == {}

    @pytest.mark.asyncio
    async def test_lookup_failure_runs_action(self, ledger, processed_messages):
        processed_messages.fail_on.add("check_if_processed")
        action = Action()

        assert await ledger.run_once("msg-1", "doc-1", "test-handler", action) is True
        assert action.calls == 1

    @pytest.mark.asyncio
    async def test_mark_failure_propagates(self, ledger, processed_messages):
        processed_messages.fail_on.add("mark_as_processed")

        with pytest.raises(StoreUnavailable):
            await ledger.run_once("msg-1", "doc-1", "test-handler", Action())

    @pytest.mark.asyncio
    async def test_expired_entry_is_not_processed(self, processed_messages):
        ledger = ProcessedMessageLedger(processed_messages)
        old = datetime.now(timezone.utc) - timedelta(days=10)
        await processed_messages.mark_as_processed(
            ProcessedMessage.create("msg-1", "doc-1", "test-handler", now=old)
        )

        assert await ledger.is_processed("msg-1") is False


def test_processed_message_expiry():
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    entry = ProcessedMessage.create("msg-1", "doc-1", "handler", ttl=timedelta(days=7), now=now)

    assert entry.processed_at == now
    assert entry.expires_at == now + timedelta(days=7)
