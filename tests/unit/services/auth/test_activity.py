import asyncio

import pytest
from unittest.mock import AsyncMock

from soon_auth.domain.entities.activity_log import ActivityType
from soon_auth.domain.services.auth.activity import ActivityLogger, run_with_audit
from tests.factories.user import create_fake_user


class TestRunWithAudit:
    @pytest.mark.asyncio
    async def test_returns_operation_result(self):
        async def operation():
            return "token"

        async def audit():
            return None

        assert await run_with_audit(operation(), audit()) == "token"

    @pytest.mark.asyncio
    async def test_audit_failure_is_swallowed(self):
        async def operation():
            return 42

        async def audit():
            raise RuntimeError("log store down")

        assert await run_with_audit(operation(), audit()) == 42

    @pytest.mark.asyncio
    async def test_operation_failure_propagates_after_audit_completes(self):
        audited = asyncio.Event()

        async def operation():
            raise LookupError("store down")

        async def audit():
            await asyncio.sleep(0.01)
            audited.set()

        with pytest.raises(LookupError):
            await run_with_audit(operation(), audit())
        assert audited.is_set()

    @pytest.mark.asyncio
    async def test_operation_and_audit_run_concurrently(self):
        order = []

        async def operation():
            order.append("operation-start")
            await asyncio.sleep(0.01)
            order.append("operation-end")

        async def audit():
            order.append("audit-start")
            await asyncio.sleep(0.01)
            order.append("audit-end")

        await run_with_audit(operation(), audit())

        assert order.index("audit-start") < order.index("operation-end")


class TestActivityLogger:
    @pytest.mark.asyncio
    async def test_log_records_entry_with_sentinel_ip(
        self, activity_logger, activity_repository, user_repository
    ):
        user = await user_repository.insert(create_fake_user())

        await activity_logger.log(user.id, ActivityType.SIGN_IN)

        [entry] = await activity_repository.list_for_user(user.id)
        assert entry.action == "SIGN_IN"
        assert entry.ip_address == "0.0.0.0"
        assert entry.details is None

    @pytest.mark.asyncio
    async def test_log_keeps_ip_and_metadata(self, activity_logger, user_repository):
        user = await user_repository.insert(create_fake_user())

        await activity_logger.log(user.id, ActivityType.SIGN_IN, "203.0.113.7", "GitHub OAuth login")

        [entry] = await activity_logger.recent(user.id)
        assert entry.ip_address == "203.0.113.7"
        assert entry.details == "GitHub OAuth login"

    @pytest.mark.asyncio
    async def test_log_never_raises(self):
        repository = AsyncMock()
        repository.append.side_effect = ConnectionError("log store unreachable")

        await ActivityLogger(repository).log(1, ActivityType.SIGN_OUT)

        repository.append.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_recent_propagates_storage_errors(self):
        repository = AsyncMock()
        repository.list_for_user.side_effect = ConnectionError("log store unreachable")

        with pytest.raises(ConnectionError):
            await ActivityLogger(repository).recent(1)
