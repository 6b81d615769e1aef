"""Best-effort activity (audit) logging.

`ActivityLogger.log` never raises: a failed write is reported to the structlog
sink as ``activity_log_write_failed`` and the caller carries on.

`run_with_audit` pairs a required operation with its audit write. Both are
dispatched as independent tasks and joined; only the required operation's
outcome reaches the caller.
"""

import asyncio
from typing import Any, Awaitable, List, Optional, TypeVar

from structlog import get_logger

from soon_auth.domain.entities.activity_log import ActivityLogEntry, ActivityType
from soon_auth.domain.interfaces.repositories import IActivityLogRepository

logger = get_logger(__name__)

T = TypeVar("T")


async def run_with_audit(operation: Awaitable[T], audit: Awaitable[Any]) -> T:
    """Run ``operation`` and ``audit`` concurrently; propagate only ``operation``'s failure.

    Both tasks always run to completion before this returns, so no audit write
    outlives the request that caused it.
    """
    operation_task = asyncio.ensure_future(operation)
    audit_task = asyncio.ensure_future(audit)
    result, audit_result = await asyncio.gather(
        operation_task, audit_task, return_exceptions=True
    )
    if isinstance(audit_result, Exception):
        await logger.awarning(
            "activity_log_write_failed",
            error=str(audit_result),
            error_type=type(audit_result).__name__,
        )
    if isinstance(result, BaseException):
        raise result
    return result


class ActivityLogger:
    """Appends activity log entries without ever failing the caller.

    Args:
        repository: Storage for the entries.
        ip_sentinel: Address recorded when the client IP is unknown.
    """

    def __init__(self, repository: IActivityLogRepository, ip_sentinel: str = "0.0.0.0"):
        self._repository = repository
        self._ip_sentinel = ip_sentinel

    async def log(
        self,
        user_id: int,
        action: ActivityType,
        ip_address: Optional[str] = None,
        metadata: Optional[str] = None,
    ) -> None:
        entry = ActivityLogEntry(
            user_id=user_id,
            action=ActivityType(action).value,
            ip_address=ip_address or self._ip_sentinel,
            details=metadata,
        )
        try:
            await self._repository.append(entry)
        except Exception as e:
            await logger.aerror(
                "activity_log_write_failed",
                user_id=user_id,
                action=entry.action,
                error=str(e),
                error_type=type(e).__name__,
            )

    async def recent(self, user_id: int, limit: int = 10) -> List[ActivityLogEntry]:
        """Newest entries first. Unlike `log`, storage errors propagate."""
        return await self._repository.list_for_user(user_id, limit=limit)
