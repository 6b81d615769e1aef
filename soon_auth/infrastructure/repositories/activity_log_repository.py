"""Append-only persistence for activity log entries."""

from typing import List

from sqlalchemy import select

from soon_auth.domain.entities.activity_log import ActivityLogEntry
from soon_auth.domain.interfaces.repositories import IActivityLogRepository
from soon_auth.infrastructure.database.database import SessionFactory


class ActivityLogRepository(IActivityLogRepository):
    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    async def append(self, entry: ActivityLogEntry) -> None:
        async with self._session_factory() as session:
            session.add(entry)
            await session.commit()

    async def list_for_user(self, user_id: int, limit: int = 10) -> List[ActivityLogEntry]:
        async with self._session_factory() as session:
            statement = (
                select(ActivityLogEntry)
                .where(ActivityLogEntry.user_id == user_id)
                .order_by(ActivityLogEntry.timestamp.desc(), ActivityLogEntry.id.desc())
                .limit(limit)
            )
            result = await session.execute(statement)
            return list(result.scalars().all())
