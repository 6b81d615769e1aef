"""User Repository implementation using SQLModel on an async SQLAlchemy engine.

Every method opens its own session from the shared factory and commits before
returning, so callers never manage transactions and concurrent operations of
one request never share a session.

Email uniqueness among non-deleted users is guaranteed by the partial unique
index ``uq_users_active_email``. The repository translates the resulting
`IntegrityError` into `DuplicateAccountError`, which is what makes a lost
check-then-insert race surface as a duplicate rather than a crash.
"""

from typing import Any, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from structlog import get_logger

from soon_auth.core.exceptions import DatabaseError, DuplicateAccountError
from soon_auth.domain.entities.activity_log import ActivityLogEntry
from soon_auth.domain.entities.session import Session
from soon_auth.domain.entities.user import User
from soon_auth.domain.interfaces.repositories import IUserRepository
from soon_auth.domain.value_objects.email import mask_email
from soon_auth.infrastructure.database.database import SessionFactory
from soon_auth.utils.clock import utcnow

logger = get_logger(__name__)

# Columns callers may change through `update`.
UPDATABLE_FIELDS = frozenset({"email", "name", "hashed_password", "provider_user_id"})


class UserRepository(IUserRepository):
    """SQLModel implementation of the credential store."""

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    async def get_by_id(self, user_id: int) -> Optional[User]:
        async with self._session_factory() as session:
            return await session.get(User, user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        """Get the non-deleted user for a normalized email."""
        async with self._session_factory() as session:
            statement = select(User).where(User.email == email, User.deleted_at.is_(None))
            result = await session.execute(statement)
            user = result.scalars().first()
        logger.debug(
            "User lookup by email completed",
            email=mask_email(email),
            found=user is not None,
        )
        return user

    async def find_by_provider_user_id(self, provider_user_id: str) -> Optional[User]:
        async with self._session_factory() as session:
            statement = select(User).where(User.provider_user_id == provider_user_id)
            result = await session.execute(statement)
            return result.scalars().first()

    async def insert(self, user: User) -> User:
        """Insert a new user.

        Raises:
            DuplicateAccountError: When the unique index rejects the row.
        """
        async with self._session_factory() as session:
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                await logger.awarning(
                    "User insert rejected by unique constraint",
                    email=mask_email(user.email),
                )
                raise DuplicateAccountError() from e
            await session.refresh(user)
        await logger.ainfo("User created", user_id=user.id, email=mask_email(user.email))
        return user

    async def update(self, user_id: int, **fields: Any) -> User:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update user fields: {', '.join(sorted(unknown))}")

        async with self._session_factory() as session:
            user = await session.get(User, user_id)
            if user is None:
                raise DatabaseError(f"User {user_id} not found", code="user_not_found")
            for name, value in fields.items():
                setattr(user, name, value)
            user.updated_at = utcnow()
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise DuplicateAccountError() from e
            await session.refresh(user)
        logger.debug("User updated", user_id=user_id, fields=sorted(fields))
        return user

    async def soft_delete(self, user_id: int) -> None:
        async with self._session_factory() as session:
            statement = (
                update(User)
                .where(User.id == user_id, User.deleted_at.is_(None))
                .values(deleted_at=utcnow(), updated_at=utcnow())
            )
            await session.execute(statement)
            await session.commit()
        await logger.ainfo("User soft-deleted", user_id=user_id)

    async def delete(self, user_id: int) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(Session).where(Session.user_id == user_id))
            await session.execute(delete(ActivityLogEntry).where(ActivityLogEntry.user_id == user_id))
            await session.execute(delete(User).where(User.id == user_id))
            await session.commit()
        await logger.awarning("User removed", user_id=user_id)
