import hashlib
import secrets
from datetime import timedelta
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from soon_auth.domain.entities.session import Session
from soon_auth.domain.entities.user import User
from soon_auth.utils.clock import utcnow

logger = get_logger(__name__)

# 32 random bytes, i.e. 256 bits of entropy per token.
TOKEN_BYTES = 32


def hash_token(token: str) -> str:
    """Digest stored in place of the token. SHA-256 suffices for random tokens."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class SessionIssuer:
    """Mints, validates and revokes opaque local session tokens.

    The raw token only ever exists in the client's cookie and in the return
    value of `issue`. The database holds its SHA-256 digest, the owner and the
    lifetime, which makes every session server-validated: revoking the row or
    soft-deleting the user takes effect on the next request.

    Attributes:
        ttl (timedelta): Lifetime of newly issued sessions (30 days by default).
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        ttl: timedelta = timedelta(days=30),
    ):
        self._session_factory = session_factory
        self.ttl = ttl

    async def issue(self, user_id: int) -> str:
        """Create a session for ``user_id`` and return the raw token."""
        token = secrets.token_urlsafe(TOKEN_BYTES)
        now = utcnow()
        record = Session(
            token_hash=hash_token(token),
            user_id=user_id,
            created_at=now,
            expires_at=now + self.ttl,
        )
        async with self._session_factory() as db:
            db.add(record)
            await db.commit()
        await logger.ainfo("Session issued", user_id=user_id, session_id=record.id)
        return token

    async def validate(self, token: str) -> Optional[User]:
        """Return the session's user, or None.

        A token validates only if its session exists, is neither revoked nor
        expired, and the user it references has not been soft-deleted.
        """
        if not token:
            return None
        statement = (
            select(Session, User)
            .join(User, User.id == Session.user_id)
            .where(Session.token_hash == hash_token(token))
        )
        async with self._session_factory() as db:
            row = (await db.execute(statement)).first()
        if row is None:
            return None
        record, user = row
        if not record.is_active():
            logger.debug("Session rejected", session_id=record.id, reason="inactive")
            return None
        if user.is_deleted:
            logger.debug("Session rejected", session_id=record.id, reason="user_deleted")
            return None
        return user

    async def invalidate(self, token: str) -> None:
        statement = (
            update(Session)
            .where(Session.token_hash == hash_token(token), Session.revoked_at.is_(None))
            .values(revoked_at=utcnow())
        )
        async with self._session_factory() as db:
            await db.execute(statement)
            await db.commit()

    async def invalidate_all(self, user_id: int) -> None:
        """Revoke every live session of a user."""
        statement = (
            update(Session)
            .where(Session.user_id == user_id, Session.revoked_at.is_(None))
            .values(revoked_at=utcnow())
        )
        async with self._session_factory() as db:
            result = await db.execute(statement)
            await db.commit()
        await logger.ainfo("All sessions revoked", user_id=user_id, count=result.rowcount)
