from datetime import datetime  # For timestamp fields
from typing import Optional  # For optional fields

from sqlalchemy import DateTime  # For aware timestamp columns
from sqlmodel import Column, Field, SQLModel, String  # For ORM and table definition

from soon_auth.utils.clock import as_utc, utcnow


class Session(SQLModel, table=True):
    """Represents a local session, the proof that a user authenticated.

    The client holds an opaque token in an HTTP-only cookie. Only the SHA-256
    digest of that token is stored here, so a leaked table does not leak usable
    credentials. A session is usable while it is neither revoked nor expired
    and its user is not soft-deleted.

    Attributes:
        id: The unique identifier for the session record.
        token_hash: Hex SHA-256 digest of the opaque session token.
        user_id: A foreign key linking the session to the `User` aggregate root.
        created_at: The timestamp when the session was issued.
        expires_at: The timestamp after which the token no longer validates.
        revoked_at: The timestamp when the session was explicitly revoked. A null
            value indicates the session is still active.
    """

    __tablename__ = "sessions"

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        description="The unique identifier for the session record.",
    )
    token_hash: str = Field(
        sa_column=Column(String(64), unique=True, index=True, nullable=False),
        description="SHA-256 digest of the session token.",
    )
    user_id: int = Field(
        foreign_key="users.id",
        index=True,
        nullable=False,
        description="Foreign key linking the session to the User.",
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="The timestamp when the session was issued.",
    )
    expires_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="The timestamp when the session expires.",
    )
    revoked_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
        description="The timestamp when the session was revoked.",
    )

    def is_active(self, now: Optional[datetime] = None) -> bool:
        now = now or utcnow()
        return self.revoked_at is None and as_utc(self.expires_at) > now
