from datetime import datetime  # For timestamp fields
from typing import Optional  # For optional fields

from sqlalchemy import DateTime, text  # For the partial index predicate and aware timestamps
from sqlmodel import Column, Field, Index, SQLModel, String  # For ORM and table definition

from soon_auth.utils.clock import utcnow


class User(SQLModel, table=True):
    """Represents a User entity and acts as an Aggregate Root.

    A user is created either by local sign-up (email and password) or by the
    first successful OAuth exchange with the managed identity provider. Local
    accounts carry a password hash; federated accounts carry the id of the
    linked provider account instead.

    Users are never hard-deleted by the core. Account deletion sets
    ``deleted_at`` and the row stays behind for support-assisted recovery.
    Exactly one non-deleted user may own an email, which the database enforces
    with a partial unique index.

    Attributes:
        id: The unique identifier for the user (primary key).
        email: Email address, stored stripped and lower-cased.
        name: Optional display name.
        hashed_password: The bcrypt hash. Null for federated-only accounts.
        provider_user_id: Id of the linked identity-provider account, if any.
        created_at: The timestamp of when the user account was created.
        updated_at: The timestamp of the last update to the user's record.
        deleted_at: Soft-delete timestamp. Null while the account is live.
    """

    __tablename__ = "users"

    id: Optional[int] = Field(
        default=None,  # Auto-incremented by database
        primary_key=True,
        description="The unique identifier for the user.",
    )
    email: str = Field(
        sa_column=Column(String(254), index=True, nullable=False),
        description="Case-insensitive email address, unique among non-deleted users.",
    )
    name: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Optional display name.",
    )
    hashed_password: Optional[str] = Field(
        default=None,  # Absent for OAuth users
        max_length=255,  # Sufficient for bcrypt hashes
        description="Bcrypt-hashed password. Null for users authenticating via OAuth.",
    )
    provider_user_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), unique=True, nullable=True),
        description="Id of the linked managed-identity account.",
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(
            DateTime(timezone=True),
            server_default=text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        description="The timestamp of when the user account was created.",
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
        description="The timestamp of the last update to the user's record.",
    )
    deleted_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
        description="Soft-delete timestamp.",
    )

    __table_args__ = (
        Index(
            "uq_users_active_email",
            "email",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def has_password(self) -> bool:
        """Federated-only accounts have no local password."""
        return bool(self.hashed_password)
