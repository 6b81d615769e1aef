from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Column, Field, SQLModel, String

from soon_auth.utils.clock import utcnow


class ActivityType(str, Enum):
    """Auth-relevant actions recorded in the activity log."""

    SIGN_UP = "SIGN_UP"
    SIGN_IN = "SIGN_IN"
    SIGN_OUT = "SIGN_OUT"
    UPDATE_PASSWORD = "UPDATE_PASSWORD"
    UPDATE_ACCOUNT = "UPDATE_ACCOUNT"
    DELETE_ACCOUNT = "DELETE_ACCOUNT"


class ActivityLogEntry(SQLModel, table=True):
    """An append-only audit record. Rows are never updated or deleted by the core.

    Attributes:
        user_id: The user the action belongs to.
        action: One of `ActivityType`.
        ip_address: Client address, or the configured sentinel when unknown.
        details: Optional free-text metadata such as the OAuth provider label.
        timestamp: When the action happened.
    """

    __tablename__ = "activity_logs"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True, nullable=False)
    action: str = Field(sa_column=Column(String(32), nullable=False))
    ip_address: str = Field(default="0.0.0.0", max_length=45)
    details: Optional[str] = Field(default=None, max_length=255)
    timestamp: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
