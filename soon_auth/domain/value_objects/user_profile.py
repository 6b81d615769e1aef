"""Read-only view of a user, safe to hand to UI and API layers."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from soon_auth.domain.entities.user import User
from soon_auth.utils.clock import as_utc


class UserProfile(BaseModel):
    """A user without any credential material."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    name: Optional[str] = None
    federated: bool = False
    created_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserProfile":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            federated=user.provider_user_id is not None,
            created_at=as_utc(user.created_at),
        )
