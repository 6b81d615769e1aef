"""Response models for authentication endpoints."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from soon_auth.domain.entities.activity_log import ActivityLogEntry
from soon_auth.domain.value_objects.user_profile import UserProfile
from soon_auth.utils.clock import as_utc


class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    federated: bool = False
    created_at: datetime

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "UserResponse":
        return cls(**profile.model_dump())


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Body of every failed auth call."""

    error: str = Field(..., examples=["invalid_credentials"])
    message: str
    fields: Dict[str, str] = Field(default_factory=dict)


class ActivityEntryResponse(BaseModel):
    action: str
    ip_address: str
    metadata: Optional[str] = None
    timestamp: datetime

    @classmethod
    def from_entity(cls, entry: ActivityLogEntry) -> "ActivityEntryResponse":
        return cls(
            action=entry.action,
            ip_address=entry.ip_address,
            metadata=entry.details,
            timestamp=as_utc(entry.timestamp),
        )


class ActivityListResponse(BaseModel):
    items: List[ActivityEntryResponse]
