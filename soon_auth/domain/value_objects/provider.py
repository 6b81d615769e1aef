"""Wire models of the managed identity provider.

The provider prefixes system attributes with ``$`` (``$id``, ``$createdAt``),
so the models parse by alias and are populated by name in Python code.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class OAuthProvider(str, Enum):
    """OAuth providers supported for federated sign-in."""

    GITHUB = "github"
    GOOGLE = "google"


class ProviderSession(BaseModel):
    """A provider session created by exchanging a userId/secret pair."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="$id")
    user_id: str = Field(alias="userId")
    secret: str = Field(default="", repr=False)
    created_at: datetime = Field(alias="$createdAt")
    expire: Optional[datetime] = None


class ProviderUser(BaseModel):
    """A provider account as returned by the users and account endpoints."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="$id")
    email: str = ""
    name: str = ""
    created_at: datetime = Field(alias="$createdAt")
