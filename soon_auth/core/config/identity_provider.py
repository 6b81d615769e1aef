"""Managed identity provider (OAuth federation) settings.
"""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings


class IdentityProviderSettings(BaseSettings):
    """Connection settings for the remote managed-identity service.

    The service is called with an admin API key, so the key grants full control
    over provider accounts and sessions.

    Security Note:
        - IDENTITY_PROVIDER_API_KEY must never be logged or committed.
    """

    IDENTITY_PROVIDER_ENDPOINT: str = "https://cloud.appwrite.io/v1"
    IDENTITY_PROVIDER_PROJECT_ID: str = ""
    IDENTITY_PROVIDER_API_KEY: SecretStr = SecretStr("")
    IDENTITY_PROVIDER_TIMEOUT_SECONDS: float = Field(gt=0, default=5.0)
