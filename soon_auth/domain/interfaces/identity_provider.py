"""Port to the remote managed identity provider.

Every call may raise `ProviderUnavailableError` (transport failure, 5xx) or
`IdentityProviderError` (4xx). `exchange_secret` raises `ExchangeFailedError`
when the provider refuses the pair, including a replayed secret.
"""

from abc import ABC, abstractmethod

from soon_auth.domain.value_objects.provider import (
    OAuthProvider,
    ProviderSession,
    ProviderUser,
)


class IIdentityProvider(ABC):
    """Admin-privileged client for the identity provider."""

    @abstractmethod
    async def exchange_secret(self, user_id: str, secret: str) -> ProviderSession:
        """Trades a one-time userId/secret pair for a provider session.

        Never retried: the secret is consumed by the first call.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_user(self, user_id: str) -> ProviderUser:
        raise NotImplementedError

    @abstractmethod
    async def delete_session(self, user_id: str, session_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete_user(self, user_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def get_account(self, session_secret: str) -> ProviderUser:
        """Resolves the account owning a provider session secret."""
        raise NotImplementedError

    @abstractmethod
    async def delete_current_session(self, session_secret: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def authorization_url(self, provider: OAuthProvider, success_url: str, failure_url: str) -> str:
        """Builds the URL that starts the provider's OAuth2 flow. No network call."""
        raise NotImplementedError
