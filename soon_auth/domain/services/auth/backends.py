"""The two identity backends behind the Auth Facade."""

from typing import Optional

from structlog import get_logger

from soon_auth.core.exceptions import IdentityProviderError, ProviderUnavailableError
from soon_auth.domain.interfaces.identity_provider import IIdentityProvider
from soon_auth.domain.interfaces.repositories import IUserRepository
from soon_auth.domain.interfaces.session_backend import ISessionBackend
from soon_auth.domain.services.auth.local import LocalAuthService
from soon_auth.domain.services.auth.oauth import OAuthFederationService
from soon_auth.domain.services.auth.session import SessionIssuer
from soon_auth.domain.value_objects.session_credential import (
    FederatedSessionCredential,
    LocalSessionCredential,
    Principal,
    SessionCredential,
)

logger = get_logger(__name__)


class LocalSessionBackend(ISessionBackend):
    """Sessions minted by the `SessionIssuer` for email/password accounts."""

    def __init__(
        self, session_issuer: SessionIssuer, local_service: LocalAuthService, cookie_name: str
    ):
        self._sessions = session_issuer
        self._local_service = local_service
        self.cookie_name = cookie_name

    async def resolve(self, credential: SessionCredential) -> Optional[Principal]:
        if not isinstance(credential, LocalSessionCredential):
            return None
        user = await self._sessions.validate(credential.token)
        return Principal(user=user, credential=credential) if user is not None else None

    async def sign_out(self, principal: Principal, ip_address: Optional[str]) -> None:
        await self._local_service.sign_out(principal, ip_address)

    async def end_session(self, credential: SessionCredential) -> None:
        if isinstance(credential, LocalSessionCredential):
            await self._sessions.invalidate(credential.token)


class FederatedSessionBackend(ISessionBackend):
    """Provider sessions created by the OAuth callback.

    The provider is the authority on whether the secret is still valid; the
    local user linked to the provider account supplies the identity.
    """

    def __init__(
        self,
        provider: IIdentityProvider,
        user_repository: IUserRepository,
        oauth_service: OAuthFederationService,
        cookie_name: str,
    ):
        self._provider = provider
        self._users = user_repository
        self._oauth_service = oauth_service
        self.cookie_name = cookie_name

    async def resolve(self, credential: SessionCredential) -> Optional[Principal]:
        if not isinstance(credential, FederatedSessionCredential):
            return None
        try:
            account = await self._provider.get_account(credential.secret)
        except ProviderUnavailableError:
            raise
        except IdentityProviderError as e:
            logger.debug("Federated session rejected", status_code=e.status_code)
            return None
        user = await self._users.find_by_provider_user_id(account.id)
        if user is None or user.is_deleted:
            return None
        return Principal(user=user, credential=credential)

    async def sign_out(self, principal: Principal, ip_address: Optional[str]) -> None:
        await self._oauth_service.sign_out(principal, ip_address)

    async def end_session(self, credential: SessionCredential) -> None:
        if not isinstance(credential, FederatedSessionCredential):
            return
        try:
            await self._provider.delete_current_session(credential.secret)
        except IdentityProviderError as e:
            await logger.awarning(
                "provider_session_delete_failed",
                error=str(e),
                status_code=e.status_code,
            )
