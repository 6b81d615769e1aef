"""OAuth federation through the managed identity provider.

The provider completes the OAuth dance with GitHub or Google and redirects the
browser back to ``/oauth?userId=...&secret=...``. The callback trades that
one-time pair for a provider session, enforces the registration policy, links
the provider account to a local user and sets the federated session cookie.

The callback is strictly sequential and only ever ends in one of two states:
a session is established, or no session exists and any provider account that
the registration policy rejected has been deleted. Failures never raise; they
become redirects to an error state. A cancelled callback finishes its provider
cleanup before the cancellation propagates.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Awaitable, Optional, Tuple
from urllib.parse import urlparse

from structlog import get_logger

from soon_auth.core.exceptions import AuthenticationError, DuplicateAccountError, ValidationError
from soon_auth.domain.entities.activity_log import ActivityType
from soon_auth.domain.entities.user import User
from soon_auth.domain.interfaces.cookies import ISessionCookieTransport
from soon_auth.domain.interfaces.identity_provider import IIdentityProvider
from soon_auth.domain.interfaces.repositories import IUserRepository
from soon_auth.domain.services.auth.activity import ActivityLogger, run_with_audit
from soon_auth.domain.value_objects.email import Email
from soon_auth.domain.value_objects.provider import OAuthProvider, ProviderSession, ProviderUser
from soon_auth.domain.value_objects.session_credential import FederatedSessionCredential, Principal
from soon_auth.utils.clock import as_utc
from soon_auth.utils.tasks import run_to_completion

logger = get_logger(__name__)

COMPLETE_PATH = "/oauth-complete"
CALLBACK_PATH = "/oauth"
OAUTH_INCOMPLETE = "oauth_incomplete"
OAUTH_SESSION_FAILED = "oauth_session_failed"
REGISTRATION_DISABLED = "registration_disabled"
OAUTH_FAILED = "oauth_failed"

OAUTH_FLOWS = {"sign-in", "sign-up"}


def sign_in_error_url(origin: str, error: str) -> str:
    return f"{origin}/sign-in?error={error}"


def provider_label(referer: Optional[str]) -> str:
    """Activity metadata naming the OAuth provider the browser came back from."""
    host = (urlparse(referer).hostname or "") if referer else ""
    if host == "github.com" or host.endswith(".github.com"):
        return "GitHub OAuth login"
    if host == "google.com" or host.endswith(".google.com"):
        return "Google OAuth login"
    return "OAuth login"


def is_fresh_registration(
    user_created_at: datetime, session_created_at: datetime, window: timedelta
) -> bool:
    """True when the provider account was created within ``window`` of the session.

    This is a heuristic: an existing user who signs in again within the window
    of their original registration is also classified as new.
    """
    return abs(as_utc(session_created_at) - as_utc(user_created_at)) <= window


class OAuthFederationService:
    """Drives the provider token exchange and maps provider accounts to local users.

    Args:
        provider: Admin client for the identity provider.
        user_repository: The local credential store.
        activity_logger: Best-effort audit log.
        registration_enabled: Registration policy, fixed at construction.
        registration_window: Maximum account age for a login to count as a
            registration.
        cookie_name: Name of the federated session cookie.
        cookie_max_age: Cookie lifetime in seconds.
    """

    def __init__(
        self,
        provider: IIdentityProvider,
        user_repository: IUserRepository,
        activity_logger: ActivityLogger,
        registration_enabled: bool = True,
        registration_window: timedelta = timedelta(minutes=5),
        cookie_name: str = "soon-federated-session",
        cookie_max_age: int = 30 * 24 * 60 * 60,
    ):
        self._provider = provider
        self._users = user_repository
        self._activity = activity_logger
        self._registration_enabled = registration_enabled
        self._registration_window = registration_window
        self.cookie_name = cookie_name
        self._cookie_max_age = cookie_max_age

    async def handle_callback(
        self,
        user_id: Optional[str],
        secret: Optional[str],
        referer: Optional[str],
        origin: str,
        cookies: ISessionCookieTransport,
        ip_address: Optional[str] = None,
    ) -> str:
        """Complete an OAuth login and return the URL to redirect the browser to."""
        if not user_id or not secret:
            await logger.awarning(
                "oauth_callback_missing_parameters",
                has_user_id=bool(user_id),
                has_secret=bool(secret),
            )
            return sign_in_error_url(origin, OAUTH_INCOMPLETE)

        session: Optional[ProviderSession] = None
        rolled_back = False
        try:
            session = await self._provider.exchange_secret(user_id, secret)
            await logger.ainfo("oauth_session_exchanged", provider_user_id=session.user_id)

            provider_user: Optional[ProviderUser] = None
            if not self._registration_enabled:
                provider_user, delete_user = await self._check_registration_policy(session)
                if provider_user is None:
                    rolled_back = True
                    await self._rollback(session, delete_user)
                    return sign_in_error_url(origin, REGISTRATION_DISABLED)

            user = await self._link_local_user(session, provider_user)
            cookies.set(self.cookie_name, session.secret, self._cookie_max_age)
            await self._activity.log(
                user.id, ActivityType.SIGN_IN, ip_address, provider_label(referer)
            )
            await logger.ainfo("oauth_sign_in_completed", user_id=user.id)
            return f"{origin}{COMPLETE_PATH}"
        except asyncio.CancelledError:
            await logger.awarning("oauth_callback_cancelled", exchanged=session is not None)
            if session is not None and not rolled_back:
                await self._rollback(session, delete_user=False)
            clear_cookie_safely(cookies, self.cookie_name)
            raise
        except Exception as e:
            await logger.aerror(
                "oauth_callback_failed",
                error=str(e),
                error_type=type(e).__name__,
                exchanged=session is not None,
            )
            if session is not None and not rolled_back:
                await self._rollback(session, delete_user=False)
            clear_cookie_safely(cookies, self.cookie_name)
            return sign_in_error_url(origin, OAUTH_SESSION_FAILED)

    async def _check_registration_policy(
        self, session: ProviderSession
    ) -> Tuple[Optional[ProviderUser], bool]:
        """Decide whether a login is allowed while registration is switched off.

        Returns the provider user when the login is allowed. On denial the user
        is None and the flag says whether the provider user must be deleted
        along with the session. If the account age cannot be determined the
        login is denied and only the session is deleted.
        """
        try:
            provider_user = await self._provider.get_user(session.user_id)
        except Exception as e:
            await logger.aerror(
                "registration_window_check_failed",
                provider_user_id=session.user_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None, False

        if not is_fresh_registration(
            provider_user.created_at, session.created_at, self._registration_window
        ):
            return provider_user, False

        await logger.awarning("oauth_registration_denied", provider_user_id=session.user_id)
        return None, True

    async def _rollback(self, session: ProviderSession, delete_user: bool) -> None:
        """Delete the provider session, and the provider user when asked.

        Both deletions are attempted independently and run to completion even
        when the request is cancelled meanwhile.
        """

        async def _delete() -> None:
            await self._best_effort(
                "delete_provider_session",
                self._provider.delete_session(session.user_id, session.id),
            )
            if delete_user:
                await self._best_effort(
                    "delete_provider_user", self._provider.delete_user(session.user_id)
                )

        await run_to_completion(_delete())

    async def _link_local_user(
        self, session: ProviderSession, provider_user: Optional[ProviderUser]
    ) -> User:
        """Find or create the local user behind a provider account.

        Lookup order is the provider link, then the email. A soft-deleted local
        user denies the login.
        """
        user = await self._users.find_by_provider_user_id(session.user_id)
        if user is not None:
            if user.is_deleted:
                raise AuthenticationError("Account has been deleted", code="account_deleted")
            return user

        if provider_user is None:
            provider_user = await self._provider.get_user(session.user_id)
        email = Email(provider_user.email)

        user = await self._users.find_by_email(email.value)
        if user is not None:
            if user.provider_user_id is not None:
                raise DuplicateAccountError()
            await logger.ainfo("oauth_account_linked", user_id=user.id)
            return await self._users.update(user.id, provider_user_id=session.user_id)

        return await self._users.insert(
            User(
                email=email.value,
                name=provider_user.name or None,
                provider_user_id=session.user_id,
            )
        )

    async def sign_out(self, principal: Principal, ip_address: Optional[str] = None) -> None:
        """End the provider session and log ``SIGN_OUT``. Failures are only logged."""
        credential = principal.credential
        if not isinstance(credential, FederatedSessionCredential):
            raise TypeError("Federated sign-out requires a federated session credential")
        try:
            await run_with_audit(
                self._provider.delete_current_session(credential.secret),
                self._activity.log(principal.user_id, ActivityType.SIGN_OUT, ip_address),
            )
        except Exception as e:
            await logger.aerror(
                "provider_session_delete_failed",
                user_id=principal.user_id,
                error=str(e),
                error_type=type(e).__name__,
            )

    def build_authorization_url(self, provider: str, origin: str, flow: str = "sign-in") -> str:
        """URL that starts the provider's OAuth2 flow. No network call is made."""
        try:
            oauth_provider = OAuthProvider((provider or "").lower())
        except ValueError as e:
            message = f"Unsupported OAuth provider: {provider}"
            raise ValidationError(message, fields={"provider": message}) from e
        if flow not in OAUTH_FLOWS:
            message = f"Unsupported OAuth flow: {flow}"
            raise ValidationError(message, fields={"flow": message})

        return self._provider.authorization_url(
            oauth_provider,
            success_url=f"{origin}{CALLBACK_PATH}",
            failure_url=f"{origin}/{flow}?error={OAUTH_FAILED}",
        )

    async def _best_effort(self, action: str, call: Awaitable[None]) -> None:
        try:
            await call
        except Exception as e:
            await logger.awarning(
                "oauth_cleanup_failed",
                action=action,
                error=str(e),
                error_type=type(e).__name__,
            )


def clear_cookie_safely(cookies: ISessionCookieTransport, name: str) -> None:
    try:
        cookies.clear(name)
    except Exception as e:
        logger.warning("session_cookie_clear_failed", cookie=name, error=str(e))
