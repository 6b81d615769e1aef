"""The Auth Facade: the single entry point of the identity core.

UI and API layers call the facade and receive an `AuthResult`; no exception
crosses this boundary. Every operation is bounded by the request timeout and
abandoned when it runs out, yielding ``ErrorKind.TIMEOUT``.

The facade chooses the identity backend from the session credential's origin
exactly once per call (`_backend_for`); nothing downstream re-checks it.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, List, Mapping, Optional, Tuple

from structlog import get_logger

from soon_auth.core.exceptions import (
    AuthenticationError,
    ErrorKind,
    RequestTimeoutError,
    SoonError,
)
from soon_auth.domain.entities.activity_log import ActivityLogEntry
from soon_auth.domain.interfaces.cookies import ISessionCookieTransport
from soon_auth.domain.interfaces.session_backend import ISessionBackend
from soon_auth.domain.services.auth.activity import ActivityLogger
from soon_auth.domain.services.auth.local import LocalAuthService
from soon_auth.domain.services.auth.oauth import (
    OAUTH_SESSION_FAILED,
    OAuthFederationService,
    clear_cookie_safely,
    sign_in_error_url,
)
from soon_auth.domain.value_objects.session_credential import (
    FederatedSessionCredential,
    LocalSessionCredential,
    Principal,
    SessionCredential,
)
from soon_auth.domain.value_objects.user_profile import UserProfile

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Something went wrong. Please try again later."


@dataclass(frozen=True)
class AuthResult:
    """Discriminated result of a facade operation.

    Attributes:
        success: Whether the operation succeeded.
        data: Operation payload on success.
        error: The error category on failure.
        message: Human-readable message (success confirmation or error).
        fields: Per-field validation messages on ``invalid_input`` and friends.
    """

    success: bool
    data: Any = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None
    fields: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None) -> "AuthResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: SoonError) -> "AuthResult":
        return cls(
            success=False,
            error=error.kind,
            message=error.message,
            fields=dict(getattr(error, "fields", {}) or {}),
        )

    @classmethod
    def internal(cls) -> "AuthResult":
        return cls(success=False, error=ErrorKind.INTERNAL, message=INTERNAL_ERROR_MESSAGE)


class AuthFacade:
    """Dispatches auth operations to the local or federated backend.

    Args:
        local_service: Email/password operations.
        oauth_service: OAuth callback and authorization URLs.
        activity_logger: Read access to the activity log.
        local_backend: Backend for `LocalSessionCredential`.
        federated_backend: Backend for `FederatedSessionCredential`.
        cookie_max_age: Max-age of the local session cookie, in seconds.
        request_timeout: Upper bound for each operation, in seconds.
    """

    def __init__(
        self,
        local_service: LocalAuthService,
        oauth_service: OAuthFederationService,
        activity_logger: ActivityLogger,
        local_backend: ISessionBackend,
        federated_backend: ISessionBackend,
        cookie_max_age: int,
        request_timeout: float = 10.0,
    ):
        self._local_service = local_service
        self._oauth_service = oauth_service
        self._activity = activity_logger
        self._local = local_backend
        self._federated = federated_backend
        self._cookie_max_age = cookie_max_age
        self._timeout = request_timeout

    @property
    def cookie_names(self) -> Tuple[str, str]:
        return self._local.cookie_name, self._federated.cookie_name

    def read_credential(self, cookies: Mapping[str, str]) -> Optional[SessionCredential]:
        """Build the request's credential from its cookies; the local session wins."""
        token = cookies.get(self._local.cookie_name)
        if token:
            return LocalSessionCredential(token)
        secret = cookies.get(self._federated.cookie_name)
        if secret:
            return FederatedSessionCredential(secret)
        return None

    def _backend_for(self, credential: SessionCredential) -> ISessionBackend:
        if isinstance(credential, FederatedSessionCredential):
            return self._federated
        return self._local

    async def _authenticate(
        self, credential: Optional[SessionCredential]
    ) -> Tuple[Principal, ISessionBackend]:
        if credential is None:
            raise AuthenticationError()
        backend = self._backend_for(credential)
        principal = await backend.resolve(credential)
        if principal is None:
            raise AuthenticationError()
        return principal, backend

    async def _run(self, operation: str, call: Awaitable[AuthResult]) -> AuthResult:
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except asyncio.TimeoutError:
            await logger.awarning("auth_operation_timed_out", operation=operation, timeout=self._timeout)
            return AuthResult.fail(RequestTimeoutError())
        except SoonError as e:
            await logger.ainfo(
                "auth_operation_rejected", operation=operation, error=e.kind.value, code=e.code
            )
            return AuthResult.fail(e)
        except Exception as e:
            await logger.aerror(
                "auth_operation_failed",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=e,
            )
            return AuthResult.internal()

    async def sign_up(
        self,
        email: str,
        password: str,
        name: Optional[str],
        cookies: ISessionCookieTransport,
        ip_address: Optional[str] = None,
    ) -> AuthResult:
        async def _sign_up() -> AuthResult:
            user, token = await self._local_service.sign_up(email, password, name, ip_address)
            cookies.set(self._local.cookie_name, token, self._cookie_max_age)
            return AuthResult.ok(UserProfile.from_entity(user))

        return await self._run("sign_up", _sign_up())

    async def sign_in(
        self,
        email: str,
        password: str,
        cookies: ISessionCookieTransport,
        ip_address: Optional[str] = None,
    ) -> AuthResult:
        async def _sign_in() -> AuthResult:
            user, token = await self._local_service.sign_in(email, password, ip_address)
            cookies.set(self._local.cookie_name, token, self._cookie_max_age)
            return AuthResult.ok(UserProfile.from_entity(user))

        return await self._run("sign_in", _sign_in())

    async def sign_out(
        self,
        credential: Optional[SessionCredential],
        cookies: ISessionCookieTransport,
        ip_address: Optional[str] = None,
    ) -> AuthResult:
        """Always succeeds. Both session cookies are cleared whatever happens."""

        async def _sign_out() -> AuthResult:
            if credential is None:
                return AuthResult.ok()
            backend = self._backend_for(credential)
            principal = await backend.resolve(credential)
            if principal is not None:
                await backend.sign_out(principal, ip_address)
            return AuthResult.ok()

        await self._run("sign_out", _sign_out())
        for name in self.cookie_names:
            clear_cookie_safely(cookies, name)
        return AuthResult.ok(message="Signed out.")

    async def update_password(
        self,
        credential: Optional[SessionCredential],
        current_password: str,
        new_password: str,
        confirm_password: str,
        ip_address: Optional[str] = None,
    ) -> AuthResult:
        async def _update_password() -> AuthResult:
            principal, _ = await self._authenticate(credential)
            await self._local_service.update_password(
                principal, current_password, new_password, confirm_password, ip_address
            )
            return AuthResult.ok(message="Password updated successfully.")

        return await self._run("update_password", _update_password())

    async def delete_account(
        self,
        credential: Optional[SessionCredential],
        password: str,
        cookies: ISessionCookieTransport,
        ip_address: Optional[str] = None,
    ) -> AuthResult:
        async def _delete_account() -> AuthResult:
            principal, backend = await self._authenticate(credential)
            await self._local_service.delete_account(principal, password, ip_address)
            try:
                await backend.end_session(principal.credential)
            except Exception as e:
                await logger.awarning("session_end_failed", user_id=principal.user_id, error=str(e))
            clear_cookie_safely(cookies, backend.cookie_name)
            return AuthResult.ok(message="Account deleted.")

        return await self._run("delete_account", _delete_account())

    async def update_account(
        self,
        credential: Optional[SessionCredential],
        name: Optional[str],
        email: str,
        ip_address: Optional[str] = None,
    ) -> AuthResult:
        async def _update_account() -> AuthResult:
            principal, _ = await self._authenticate(credential)
            user = await self._local_service.update_account(principal, name, email, ip_address)
            return AuthResult.ok(UserProfile.from_entity(user), message="Account updated successfully.")

        return await self._run("update_account", _update_account())

    async def get_current_user(self, credential: Optional[SessionCredential]) -> Optional[UserProfile]:
        """Read-only lookup used to gate protected pages. Any failure yields None."""
        if credential is None:
            return None

        async def _current_user() -> AuthResult:
            principal, _ = await self._authenticate(credential)
            return AuthResult.ok(UserProfile.from_entity(principal.user))

        result = await self._run("get_current_user", _current_user())
        return result.data if result.success else None

    async def list_activity(
        self, credential: Optional[SessionCredential], limit: int = 10
    ) -> AuthResult:
        async def _list_activity() -> AuthResult:
            principal, _ = await self._authenticate(credential)
            entries: List[ActivityLogEntry] = await self._activity.recent(principal.user_id, limit)
            return AuthResult.ok(entries)

        return await self._run("list_activity", _list_activity())

    async def handle_oauth_callback(
        self,
        user_id: Optional[str],
        secret: Optional[str],
        referer: Optional[str],
        origin: str,
        cookies: ISessionCookieTransport,
        ip_address: Optional[str] = None,
    ) -> str:
        """Run the OAuth callback and return the redirect target. Never raises."""
        try:
            return await asyncio.wait_for(
                self._oauth_service.handle_callback(
                    user_id, secret, referer, origin, cookies, ip_address
                ),
                timeout=self._timeout,
            )
        except Exception as e:
            await logger.aerror(
                "oauth_callback_aborted", error=str(e), error_type=type(e).__name__
            )
            clear_cookie_safely(cookies, self._federated.cookie_name)
            return sign_in_error_url(origin, OAUTH_SESSION_FAILED)

    def authorization_url(self, provider: str, origin: str, flow: str = "sign-in") -> AuthResult:
        try:
            return AuthResult.ok(self._oauth_service.build_authorization_url(provider, origin, flow))
        except SoonError as e:
            return AuthResult.fail(e)
