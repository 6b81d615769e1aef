"""Email and password authentication against the local credential store.

Input is validated before any storage access. Every mutating operation runs
its storage write together with an activity log entry through
`run_with_audit`, so a failed audit write never changes the outcome.

Credential failures (unknown email, soft-deleted account, federated-only
account, wrong password) all raise the same `InvalidCredentialsError`, and an
unknown email still pays for one bcrypt verification so that response timing
does not reveal which case occurred.
"""

from typing import Optional, Tuple

from structlog import get_logger

from soon_auth.core.exceptions import (
    AuthenticationError,
    DuplicateAccountError,
    InvalidCredentialsError,
    NoOpChangeError,
    PasswordMismatchError,
    RegistrationDisabledError,
    ValidationError,
)
from soon_auth.domain.entities.activity_log import ActivityType
from soon_auth.domain.entities.user import User
from soon_auth.domain.interfaces.repositories import IUserRepository
from soon_auth.domain.services.auth.activity import ActivityLogger, run_with_audit
from soon_auth.domain.services.auth.session import SessionIssuer
from soon_auth.domain.value_objects.email import Email
from soon_auth.domain.value_objects.password import Password
from soon_auth.domain.value_objects.session_credential import LocalSessionCredential, Principal
from soon_auth.utils.security import DUMMY_PASSWORD_HASH, verify_password_async
from soon_auth.utils.tasks import run_to_completion

logger = get_logger(__name__)

NAME_MAX_LENGTH = 100


def parse_email(value: Optional[str], field: str = "email") -> Email:
    try:
        return Email(value or "")
    except (TypeError, ValueError) as e:
        raise ValidationError("Invalid email address.", fields={field: str(e)}) from e


def parse_password(value: Optional[str], field: str = "password") -> Password:
    try:
        return Password(value or "")
    except (TypeError, ValueError) as e:
        raise ValidationError(str(e), fields={field: str(e)}) from e


def parse_name(value: Optional[str], required: bool = False) -> Optional[str]:
    name = (value or "").strip()
    if not name:
        if required:
            raise ValidationError("Name is required.", fields={"name": "Name is required."})
        return None
    if len(name) > NAME_MAX_LENGTH:
        message = f"Name must not exceed {NAME_MAX_LENGTH} characters."
        raise ValidationError(message, fields={"name": message})
    return name


class LocalAuthService:
    """Sign-up, sign-in and account management for email/password accounts.

    Args:
        user_repository: The credential store.
        session_issuer: Issues and revokes local session tokens.
        activity_logger: Best-effort audit log.
        registration_enabled: Registration policy, fixed at construction.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        session_issuer: SessionIssuer,
        activity_logger: ActivityLogger,
        registration_enabled: bool = True,
    ):
        self._users = user_repository
        self._sessions = session_issuer
        self._activity = activity_logger
        self._registration_enabled = registration_enabled

    async def sign_up(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Tuple[User, str]:
        """Create a local account and its first session.

        Returns:
            The new user and the raw session token.

        Raises:
            ValidationError: Malformed email, password or name.
            RegistrationDisabledError: Registration is switched off.
            DuplicateAccountError: A non-deleted user already owns the email.
        """
        email_vo = parse_email(email)
        password_vo = parse_password(password)
        display_name = parse_name(name)

        if not self._registration_enabled:
            await logger.awarning("sign_up_rejected_registration_disabled", email=email_vo.mask_for_logging())
            raise RegistrationDisabledError()

        # Fast path for a friendly error; the unique index is what guarantees it.
        if await self._users.find_by_email(email_vo.value) is not None:
            raise DuplicateAccountError()

        hashed_password = await password_vo.to_hashed()
        user = await self._users.insert(
            User(email=email_vo.value, name=display_name, hashed_password=hashed_password)
        )
        try:
            token = await run_with_audit(
                self._sessions.issue(user.id),
                self._activity.log(user.id, ActivityType.SIGN_UP, ip_address),
            )
        except BaseException as e:
            await logger.aerror(
                "sign_up_session_issue_failed",
                user_id=user.id,
                error=str(e),
                error_type=type(e).__name__,
            )
            await run_to_completion(self._users.delete(user.id))
            raise
        return user, token

    async def sign_in(
        self, email: str, password: str, ip_address: Optional[str] = None
    ) -> Tuple[User, str]:
        email_vo = parse_email(email)
        if not password:
            raise ValidationError("Password is required.", fields={"password": "Password is required."})

        user = await self._users.find_by_email(email_vo.value)
        hashed_password = user.hashed_password if user is not None and user.has_password else None
        password_ok = await verify_password_async(password, hashed_password or DUMMY_PASSWORD_HASH)
        if hashed_password is None or not password_ok:
            await logger.ainfo("sign_in_failed", email=email_vo.mask_for_logging())
            raise InvalidCredentialsError()

        token = await run_with_audit(
            self._sessions.issue(user.id),
            self._activity.log(user.id, ActivityType.SIGN_IN, ip_address),
        )
        return user, token

    async def sign_out(self, principal: Principal, ip_address: Optional[str] = None) -> None:
        """Revoke the session and log ``SIGN_OUT``. Failures are only logged."""
        credential = principal.credential
        if not isinstance(credential, LocalSessionCredential):
            raise TypeError("Local sign-out requires a local session credential")
        try:
            await run_with_audit(
                self._sessions.invalidate(credential.token),
                self._activity.log(principal.user_id, ActivityType.SIGN_OUT, ip_address),
            )
        except Exception as e:
            await logger.aerror(
                "session_invalidation_failed",
                user_id=principal.user_id,
                error=str(e),
                error_type=type(e).__name__,
            )

    async def update_password(
        self,
        principal: Principal,
        current_password: str,
        new_password: str,
        confirm_password: str,
        ip_address: Optional[str] = None,
    ) -> None:
        """Replace the password after verifying the current one.

        Checks run in this order: length policy of the new password, current
        password verification, unchanged password, confirmation mismatch.
        """
        new_password_vo = parse_password(new_password, field="new_password")
        user = await self._live_user(principal)
        await self._verify(user, current_password)
        if new_password == current_password:
            raise NoOpChangeError()
        if confirm_password != new_password:
            raise PasswordMismatchError()

        hashed_password = await new_password_vo.to_hashed()
        await run_with_audit(
            self._users.update(user.id, hashed_password=hashed_password),
            self._activity.log(user.id, ActivityType.UPDATE_PASSWORD, ip_address),
        )

    async def delete_account(
        self, principal: Principal, password: str, ip_address: Optional[str] = None
    ) -> None:
        """Soft-delete the account and revoke all of its local sessions."""
        user = await self._live_user(principal)
        await self._verify(user, password)
        await run_with_audit(
            self._users.soft_delete(user.id),
            self._activity.log(user.id, ActivityType.DELETE_ACCOUNT, ip_address),
        )
        await self._sessions.invalidate_all(user.id)
        await logger.ainfo("Account deleted", user_id=user.id)

    async def update_account(
        self,
        principal: Principal,
        name: Optional[str],
        email: str,
        ip_address: Optional[str] = None,
    ) -> User:
        display_name = parse_name(name, required=True)
        email_vo = parse_email(email)
        user = await self._live_user(principal)

        if email_vo.value != user.email:
            owner = await self._users.find_by_email(email_vo.value)
            if owner is not None and owner.id != user.id:
                raise DuplicateAccountError()

        return await run_with_audit(
            self._users.update(user.id, name=display_name, email=email_vo.value),
            self._activity.log(user.id, ActivityType.UPDATE_ACCOUNT, ip_address),
        )

    async def _live_user(self, principal: Principal) -> User:
        user = await self._users.get_by_id(principal.user_id)
        if user is None or user.is_deleted:
            raise AuthenticationError()
        return user

    async def _verify(self, user: User, password: Optional[str]) -> None:
        hashed_password = user.hashed_password if user.has_password else None
        password_ok = await verify_password_async(password or "", hashed_password or DUMMY_PASSWORD_HASH)
        if hashed_password is None or not password_ok:
            raise InvalidCredentialsError()
