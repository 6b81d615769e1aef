"""Centralized, structured exception hierarchy for the SOON identity core.

Every error carries a machine-readable `code`, a human-readable `message` and
an `ErrorKind`. Domain services raise these exceptions; the Auth Facade catches
them at its boundary and converts them into typed results, so UI and HTTP code
only ever sees an `ErrorKind`.

The hierarchy is designed to:
- Provide clear, specific errors for different failure scenarios.
- Keep credential failures indistinguishable from one another.
- Map cleanly to HTTP status codes in the API layer.
"""

from enum import Enum
from typing import Dict, Final, Optional

__all__: Final = [
    "ErrorKind",
    "SoonError",
    "ValidationError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "DuplicateAccountError",
    "NoOpChangeError",
    "PasswordMismatchError",
    "RegistrationDisabledError",
    "IdentityProviderError",
    "ExchangeFailedError",
    "ProviderUnavailableError",
    "DatabaseError",
    "RequestTimeoutError",
    "INVALID_CREDENTIALS_MESSAGE",
]

# Shared by every credential failure so that responses never reveal whether an
# email is registered.
INVALID_CREDENTIALS_MESSAGE: Final = "Invalid email or password. Please try again."


class ErrorKind(str, Enum):
    """Closed set of error categories visible outside the Auth Facade."""

    INVALID_INPUT = "invalid_input"
    INVALID_CREDENTIALS = "invalid_credentials"
    DUPLICATE_ACCOUNT = "duplicate_account"
    NO_OP_CHANGE = "no_op_change"
    MISMATCH = "mismatch"
    REGISTRATION_DISABLED = "registration_disabled"
    EXCHANGE_FAILED = "exchange_failed"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    UNAUTHENTICATED = "unauthenticated"
    INTERNAL = "internal"
    TIMEOUT = "timeout"


class SoonError(Exception):
    """Base exception class for all custom errors in the identity core.

    Attributes:
        message (str): A human-readable error message, suitable for logging
                       and for display.
        code (str): A unique, machine-readable error code.
        kind (ErrorKind): The category reported across the facade boundary.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Validation errors (typically map to 400 Bad Request)
# ---------------------------------------------------------------------------


class ValidationError(SoonError):
    """Raised when input fails validation, before any side effect happens.

    Attributes:
        fields: Mapping of offending field name to its error message.
    """

    kind = ErrorKind.INVALID_INPUT

    def __init__(
        self,
        message: str,
        code: str = "validation_error",
        fields: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message, code)
        self.fields = fields or {}


class NoOpChangeError(ValidationError):
    """Raised when a password change would leave the password unchanged."""

    kind = ErrorKind.NO_OP_CHANGE

    def __init__(
        self,
        message: str = "New password must be different from the current password.",
        code: str = "no_op_change",
    ):
        super().__init__(message, code, fields={"new_password": message})


class PasswordMismatchError(ValidationError):
    """Raised when the confirmation does not match the new password."""

    kind = ErrorKind.MISMATCH

    def __init__(self, message: str = "New passwords do not match.", code: str = "password_mismatch"):
        super().__init__(message, code, fields={"confirm_password": message})


# ---------------------------------------------------------------------------
# Auth-related errors (typically map to 401 Unauthorized)
# ---------------------------------------------------------------------------


class AuthenticationError(SoonError):
    """Raised when a request carries no valid session."""

    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, message: str = "User not authenticated", code: str = "unauthenticated"):
        super().__init__(message, code)


class InvalidCredentialsError(AuthenticationError):
    """Raised when user-provided credentials are invalid.

    The message is always the same generic text, whatever the actual cause
    (unknown email, wrong password, deleted or password-less account).
    """

    kind = ErrorKind.INVALID_CREDENTIALS

    def __init__(self, message: str = INVALID_CREDENTIALS_MESSAGE, code: str = "invalid_credentials"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Account lifecycle errors
# ---------------------------------------------------------------------------


class DuplicateAccountError(SoonError):
    """Raised when a non-deleted account already owns the email.

    Maps to a `409 Conflict` HTTP status code.
    """

    kind = ErrorKind.DUPLICATE_ACCOUNT

    def __init__(
        self,
        message: str = "User with this email already exists",
        code: str = "duplicate_account",
    ):
        super().__init__(message, code)


class RegistrationDisabledError(SoonError):
    """Raised when new-account creation is refused by the registration policy."""

    kind = ErrorKind.REGISTRATION_DISABLED

    def __init__(
        self,
        message: str = (
            "New user registration is currently disabled. "
            "Please contact support if you need access."
        ),
        code: str = "registration_disabled",
    ):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Identity provider errors
# ---------------------------------------------------------------------------


class IdentityProviderError(SoonError):
    """Raised when the identity provider answers with a client error.

    Attributes:
        status_code: HTTP status returned by the provider, when known.
    """

    kind = ErrorKind.EXCHANGE_FAILED

    def __init__(
        self,
        message: str,
        code: str = "identity_provider_error",
        status_code: Optional[int] = None,
    ):
        super().__init__(message, code)
        self.status_code = status_code


class ExchangeFailedError(IdentityProviderError):
    """Raised when the provider refuses a userId/secret exchange.

    This includes replays of an already consumed secret.
    """

    def __init__(
        self,
        message: str = "OAuth session exchange failed",
        code: str = "exchange_failed",
        status_code: Optional[int] = None,
    ):
        super().__init__(message, code, status_code)


class ProviderUnavailableError(IdentityProviderError):
    """Raised when the provider cannot be reached or fails server-side."""

    kind = ErrorKind.PROVIDER_UNAVAILABLE

    def __init__(
        self,
        message: str = "Identity provider is unavailable",
        code: str = "provider_unavailable",
        status_code: Optional[int] = None,
    ):
        super().__init__(message, code, status_code)


# ---------------------------------------------------------------------------
# Operational errors
# ---------------------------------------------------------------------------


class DatabaseError(SoonError):
    """Raised for credential store failures that are not business-rule errors."""

    def __init__(self, message: str, code: str = "database_error"):
        super().__init__(message, code)


class RequestTimeoutError(SoonError):
    """Raised when an operation exceeds the request timeout and is abandoned."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, message: str = "The request timed out. Please try again.", code: str = "timeout"):
        super().__init__(message, code)
