"""Authentication, session and registration policy settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class AuthSettings(BaseSettings):
    """Defines settings for local authentication, session cookies and the
    registration policy.

    ``REGISTRATION_ENABLED`` is read once at startup and handed to the services
    that need it. It is never consulted from deep inside request handling.

    Security Note:
        - Session cookies are always HTTP-only with ``SameSite=strict``; the
          ``Secure`` flag follows ``APP_ENV == "production"``.
        - BCRYPT_WORK_FACTOR below 10 is only acceptable in test suites.
    """

    REGISTRATION_ENABLED: bool = True

    SESSION_COOKIE_NAME: str = "soon-session"
    FEDERATED_SESSION_COOKIE_NAME: str = "soon-federated-session"
    SESSION_TTL_DAYS: int = Field(ge=1, default=30)

    PASSWORD_MIN_LENGTH: int = Field(ge=1, default=8)
    PASSWORD_MAX_LENGTH: int = Field(ge=8, default=100)
    BCRYPT_WORK_FACTOR: int = Field(ge=4, le=31, default=12)

    # Recorded on activity log entries when the client address is unknown.
    ACTIVITY_IP_SENTINEL: str = "0.0.0.0"

    # An OAuth login whose provider account is younger than this, measured
    # against the exchanged session, counts as a new registration.
    REGISTRATION_WINDOW_MINUTES: int = Field(ge=1, default=5)

    @property
    def session_cookie_max_age(self) -> int:
        return self.SESSION_TTL_DAYS * 24 * 60 * 60
