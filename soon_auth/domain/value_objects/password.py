"""Password Value Objects for domain modeling.

Only the length policy is enforced: passwords are between
``PASSWORD_MIN_LENGTH`` and ``PASSWORD_MAX_LENGTH`` characters. Plain
passwords never leave this object except to be hashed or verified.
"""

from dataclasses import dataclass, field

from soon_auth.core.config.settings import settings
from soon_auth.utils.security import hash_password_async


@dataclass(frozen=True)
class Password:
    """Password value object that enforces the length policy on construction.

    Attributes:
        value: The raw password string (immutable, hidden from repr)

    Raises:
        ValueError: If the password is empty, too short or too long.
    """

    value: str = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value:
            raise ValueError("Password cannot be empty")
        if len(self.value) < settings.PASSWORD_MIN_LENGTH:
            raise ValueError(
                f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long"
            )
        if len(self.value) > settings.PASSWORD_MAX_LENGTH:
            raise ValueError(
                f"Password must not exceed {settings.PASSWORD_MAX_LENGTH} characters"
            )

    async def to_hashed(self) -> str:
        """Return a fresh salted bcrypt hash of this password."""
        return await hash_password_async(self.value)
