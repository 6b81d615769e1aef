"""Repository interfaces for abstracting data persistence in the domain layer.

These abstract base classes are the "ports" the domain services depend on. The
SQLModel implementations live in ``soon_auth.infrastructure.repositories``.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from soon_auth.domain.entities.activity_log import ActivityLogEntry
from soon_auth.domain.entities.user import User


class IUserRepository(ABC):
    """An interface defining the contract for the credential store.

    Emails passed in are expected to be normalized already (see `Email`).
    """

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Retrieves a user by id, including soft-deleted users."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Retrieves the non-deleted user owning an email.

        Args:
            email: The normalized email address to search for.

        Returns:
            An optional `User` entity. Soft-deleted users are never returned.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_by_provider_user_id(self, provider_user_id: str) -> Optional[User]:
        """Retrieves the user linked to a provider account, deleted or not."""
        raise NotImplementedError

    @abstractmethod
    async def insert(self, user: User) -> User:
        """Persists a new user.

        Raises:
            DuplicateAccountError: If a non-deleted user already owns the email,
                including when a concurrent insert won the race.
        """
        raise NotImplementedError

    @abstractmethod
    async def update(self, user_id: int, **fields: Any) -> User:
        """Updates the given columns of a user and returns the fresh row.

        Raises:
            DuplicateAccountError: If the new email belongs to another live user.
            DatabaseError: If the user does not exist.
        """
        raise NotImplementedError

    @abstractmethod
    async def soft_delete(self, user_id: int) -> None:
        """Sets ``deleted_at``. The row itself is kept."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, user_id: int) -> None:
        """Removes a never-used user together with its session and activity rows.

        Only for rolling back a sign-up that failed halfway. Accounts that
        were used are soft-deleted instead.
        """
        raise NotImplementedError


class IActivityLogRepository(ABC):
    """Append-only storage for activity log entries."""

    @abstractmethod
    async def append(self, entry: ActivityLogEntry) -> None:
        raise NotImplementedError

    @abstractmethod
    async def list_for_user(self, user_id: int, limit: int = 10) -> List[ActivityLogEntry]:
        """Returns the user's newest entries first."""
        raise NotImplementedError
