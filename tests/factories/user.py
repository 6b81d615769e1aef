"""Factory for generating fake user data for testing."""

from datetime import datetime
from typing import Optional

from faker import Faker

from soon_auth.domain.entities.user import User
from soon_auth.utils.clock import utcnow

fake = Faker()


def fake_email() -> str:
    # Faker's address pool is small enough to collide within one test run.
    return f"{fake.user_name()}.{fake.unique.random_int(min=1, max=10_000_000)}@example.com"


def fake_password() -> str:
    return fake.password(length=12, special_chars=True, digits=True, upper_case=True, lower_case=True)


def create_fake_user(
    email: Optional[str] = None,
    name: Optional[str] = None,
    hashed_password: Optional[str] = None,
    provider_user_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> User:
    """Create an unsaved User entity.

    Args:
        email: Defaults to a unique fake address.
        name: Defaults to a fake name.
        hashed_password: Left empty for federated users.
        provider_user_id: Id of a linked provider account.
        created_at: Defaults to now.
    """
    return User(
        email=email if email is not None else fake_email(),
        name=name if name is not None else fake.name(),
        hashed_password=hashed_password,
        provider_user_id=provider_user_id,
        created_at=created_at if created_at is not None else utcnow(),
    )
