"""Session credentials and the authenticated principal.

A request carries at most one credential. Its origin (a local session token or
a federated provider session secret) decides which backend resolves it, and
that decision is taken once, at the Auth Facade.
"""

from dataclasses import dataclass, field
from typing import Union

from soon_auth.domain.entities.user import User


@dataclass(frozen=True)
class LocalSessionCredential:
    """Opaque token issued by the local Session Issuer."""

    token: str = field(repr=False)


@dataclass(frozen=True)
class FederatedSessionCredential:
    """Session secret issued by the managed identity provider."""

    secret: str = field(repr=False)


SessionCredential = Union[LocalSessionCredential, FederatedSessionCredential]


@dataclass(frozen=True)
class Principal:
    """An authenticated user together with the credential that proved it."""

    user: User
    credential: SessionCredential

    @property
    def user_id(self) -> int:
        return self.user.id
