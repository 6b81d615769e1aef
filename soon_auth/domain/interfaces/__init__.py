"""Domain ports implemented by the infrastructure and adapter layers."""

from .cookies import ISessionCookieTransport
from .identity_provider import IIdentityProvider
from .repositories import IActivityLogRepository, IUserRepository
from .session_backend import ISessionBackend

__all__ = [
    "ISessionCookieTransport",
    "IIdentityProvider",
    "IActivityLogRepository",
    "IUserRepository",
    "ISessionBackend",
]
