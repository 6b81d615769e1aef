"""Domain Value Objects for the identity core.

Value objects are immutable objects that describe domain concepts by their
attributes rather than their identity.
"""

from .email import Email, mask_email
from .password import Password
from .provider import OAuthProvider, ProviderSession, ProviderUser
from .session_credential import (
    FederatedSessionCredential,
    LocalSessionCredential,
    Principal,
    SessionCredential,
)
from .user_profile import UserProfile

__all__ = [
    "Email",
    "mask_email",
    "Password",
    "OAuthProvider",
    "ProviderSession",
    "ProviderUser",
    "FederatedSessionCredential",
    "LocalSessionCredential",
    "Principal",
    "SessionCredential",
    "UserProfile",
]
