"""Authentication domain services."""

from .activity import ActivityLogger, run_with_audit
from .backends import FederatedSessionBackend, LocalSessionBackend
from .facade import AuthFacade, AuthResult
from .local import LocalAuthService
from .oauth import OAuthFederationService
from .session import SessionIssuer

__all__ = [
    "ActivityLogger",
    "run_with_audit",
    "FederatedSessionBackend",
    "LocalSessionBackend",
    "AuthFacade",
    "AuthResult",
    "LocalAuthService",
    "OAuthFederationService",
    "SessionIssuer",
]
