from .identity_provider import ManagedIdentityProviderClient

__all__ = ["ManagedIdentityProviderClient"]
