"""Composition root for the identity core.

`build_auth_facade` wires repositories, services and backends into one
`AuthFacade`. The registration policy is read from settings here, once, and
passed into the services; nothing below this module reads it again.

FastAPI routes receive the facade through `get_auth_facade`, which returns the
instance the lifespan stored on ``app.state``. Tests replace it with
``app.dependency_overrides``.
"""

from datetime import timedelta
from typing import Annotated, Optional

from fastapi import Depends, Request

from soon_auth.core.config.settings import settings
from soon_auth.domain.interfaces.identity_provider import IIdentityProvider
from soon_auth.domain.services.auth.activity import ActivityLogger
from soon_auth.domain.services.auth.backends import FederatedSessionBackend, LocalSessionBackend
from soon_auth.domain.services.auth.facade import AuthFacade
from soon_auth.domain.services.auth.local import LocalAuthService
from soon_auth.domain.services.auth.oauth import OAuthFederationService
from soon_auth.domain.services.auth.session import SessionIssuer
from soon_auth.infrastructure.database.database import SessionFactory
from soon_auth.infrastructure.repositories.activity_log_repository import ActivityLogRepository
from soon_auth.infrastructure.repositories.user_repository import UserRepository
from soon_auth.infrastructure.services.identity_provider import ManagedIdentityProviderClient


def build_identity_provider() -> ManagedIdentityProviderClient:
    return ManagedIdentityProviderClient(
        endpoint=settings.IDENTITY_PROVIDER_ENDPOINT,
        project_id=settings.IDENTITY_PROVIDER_PROJECT_ID,
        api_key=settings.IDENTITY_PROVIDER_API_KEY.get_secret_value(),
        timeout=settings.IDENTITY_PROVIDER_TIMEOUT_SECONDS,
    )


def build_auth_facade(
    session_factory: SessionFactory,
    identity_provider: IIdentityProvider,
    registration_enabled: Optional[bool] = None,
) -> AuthFacade:
    """Wire the identity core.

    Args:
        session_factory: Shared async session factory.
        identity_provider: Client for the managed identity provider.
        registration_enabled: Overrides ``settings.REGISTRATION_ENABLED``.
    """
    if registration_enabled is None:
        registration_enabled = settings.REGISTRATION_ENABLED

    user_repository = UserRepository(session_factory)
    activity_logger = ActivityLogger(
        ActivityLogRepository(session_factory), ip_sentinel=settings.ACTIVITY_IP_SENTINEL
    )
    session_issuer = SessionIssuer(session_factory, ttl=timedelta(days=settings.SESSION_TTL_DAYS))

    local_service = LocalAuthService(
        user_repository,
        session_issuer,
        activity_logger,
        registration_enabled=registration_enabled,
    )
    oauth_service = OAuthFederationService(
        identity_provider,
        user_repository,
        activity_logger,
        registration_enabled=registration_enabled,
        registration_window=timedelta(minutes=settings.REGISTRATION_WINDOW_MINUTES),
        cookie_name=settings.FEDERATED_SESSION_COOKIE_NAME,
        cookie_max_age=settings.session_cookie_max_age,
    )

    return AuthFacade(
        local_service=local_service,
        oauth_service=oauth_service,
        activity_logger=activity_logger,
        local_backend=LocalSessionBackend(
            session_issuer, local_service, cookie_name=settings.SESSION_COOKIE_NAME
        ),
        federated_backend=FederatedSessionBackend(
            identity_provider,
            user_repository,
            oauth_service,
            cookie_name=settings.FEDERATED_SESSION_COOKIE_NAME,
        ),
        cookie_max_age=settings.session_cookie_max_age,
        request_timeout=settings.REQUEST_TIMEOUT_SECONDS,
    )


def get_auth_facade(request: Request) -> AuthFacade:
    return request.app.state.auth_facade


AuthFacadeDep = Annotated[AuthFacade, Depends(get_auth_facade)]
