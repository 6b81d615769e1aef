"""Application lifecycle management.

Startup builds the database engine, the identity provider client and the Auth
Facade, and stores them on ``app.state``. Shutdown closes what startup opened.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from soon_auth.core.config.settings import settings
from soon_auth.core.logging import logger
from soon_auth.infrastructure.database.database import (
    create_db_and_tables,
    create_engine,
    create_session_factory,
)
from soon_auth.infrastructure.dependency_injection.auth_dependencies import (
    build_auth_facade,
    build_identity_provider,
)


def create_lifespan_manager(engine: Optional[AsyncEngine] = None):
    """Create the application lifespan manager.

    Args:
        engine: Use this engine instead of building one from settings. An
            injected engine is left open on shutdown.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        db_engine = engine or create_engine()
        if settings.DATABASE_AUTO_CREATE:
            await create_db_and_tables(db_engine)

        identity_provider = build_identity_provider()
        app.state.db_engine = db_engine
        app.state.auth_facade = build_auth_facade(
            create_session_factory(db_engine), identity_provider
        )
        logger.info(
            "application_startup",
            env=settings.APP_ENV,
            version=settings.VERSION,
            registration_enabled=settings.REGISTRATION_ENABLED,
        )

        yield

        # Shutdown
        await identity_provider.aclose()
        if engine is None:
            await db_engine.dispose()
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
