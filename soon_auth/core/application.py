"""Application factory for creating and configuring the FastAPI application.

This module provides a factory function to create a properly configured FastAPI application
with all necessary middleware, exception handlers, and routers registered.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from soon_auth.adapters.api.v1 import api_router, oauth_callback_router
from soon_auth.core.config.settings import settings
from soon_auth.core.handlers import register_exception_handlers
from soon_auth.core.lifecycle import create_lifespan_manager
from soon_auth.core.middleware import configure_middleware


def create_application(engine: Optional[AsyncEngine] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        engine: Optional database engine, forwarded to the lifespan manager.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Identity and session lifecycle core of the SOON video platform.",
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None,
        openapi_url=None if settings.is_production else "/openapi.json",
        lifespan=create_lifespan_manager(engine),
        default_response_class=JSONResponse,
    )

    configure_middleware(app)
    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api/v1")
    # The identity provider redirects browsers to {origin}/oauth.
    app.include_router(oauth_callback_router, tags=["oauth"])

    return app
