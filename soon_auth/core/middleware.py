"""Middleware configuration for the FastAPI application.

Registers CORS and a middleware that adds browser security headers to every
response and disables caching of the OAuth callback.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from soon_auth.core.config.settings import settings

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

NO_STORE_PATHS = ("/oauth", "/api/v1/auth")


def configure_middleware(app: FastAPI) -> None:
    """Configure all middleware for the FastAPI application.

    Args:
        app (FastAPI): The FastAPI application instance
    """
    # Credentials are required so that browsers send the session cookies.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(security_headers_middleware)


async def security_headers_middleware(request: Request, call_next):
    """Adds security headers; auth responses are never cached."""
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    if request.url.path.startswith(NO_STORE_PATHS):
        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
    return response
