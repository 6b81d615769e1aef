"""
Global exception handlers for the FastAPI application.

Auth routes render facade results themselves, so these handlers only see
errors raised outside the facade: request validation failures, a `SoonError`
escaping a route, and anything unexpected. Every error body has the same
shape: ``{"error": <ErrorKind>, "message": str, "fields": {...}}``.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from soon_auth.core.exceptions import ErrorKind, SoonError

__all__ = [
    "STATUS_BY_ERROR",
    "error_body",
    "soon_error_handler",
    "request_validation_error_handler",
    "unhandled_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)

STATUS_BY_ERROR = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NO_OP_CHANGE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.MISMATCH: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.REGISTRATION_DISABLED: status.HTTP_403_FORBIDDEN,
    ErrorKind.DUPLICATE_ACCOUNT: status.HTTP_409_CONFLICT,
    ErrorKind.EXCHANGE_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.PROVIDER_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_body(kind: ErrorKind, message: str, fields=None) -> dict:
    return {"error": kind.value, "message": message, "fields": fields or {}}


async def soon_error_handler(request: Request, exc: SoonError) -> JSONResponse:
    """Handles any `SoonError` that escaped a route.

    Args:
        request: The incoming `Request` object.
        exc: The `SoonError` instance.

    Returns:
        A `JSONResponse` with the status code of the error's kind.
    """
    logger.warning("Unhandled application error", error=exc.code, path=request.url.path)
    return JSONResponse(
        status_code=STATUS_BY_ERROR.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content=error_body(exc.kind, exc.message, getattr(exc, "fields", None)),
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reports malformed payloads as ``invalid_input`` with per-field messages."""
    fields = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query")]
        fields[".".join(location) or "body"] = error.get("msg", "Invalid value")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(ErrorKind.INVALID_INPUT, "Invalid request.", fields),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(ErrorKind.INTERNAL, "Something went wrong. Please try again later."),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app (FastAPI): The FastAPI application instance
    """
    app.add_exception_handler(SoonError, soon_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
