"""Shared helpers for the authentication routes.

- `ResponseCookieTransport` collects the cookie writes the facade requests and
  applies them to whichever response the route ends up returning.
- `error_response` renders a failed `AuthResult` with the status code of its
  error kind.
- `client_ip` and `redirect_origin` extract request context.
"""

from typing import List, Optional, Tuple

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from soon_auth.core.config.settings import settings
from soon_auth.core.exceptions import ErrorKind
from soon_auth.core.handlers import STATUS_BY_ERROR, error_body
from soon_auth.domain.interfaces.cookies import ISessionCookieTransport
from soon_auth.domain.services.auth.facade import AuthFacade, AuthResult
from soon_auth.domain.value_objects.session_credential import SessionCredential


class ResponseCookieTransport(ISessionCookieTransport):
    """Records cookie operations until the response object is known.

    Cookies are always HTTP-only, ``SameSite=strict`` and scoped to ``/``;
    ``Secure`` is set in production.
    """

    def __init__(self, secure: Optional[bool] = None):
        self._secure = settings.is_production if secure is None else secure
        self._operations: List[Tuple[str, str, Optional[str], int]] = []

    def set(self, name: str, value: str, max_age: int) -> None:
        self._operations.append(("set", name, value, max_age))

    def clear(self, name: str) -> None:
        self._operations.append(("clear", name, None, 0))

    def apply_to(self, response: Response) -> Response:
        for operation, name, value, max_age in self._operations:
            if operation == "set":
                response.set_cookie(
                    key=name,
                    value=value,
                    max_age=max_age,
                    path="/",
                    httponly=True,
                    samesite="strict",
                    secure=self._secure,
                )
            else:
                response.delete_cookie(
                    key=name, path="/", httponly=True, samesite="strict", secure=self._secure
                )
        return response


def error_response(
    result: AuthResult, cookies: Optional[ResponseCookieTransport] = None
) -> JSONResponse:
    error = result.error or ErrorKind.INTERNAL
    response = JSONResponse(
        status_code=STATUS_BY_ERROR[error],
        content=error_body(error, result.message or "", result.fields),
    )
    if cookies is not None:
        cookies.apply_to(response)
    return response


def client_ip(request: Request) -> Optional[str]:
    """First ``X-Forwarded-For`` hop, then ``X-Real-IP``, then the peer address."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else None


def redirect_origin(request: Request) -> str:
    """Origin used for OAuth redirects; ``PUBLIC_BASE_URL`` wins when configured."""
    if settings.PUBLIC_BASE_URL:
        return settings.PUBLIC_BASE_URL.rstrip("/")
    return f"{request.url.scheme}://{request.url.netloc}"


def request_credential(request: Request, facade: AuthFacade) -> Optional[SessionCredential]:
    return facade.read_credential(request.cookies)
