"""OAuth routes: starting the provider flow and the provider's callback.

The callback is mounted at ``/oauth`` on the application root because the
identity provider redirects the browser to ``{origin}/oauth``. It only ever
answers with a redirect, to the completion page or to an error state.
"""

from typing import Optional

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import RedirectResponse

from soon_auth.adapters.api.v1.auth.schemas import ErrorResponse
from soon_auth.adapters.api.v1.auth.utils import (
    ResponseCookieTransport,
    client_ip,
    error_response,
    redirect_origin,
)
from soon_auth.infrastructure.dependency_injection.auth_dependencies import AuthFacadeDep

router = APIRouter()
callback_router = APIRouter()


@router.get(
    "/{provider}",
    status_code=status.HTTP_302_FOUND,
    summary="Redirect to the OAuth provider",
    responses={400: {"model": ErrorResponse, "description": "Unsupported provider or flow"}},
)
async def start_oauth(
    provider: str,
    request: Request,
    facade: AuthFacadeDep,
    flow: str = Query(default="sign-in"),
):
    result = facade.authorization_url(provider, redirect_origin(request), flow)
    if not result.success:
        return error_response(result)
    return RedirectResponse(result.data, status_code=status.HTTP_302_FOUND)


@callback_router.get(
    "/oauth",
    status_code=status.HTTP_302_FOUND,
    summary="OAuth callback from the identity provider",
    include_in_schema=False,
)
async def oauth_callback(
    request: Request,
    facade: AuthFacadeDep,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    secret: Optional[str] = Query(default=None),
) -> RedirectResponse:
    cookies = ResponseCookieTransport()
    target = await facade.handle_oauth_callback(
        user_id,
        secret,
        request.headers.get("referer"),
        redirect_origin(request),
        cookies,
        client_ip(request),
    )
    response = RedirectResponse(target, status_code=status.HTTP_302_FOUND)
    response.headers["Cache-Control"] = "no-store"
    return cookies.apply_to(response)
