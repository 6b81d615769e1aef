"""Sign-out route. Always succeeds and clears both session cookies."""

from fastapi import APIRouter, Request, Response, status

from soon_auth.adapters.api.v1.auth.schemas import MessageResponse
from soon_auth.adapters.api.v1.auth.utils import (
    ResponseCookieTransport,
    client_ip,
    request_credential,
)
from soon_auth.infrastructure.dependency_injection.auth_dependencies import AuthFacadeDep

router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign out the current session",
)
async def sign_out(request: Request, response: Response, facade: AuthFacadeDep) -> MessageResponse:
    cookies = ResponseCookieTransport()
    result = await facade.sign_out(
        request_credential(request, facade), cookies, client_ip(request)
    )
    cookies.apply_to(response)
    return MessageResponse(message=result.message or "Signed out.")
