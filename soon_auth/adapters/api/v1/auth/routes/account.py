"""Account update and deletion routes."""

from fastapi import APIRouter, Request, Response, status

from soon_auth.adapters.api.v1.auth.schemas import (
    DeleteAccountRequest,
    ErrorResponse,
    MessageResponse,
    UpdateAccountRequest,
    UserResponse,
)
from soon_auth.adapters.api.v1.auth.utils import (
    ResponseCookieTransport,
    client_ip,
    error_response,
    request_credential,
)
from soon_auth.infrastructure.dependency_injection.auth_dependencies import AuthFacadeDep

router = APIRouter()


@router.patch(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Update name and email",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid name or email"},
        401: {"model": ErrorResponse, "description": "Not signed in"},
        409: {"model": ErrorResponse, "description": "Email belongs to another account"},
    },
)
async def update_account(
    request: Request, payload: UpdateAccountRequest, facade: AuthFacadeDep
):
    result = await facade.update_account(
        request_credential(request, facade), payload.name, payload.email, client_ip(request)
    )
    if not result.success:
        return error_response(result)
    return UserResponse.from_profile(result.data)


@router.delete(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete the current account",
    description=(
        "Soft-deletes the account: the record is kept for support-assisted "
        "recovery, every session is revoked and the session cookie is cleared."
    ),
    responses={401: {"model": ErrorResponse, "description": "Not signed in or wrong password"}},
)
async def delete_account(
    request: Request, payload: DeleteAccountRequest, response: Response, facade: AuthFacadeDep
):
    cookies = ResponseCookieTransport()
    result = await facade.delete_account(
        request_credential(request, facade), payload.password, cookies, client_ip(request)
    )
    if not result.success:
        return error_response(result, cookies)
    cookies.apply_to(response)
    return MessageResponse(message=result.message)
