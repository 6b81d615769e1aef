"""Password change route."""

from fastapi import APIRouter, Request, status

from soon_auth.adapters.api.v1.auth.schemas import (
    ErrorResponse,
    MessageResponse,
    UpdatePasswordRequest,
)
from soon_auth.adapters.api.v1.auth.utils import client_ip, error_response, request_credential
from soon_auth.infrastructure.dependency_injection.auth_dependencies import AuthFacadeDep

router = APIRouter()


@router.put(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Change the current user's password",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid, unchanged or mismatched password"},
        401: {"model": ErrorResponse, "description": "Not signed in or wrong current password"},
    },
)
async def update_password(
    request: Request, payload: UpdatePasswordRequest, facade: AuthFacadeDep
):
    result = await facade.update_password(
        request_credential(request, facade),
        payload.current_password,
        payload.new_password,
        payload.confirm_password,
        client_ip(request),
    )
    if not result.success:
        return error_response(result)
    return MessageResponse(message=result.message)
