"""Current user route, used by the UI to gate protected pages."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from soon_auth.adapters.api.v1.auth.schemas import ErrorResponse, UserResponse
from soon_auth.adapters.api.v1.auth.utils import request_credential
from soon_auth.core.exceptions import AuthenticationError, ErrorKind
from soon_auth.core.handlers import error_body
from soon_auth.infrastructure.dependency_injection.auth_dependencies import AuthFacadeDep

router = APIRouter()


@router.get(
    "",
    response_model=UserResponse,
    summary="Return the signed-in user",
    responses={401: {"model": ErrorResponse, "description": "Not signed in"}},
)
async def current_user(request: Request, facade: AuthFacadeDep):
    profile = await facade.get_current_user(request_credential(request, facade))
    if profile is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=error_body(ErrorKind.UNAUTHENTICATED, AuthenticationError().message),
        )
    return UserResponse.from_profile(profile)
