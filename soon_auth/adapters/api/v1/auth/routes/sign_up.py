"""Local sign-up route."""

from fastapi import APIRouter, Request, Response, status

from soon_auth.adapters.api.v1.auth.schemas import ErrorResponse, SignUpRequest, UserResponse
from soon_auth.adapters.api.v1.auth.utils import ResponseCookieTransport, client_ip, error_response
from soon_auth.infrastructure.dependency_injection.auth_dependencies import AuthFacadeDep

router = APIRouter()


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a local account",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid email, password or name"},
        403: {"model": ErrorResponse, "description": "Registration is disabled"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def sign_up(
    request: Request, payload: SignUpRequest, response: Response, facade: AuthFacadeDep
):
    """Creates the account, signs it in and sets the session cookie."""
    cookies = ResponseCookieTransport()
    result = await facade.sign_up(
        payload.email, payload.password, payload.name, cookies, client_ip(request)
    )
    if not result.success:
        return error_response(result, cookies)
    cookies.apply_to(response)
    return UserResponse.from_profile(result.data)
