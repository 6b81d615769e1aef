"""Local sign-in route."""

from fastapi import APIRouter, Request, Response, status

from soon_auth.adapters.api.v1.auth.schemas import ErrorResponse, SignInRequest, UserResponse
from soon_auth.adapters.api.v1.auth.utils import ResponseCookieTransport, client_ip, error_response
from soon_auth.infrastructure.dependency_injection.auth_dependencies import AuthFacadeDep

router = APIRouter()


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign in with email and password",
    responses={401: {"model": ErrorResponse, "description": "Invalid email or password"}},
)
async def sign_in(
    request: Request, payload: SignInRequest, response: Response, facade: AuthFacadeDep
):
    cookies = ResponseCookieTransport()
    result = await facade.sign_in(payload.email, payload.password, cookies, client_ip(request))
    if not result.success:
        return error_response(result, cookies)
    cookies.apply_to(response)
    return UserResponse.from_profile(result.data)
