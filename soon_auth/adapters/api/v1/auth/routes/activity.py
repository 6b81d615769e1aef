"""Activity log listing for the signed-in user."""

from fastapi import APIRouter, Query, Request

from soon_auth.adapters.api.v1.auth.schemas import (
    ActivityEntryResponse,
    ActivityListResponse,
    ErrorResponse,
)
from soon_auth.adapters.api.v1.auth.utils import error_response, request_credential
from soon_auth.infrastructure.dependency_injection.auth_dependencies import AuthFacadeDep

router = APIRouter()


@router.get(
    "",
    response_model=ActivityListResponse,
    summary="List recent account activity, newest first",
    responses={401: {"model": ErrorResponse, "description": "Not signed in"}},
)
async def list_activity(
    request: Request, facade: AuthFacadeDep, limit: int = Query(default=10, ge=1, le=100)
):
    result = await facade.list_activity(request_credential(request, facade), limit)
    if not result.success:
        return error_response(result)
    return ActivityListResponse(items=[ActivityEntryResponse.from_entity(e) for e in result.data])
