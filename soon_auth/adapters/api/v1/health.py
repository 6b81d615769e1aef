"""Liveness and database health."""

from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from soon_auth.core.config.settings import settings
from soon_auth.infrastructure.database.database import check_database_health

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    version: str
    services: Dict[str, str]
    timestamp: datetime


@router.get("", response_model=HealthResponse)
async def health_check(request: Request):
    """Reports ``ok`` when the credential store answers, ``degraded`` (503) otherwise."""
    db_healthy = await check_database_health(request.app.state.db_engine)
    body = HealthResponse(
        status="ok" if db_healthy else "degraded",
        env=settings.APP_ENV,
        version=settings.VERSION,
        services={"database": "healthy" if db_healthy else "unhealthy"},
        timestamp=datetime.now(timezone.utc),
    )
    if not db_healthy:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump(mode="json")
        )
    return body
