"""Liveness endpoint: database reachability and token signing readiness."""

from typing import Literal

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from app.api.deps import get_token_codec
from app.core import check_db_connection, settings
from app.services.errors import ConfigError

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: Literal["healthy", "unhealthy"]
    version: str
    database: Literal["connected", "disconnected"]
    token_signing: Literal["configured", "missing"]


def _signing_configured() -> bool:
    try:
        get_token_codec()
    except ConfigError:
        return False
    return True


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        status.HTTP_503_SERVICE_UNAVAILABLE: {
            "description": "Database unreachable or no JWT signing secret",
            "model": HealthResponse,
        },
    },
)
async def health_check(response: Response) -> HealthResponse:
    """Report whether the service can serve authenticated traffic.

    Both checks must pass for a 200; otherwise the body is still returned
    with a 503 so orchestrators and humans see which one failed.
    """
    db_ok = await check_db_connection()
    signing_ok = _signing_configured()
    healthy = db_ok and signing_ok

    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=settings.app_version,
        database="connected" if db_ok else "disconnected",
        token_signing="configured" if signing_ok else "missing",
    )
