"""
Health check endpoint.

Used by:
  - Docker HEALTHCHECK instruction
  - Load balancers / orchestrators
  - Post-deploy smoke checks

Liveness only: the service holds no external connections, so if the
process answers, it's healthy. Provider reachability is not checked.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from devflow_api import __version__
from devflow_api.core.admission import get_settings
from devflow_api.core.config import Settings

router = APIRouter()


class HealthResponse(BaseModel):
    status: str  # Always "ok" if the API process is alive
    version: str
    environment: str
    timestamp: str  # ISO-8601, UTC


@router.get("", response_model=HealthResponse, summary="API health check")
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
