"""Health check endpoint for load balancers and uptime monitors."""

from __future__ import annotations

from fastapi import APIRouter

from app.api.v1.deps import AppSettings, Posts
from app.core.logging import get_logger
from app.schemas.schemas import HealthResponse

router = APIRouter(tags=["health"])
logger = get_logger(__name__)


@router.get("/healthz/", response_model=HealthResponse)
@router.get("/healthz", response_model=HealthResponse, include_in_schema=False)
async def health_check(settings: AppSettings, repository: Posts) -> HealthResponse:
    try:
        await repository.ping()
        database = "connected"
    except Exception as e:
        logger.warning("health_database_unreachable", error=str(e))
        database = "unreachable"
    return HealthResponse(
        status="healthy" if database == "connected" else "degraded",
        environment=settings.app_env,
        database=database,
    )
