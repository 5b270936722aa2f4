"""
Health check endpoints.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from proofreel import __version__
from proofreel.config import AppConfig

from ..schemas import HealthResponse
from ..dependencies import check_database_connection, get_app_config

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health Check",
    description="Check API status and whether the external services are configured.",
)
async def health_check(config: AppConfig = Depends(get_app_config)) -> HealthResponse:
    """
    Health check endpoint.
    Reports configuration only; no external service is called.
    """
    elevenlabs_ok = config.elevenlabs.has_api_key
    video_ok = config.video.has_api_key

    return HealthResponse(
        status="healthy" if (elevenlabs_ok and video_ok) else "degraded",
        service="proofreel",
        version=__version__,
        elevenlabs_configured=elevenlabs_ok,
        video_configured=video_ok,
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/health/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness Probe",
)
async def liveness() -> dict:
    """Liveness probe - always returns OK if app is running."""
    return {"status": "alive"}


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness Probe",
)
async def readiness() -> dict:
    """Readiness probe - checks the database is reachable."""
    if not check_database_connection():
        return {"status": "not_ready", "reason": "Database unavailable"}

    return {"status": "ready"}
