"""Health check endpoints."""

from fastapi import APIRouter, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from contentforge import __version__
from contentforge.api.deps import ProvidersDep
from contentforge.db.session import check_connection
from contentforge.logging import get_logger

router = APIRouter(tags=["Health"])
logger = get_logger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    providers: dict[str, str] | None = None


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool
    database: bool
    components: dict[str, bool] | None = None


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Basic health check endpoint that verifies the API is running.",
)
async def health_check(providers: ProvidersDep) -> HealthResponse:
    """Basic health check - is the API up?

    Lists which provider implementation serves each modality.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        providers={
            "text": providers.text.name,
            "image": providers.image.name,
            "voice": providers.voice.name,
            "video": providers.video.name,
            "avatar": providers.avatar.name,
        },
    )


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Verifies the database and reports which providers have usable credentials.",
)
async def readiness_check(providers: ProvidersDep) -> ReadinessResponse:
    database_ok = False
    try:
        check_connection()
        database_ok = True
    except SQLAlchemyError as e:
        logger.error("database_health_check_failed", error=str(e))

    components = await providers.health_check()

    return ReadinessResponse(
        ready=database_ok,
        database=database_ok,
        components=components,
    )


@router.get(
    "/health/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
    description="Simple liveness probe for Kubernetes.",
)
async def liveness_check() -> dict[str, str]:
    """Kubernetes liveness probe - is the process alive?"""
    return {"status": "alive"}
