"""Health check endpoints."""

from fastapi import APIRouter, status
from pydantic import BaseModel

from engage_dashboard.api.deps import AIProviderDep, StoreDep
from engage_dashboard.config import settings
from engage_dashboard.logging import get_logger

router = APIRouter(tags=["Health"])
logger = get_logger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    components: dict[str, bool] | None = None


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Basic health check endpoint that verifies the API is running.",
)
async def health_check(store: StoreDep, provider: AIProviderDep) -> HealthResponse:
    """Basic health check - is the API up?

    Reports whether demo data is loaded and the AI provider answers.
    """
    from engage_dashboard import __version__

    ai_ok = await provider.health_check()
    if not ai_ok:
        logger.warning("ai_provider_unhealthy", provider=settings.training_provider)

    return HealthResponse(
        status="healthy",
        version=__version__,
        components={
            "store": bool(store.users),
            "ai_provider": ai_ok,
        },
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
