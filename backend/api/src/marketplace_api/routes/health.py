"""Health check endpoint."""

from fastapi import APIRouter

from marketplace import __version__
from marketplace.config import get_settings
from marketplace_api.models.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    summary="Service health",
    response_model=HealthResponse,
)
async def health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        environment=get_settings().environment,
        version=__version__,
    )
