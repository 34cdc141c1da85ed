"""Health check endpoint."""

from fastapi import APIRouter, Depends

from src.api.config import get_api_settings
from src.api.dependencies import get_ab_testing_system
from src.api.schemas.health import HealthResponse
from src.experimentation.ab_testing import ABTestingSystem

router = APIRouter(tags=["health"])
api_settings = get_api_settings()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    ab_testing: ABTestingSystem = Depends(get_ab_testing_system),
) -> HealthResponse:
    """Health check endpoint.

    Returns service status and registry size. The service is degraded
    when no experiments are registered.
    """
    experiments = ab_testing.get_all_tests()

    return HealthResponse(
        status="healthy" if experiments else "degraded",
        experiments_registered=len(experiments),
        experiments_active=sum(1 for e in experiments if e.is_active),
        version=api_settings.api_version,
    )
