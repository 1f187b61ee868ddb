"""
Health check endpoints.

Provides service status for monitoring and load balancers.
"""

from fastapi import APIRouter

from etims_worker import __version__
from etims_worker.api.schemas import HealthResponse, ServiceInfoResponse
from etims_worker.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/", response_model=ServiceInfoResponse)
async def service_info() -> ServiceInfoResponse:
    return ServiceInfoResponse(version=__version__)


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Check service health.

    Reports the configured KRA endpoint and artifact directory; no call
    is made to KRA.
    """
    settings = get_settings()

    return HealthResponse(
        status="healthy",
        version=__version__,
        kra_base_url=settings.normalized_base_url,
        output_directory=str(settings.output_directory),
    )
