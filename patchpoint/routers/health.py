"""Health check router."""

from fastapi import APIRouter
from datetime import datetime, timezone
from patchpoint import __version__
from patchpoint.schemas.health import HealthResponse, ServiceStatus
from patchpoint.dependencies import CloudinaryClientDep, ReportRepoDep
from patchpoint.config import get_settings
from patchpoint.utils.logger import get_logger

router = APIRouter()
log = get_logger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health_check(
    report_repo: ReportRepoDep,
    image_host: CloudinaryClientDep,
) -> HealthResponse:
    """
    Health check for the store and external service configuration.

    Checks:
    - Database connectivity and report count
    - Reverse geocoder configuration
    - Image host credentials

    Returns:
        HealthResponse with status and service details
    """
    services = {}
    overall_status = "ok"
    settings = get_settings()

    # Check database
    try:
        reports_count = await report_repo.count()
        services["database"] = ServiceStatus(
            status="healthy",
            message="Connected",
            details={"reports_count": reports_count},
        )
    except Exception as e:
        log.error("health check failed", service="database", error=str(e))
        services["database"] = ServiceStatus(status="unhealthy", message="Service unavailable")
        overall_status = "degraded"

    # Geocoder needs an endpoint and an identifying User-Agent
    if settings.nominatim_url and settings.nominatim_user_agent:
        services["geocoder"] = ServiceStatus(
            status="healthy",
            message="Reverse geocoder configured",
            details={"url": settings.nominatim_url},
        )
    else:
        log.error("health check failed", service="geocoder", error="not configured")
        services["geocoder"] = ServiceStatus(status="unhealthy", message="Not configured")
        overall_status = "degraded"

    # Check image host
    if image_host.configured:
        services["image_host"] = ServiceStatus(status="healthy", message="Credentials configured")
    else:
        log.error("health check failed", service="image_host", error="missing credentials")
        services["image_host"] = ServiceStatus(status="unhealthy", message="Not configured")
        overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        version=__version__,
        services=services,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
