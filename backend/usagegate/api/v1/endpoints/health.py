"""Health check endpoints."""

from fastapi import APIRouter, Response

from usagegate.api.deps import Inject
from usagegate.domains.rate_limit.protocols import RateLimitServiceProtocol
from usagegate.schemas.health import LivenessResponse, ReadinessResponse

router = APIRouter()


@router.get("/live")
async def liveness() -> LivenessResponse:
    """Liveness probe. Confirms the process is running."""
    return LivenessResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ReadinessResponse}},
)
async def readiness(
    response: Response,
    service: RateLimitServiceProtocol = Inject(RateLimitServiceProtocol),
) -> ReadinessResponse:
    """Readiness probe: ready once the first refresh was attempted and until shutdown."""
    if not service.readiness():
        response.status_code = 503
        return ReadinessResponse(status="not_ready")
    return ReadinessResponse(status="ready")
