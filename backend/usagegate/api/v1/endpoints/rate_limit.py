"""Rate-limit query endpoints.

Both endpoints answer from the in-memory snapshot and never call the
external sources. Misses are reported as the unknown decision, not as 404.
"""

from fastapi import APIRouter

from usagegate.api.deps import Inject
from usagegate.domains.rate_limit.protocols import RateLimitServiceProtocol
from usagegate.schemas.rate_limit import (
    RateLimitCheckRequest,
    RateLimitDecisionResponse,
    RetentionResponse,
)

router = APIRouter()


@router.post("/check", response_model=RateLimitDecisionResponse)
async def check_rate_limit(
    request: RateLimitCheckRequest,
    service: RateLimitServiceProtocol = Inject(RateLimitServiceProtocol),
) -> RateLimitDecisionResponse:
    """Return the cached decision for an organization or a target."""
    decision = service.check_limit(request.id, request.entity_type, request.type)
    return RateLimitDecisionResponse.from_decision(decision)


@router.get("/retention/{target_id}", response_model=RetentionResponse)
async def get_retention(
    target_id: str,
    service: RateLimitServiceProtocol = Inject(RateLimitServiceProtocol),
) -> RetentionResponse:
    """Return the data retention of the target's organization in days."""
    return RetentionResponse(retention_in_days=service.get_retention(target_id))
