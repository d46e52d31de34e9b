"""Rate-limit request and response schemas."""

from pydantic import BaseModel, ConfigDict, Field

from usagegate.domains.rate_limit.types import RateLimitDecision


class RateLimitCheckRequest(BaseModel):
    """Body of ``POST /rate-limit/check``."""

    model_config = {
        "json_schema_extra": {
            "example": {"id": "o1", "entity_type": "organization", "type": "operations-reporting"}
        }
    }

    id: str = Field(..., description="Organization or target id")
    entity_type: str = Field(..., description="'organization' or 'target'")
    type: str = Field(..., description="Limit kind; only 'operations-reporting' is tracked")


class RateLimitDecisionResponse(BaseModel):
    """Cached decision; ``-1`` usage and quota mean unknown, do not enforce."""

    model_config = ConfigDict(from_attributes=True)

    current: int
    quota: int
    limited: bool

    @classmethod
    def from_decision(cls, decision: RateLimitDecision) -> "RateLimitDecisionResponse":
        """Build the response from a domain decision."""
        return cls.model_validate(decision)


class RetentionResponse(BaseModel):
    """Retention of a target's organization in days."""

    retention_in_days: int
