"""Notification domain types.

Templates are pydantic models discriminated on ``id`` so a request body
received over the wire validates into the right template class.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class TemplateKind(str, Enum):
    """Kinds of notification the rate limiter can schedule."""

    RATE_LIMIT_EXCEEDED = "rate-limit-exceeded"
    RATE_LIMIT_WARNING = "rate-limit-warning"


class Period(BaseModel):
    """Billing window bounds in epoch milliseconds."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int


class OrganizationContext(BaseModel):
    """Organization details rendered into a rate-limit notification."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    limit: int
    usage: int
    period: Period


class RateLimitExceededTemplate(BaseModel):
    """Sent when an organization's usage exceeded its monthly limit."""

    model_config = ConfigDict(frozen=True)

    id: Literal["rate-limit-exceeded"] = "rate-limit-exceeded"
    organization: OrganizationContext


class RateLimitWarningTemplate(BaseModel):
    """Sent when an organization is approaching its monthly limit."""

    model_config = ConfigDict(frozen=True)

    id: Literal["rate-limit-warning"] = "rate-limit-warning"
    organization: OrganizationContext


NotificationTemplate = Annotated[
    Union[RateLimitExceededTemplate, RateLimitWarningTemplate],
    Field(discriminator="id"),
]


class ScheduleEmailRequest(BaseModel):
    """Wire shape of an enqueue request sent to the emails service."""

    email: EmailStr
    template: NotificationTemplate


@dataclass(frozen=True)
class NotificationRequest:
    """A keyed notification the builder wants delivered at most once."""

    key: str
    recipient_email: str
    template: Union[RateLimitExceededTemplate, RateLimitWarningTemplate]

    @property
    def kind(self) -> TemplateKind:
        """Template kind of this request."""
        return TemplateKind(self.template.id)


@dataclass(frozen=True)
class RenderedTemplate:
    """Subject and body of a notification, keyed by its job id."""

    job_id: str
    subject: str
    body: str


@dataclass(frozen=True)
class ScheduledJob:
    """Reference to an enqueued notification job."""

    job_id: str
    duplicate: bool = False
