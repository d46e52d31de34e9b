"""Turns a notification template into subject and body."""

from typing import Union

from usagegate.domains.notifications.keys import key_for_template
from usagegate.domains.notifications.types import (
    RateLimitExceededTemplate,
    RateLimitWarningTemplate,
    RenderedTemplate,
)


def render_template(
    template: Union[RateLimitExceededTemplate, RateLimitWarningTemplate],
) -> RenderedTemplate:
    """Render *template*; the job id is the template's notification key."""
    org = template.organization
    if isinstance(template, RateLimitExceededTemplate):
        headline = f"{org.name} has exceeded its rate limit"
    elif isinstance(template, RateLimitWarningTemplate):
        headline = f"{org.name} is approaching its rate limit"
    else:
        raise TypeError(f"Unsupported notification template: {type(template).__name__}")

    return RenderedTemplate(
        job_id=key_for_template(template),
        subject=headline,
        body=f"{headline}. {org.usage}/{org.limit}",
    )
