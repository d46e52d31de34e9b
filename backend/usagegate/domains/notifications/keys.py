"""Notification key derivation.

The key is the dispatcher's dedup handle. It is a pure function of the
template kind, the organization, the billing window and the limit in force
when the decision was made:

- same inputs, same key: repeated refresh cycles within one window collapse
  into a single delivery;
- a different limit, a different key: raising or lowering an organization's
  limit mid-window can notify again.

Keys are canonical JSON with a fixed field order and no whitespace, so any
implementation that follows the layout below produces byte-identical keys.
"""

import json
from typing import Union

from usagegate.domains.notifications.types import (
    RateLimitExceededTemplate,
    RateLimitWarningTemplate,
    TemplateKind,
)


def notification_key(
    kind: Union[TemplateKind, str],
    organization_id: str,
    window_start_ms: int,
    window_end_ms: int,
    limit: int,
) -> str:
    """Derive the dedup key for one (kind, organization, window, limit) tuple."""
    kind_value = kind.value if isinstance(kind, TemplateKind) else str(kind)
    payload = {
        "id": kind_value,
        "organization": str(organization_id),
        "period": {"start": int(window_start_ms), "end": int(window_end_ms)},
        "limit": int(limit),
    }
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def key_for_template(
    template: Union[RateLimitExceededTemplate, RateLimitWarningTemplate],
) -> str:
    """Derive the dedup key from a fully built template."""
    org = template.organization
    return notification_key(
        template.id,
        org.id,
        org.period.start,
        org.period.end,
        org.limit,
    )
