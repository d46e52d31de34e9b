"""HTTP usage source backed by the usage-estimation service.

``GET <base_url>/operations?startTime=...&endTime=...`` returns a JSON object
mapping target id to the number of operations reported in the window.
"""

from datetime import datetime, timezone
from typing import Optional

import httpx
from pydantic import TypeAdapter, ValidationError
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt
from tenacity.wait import wait_base

from usagegate.adapters.retry_helpers import MAX_ATTEMPTS, default_wait, should_retry_transient
from usagegate.core.logging import ContextualLogger
from usagegate.core.logging import logger as default_logger
from usagegate.domains.rate_limit.exceptions import SourceFetchError
from usagegate.domains.rate_limit.protocols import UsageSourceProtocol
from usagegate.domains.rate_limit.types import TargetId

SOURCE_NAME = "usage-source"

_usage_map = TypeAdapter(dict[TargetId, int])


def _http_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%a, %d %b %Y %H:%M:%S GMT")


class HttpUsageSource(UsageSourceProtocol):
    """Queries the usage-estimation service for per-target operation counts."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        retry_wait: Optional[wait_base] = None,
        logger: Optional[ContextualLogger] = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL of the usage-estimation service.
            timeout: Per-request timeout in seconds.
            retry_wait: Wait strategy between attempts.
            logger: Logger to use; defaults to the service logger.
        """
        self._url = f"{base_url.rstrip('/')}/operations"
        self._timeout = timeout
        self._retry_wait = retry_wait or default_wait
        self._logger = (logger or default_logger).with_context(component="usage_source")

    async def estimate(self, window_start: datetime, window_end: datetime) -> dict[TargetId, int]:
        params = {"startTime": _http_date(window_start), "endTime": _http_date(window_end)}

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(MAX_ATTEMPTS),
                retry=retry_if_exception(should_retry_transient),
                wait=self._retry_wait,
                reraise=True,
            ):
                with attempt:
                    payload = await self._get(params)
        except httpx.HTTPError as e:
            raise SourceFetchError(SOURCE_NAME, f"Usage estimator request failed: {e}") from e

        try:
            usage = _usage_map.validate_python(payload)
        except ValidationError as e:
            raise SourceFetchError(
                SOURCE_NAME, f"Usage estimator returned an unexpected payload: {e}"
            ) from e

        self._logger.debug(f"Usage estimator returned {len(usage)} targets")
        return usage

    async def _get(self, params: dict[str, str]) -> object:
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(self._url, params=params)
            response.raise_for_status()
            try:
                return response.json()
            except ValueError as e:
                raise SourceFetchError(SOURCE_NAME, "Usage estimator returned invalid JSON") from e
