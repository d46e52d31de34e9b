"""HTTP notification dispatcher backed by the emails service.

``POST <base_url>/schedule`` with ``{"email": ..., "template": {...}}``. The
emails service derives the job id from the template, so retrying a request
cannot enqueue the same notification twice.
"""

from typing import Optional, Union

import httpx
from pydantic import ValidationError
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt
from tenacity.wait import wait_base

from usagegate.adapters.retry_helpers import MAX_ATTEMPTS, default_wait, should_retry_transient
from usagegate.core.logging import ContextualLogger
from usagegate.core.logging import logger as default_logger
from usagegate.domains.notifications.exceptions import DispatchError
from usagegate.domains.notifications.protocols import NotificationDispatcherProtocol
from usagegate.domains.notifications.types import (
    RateLimitExceededTemplate,
    RateLimitWarningTemplate,
    ScheduledJob,
    ScheduleEmailRequest,
)

UNKNOWN_JOB_ID = "unknown"


class HttpNotificationDispatcher(NotificationDispatcherProtocol):
    """Enqueues notifications through the emails service."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        retry_wait: Optional[wait_base] = None,
        logger: Optional[ContextualLogger] = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}/schedule"
        self._timeout = timeout
        self._retry_wait = retry_wait or default_wait
        self._logger = (logger or default_logger).with_context(component="email_dispatcher")

    async def schedule(
        self,
        notification_key: str,
        recipient_email: str,
        template: Union[RateLimitExceededTemplate, RateLimitWarningTemplate],
    ) -> ScheduledJob:
        try:
            body = ScheduleEmailRequest(email=recipient_email, template=template).model_dump(
                mode="json"
            )
        except ValidationError as e:
            raise DispatchError(notification_key, f"Invalid notification request: {e}") from e

        self._logger.debug(f"Schedule {notification_key}")
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(MAX_ATTEMPTS),
                retry=retry_if_exception(should_retry_transient),
                wait=self._retry_wait,
                reraise=True,
            ):
                with attempt:
                    payload = await self._post(body)
        except httpx.HTTPError as e:
            raise DispatchError(notification_key, f"Emails service request failed: {e}") from e

        job_id = payload.get("job") if isinstance(payload, dict) else None
        self._logger.debug(f"Scheduled {notification_key}")
        return ScheduledJob(job_id=str(job_id) if job_id else UNKNOWN_JOB_ID)

    async def _post(self, body: dict) -> object:
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(self._url, json=body)
            response.raise_for_status()
            try:
                return response.json()
            except ValueError:
                return None
