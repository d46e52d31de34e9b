"""In-memory notification dispatcher.

Renders each template and keeps the resulting job under its notification
key. A key already present is not enqueued again until the job ages out of
the retention window, which must outlast a billing period.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Callable, Union

from usagegate.domains.notifications.protocols import NotificationDispatcherProtocol
from usagegate.domains.notifications.templates import render_template
from usagegate.domains.notifications.types import (
    RateLimitExceededTemplate,
    RateLimitWarningTemplate,
    ScheduledJob,
)

logger = logging.getLogger(__name__)

DEFAULT_RETENTION = timedelta(days=32)


@dataclass(frozen=True)
class ScheduledEmail:
    """One enqueued email job."""

    job_id: str
    email: str
    subject: str
    body: str
    scheduled_at: datetime


class InMemoryNotificationDispatcher(NotificationDispatcherProtocol):
    """Keyed, deduplicating job queue held in process memory."""

    def __init__(
        self,
        retention: timedelta = DEFAULT_RETENTION,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._retention = retention
        self._clock = clock
        self._jobs: dict[str, ScheduledEmail] = {}

    @property
    def jobs(self) -> list[ScheduledEmail]:
        """Retained jobs in enqueue order."""
        return list(self._jobs.values())

    async def schedule(
        self,
        notification_key: str,
        recipient_email: str,
        template: Union[RateLimitExceededTemplate, RateLimitWarningTemplate],
    ) -> ScheduledJob:
        now = self._clock()
        self._expire(now)

        if notification_key in self._jobs:
            logger.debug(f"Job {notification_key} already scheduled, skipping")
            return ScheduledJob(job_id=notification_key, duplicate=True)

        rendered = render_template(template)
        self._jobs[notification_key] = ScheduledEmail(
            job_id=notification_key,
            email=recipient_email,
            subject=rendered.subject,
            body=rendered.body,
            scheduled_at=now,
        )
        logger.info(f"Scheduled email to {recipient_email}: {rendered.subject}")
        return ScheduledJob(job_id=notification_key)

    def _expire(self, now: datetime) -> None:
        cutoff = now - self._retention
        for key in [k for k, job in self._jobs.items() if job.scheduled_at < cutoff]:
            del self._jobs[key]
