"""Fake notification dispatcher for testing.

Records every call and applies key-based dedup the way a real dispatcher
must, so tests can assert on both attempts and effective deliveries.
"""

from __future__ import annotations

from typing import Union

from usagegate.domains.notifications.exceptions import DispatchError
from usagegate.domains.notifications.protocols import NotificationDispatcherProtocol
from usagegate.domains.notifications.types import (
    RateLimitExceededTemplate,
    RateLimitWarningTemplate,
    ScheduledJob,
)

Template = Union[RateLimitExceededTemplate, RateLimitWarningTemplate]


class FakeNotificationDispatcher(NotificationDispatcherProtocol):
    """Test implementation of NotificationDispatcherProtocol.

    Usage:
        dispatcher = FakeNotificationDispatcher()
        dispatcher.fail_for("org-1")

        await scheduler.refresh_once()

        assert len(dispatcher.calls) == 2
        assert list(dispatcher.delivered) == [expected_key]
    """

    def __init__(self) -> None:
        """Initialize empty call log and delivery set."""
        self.calls: list[tuple[str, str, Template]] = []
        self.delivered: dict[str, tuple[str, Template]] = {}
        self._failing_orgs: set[str] = set()
        self._fail_all = False

    def fail_for(self, organization_id: str) -> None:
        """Make every schedule call for *organization_id* raise DispatchError."""
        self._failing_orgs.add(organization_id)

    def fail_all(self) -> None:
        """Make every schedule call raise DispatchError."""
        self._fail_all = True

    async def schedule(
        self,
        notification_key: str,
        recipient_email: str,
        template: Template,
    ) -> ScheduledJob:
        """Record the call and deliver unless the key was seen before."""
        self.calls.append((notification_key, recipient_email, template))
        if self._fail_all or template.organization.id in self._failing_orgs:
            raise DispatchError(notification_key, "fake dispatcher configured to fail")
        if notification_key in self.delivered:
            return ScheduledJob(job_id=notification_key, duplicate=True)
        self.delivered[notification_key] = (recipient_email, template)
        return ScheduledJob(job_id=notification_key)

    def clear(self) -> None:
        """Reset all recorded state."""
        self.calls.clear()
        self.delivered.clear()
        self._failing_orgs.clear()
        self._fail_all = False
