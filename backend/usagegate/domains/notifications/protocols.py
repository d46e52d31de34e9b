"""Notification domain protocols."""

from typing import Protocol, Union, runtime_checkable

from usagegate.domains.notifications.types import (
    RateLimitExceededTemplate,
    RateLimitWarningTemplate,
    ScheduledJob,
)


@runtime_checkable
class NotificationDispatcherProtocol(Protocol):
    """Enqueues keyed notifications for delivery.

    Calling ``schedule`` twice with the same key must not deliver twice.
    Already-seen keys are remembered for at least a full billing period.
    """

    async def schedule(
        self,
        notification_key: str,
        recipient_email: str,
        template: Union[RateLimitExceededTemplate, RateLimitWarningTemplate],
    ) -> ScheduledJob:
        """Enqueue *template* for *recipient_email* under *notification_key*.

        Raises:
            DispatchError: If the notification could not be enqueued.
        """
        ...
