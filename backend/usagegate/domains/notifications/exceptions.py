"""Notification domain exceptions."""

from typing import Optional

from usagegate.core.exceptions import UsageGateException


class DispatchError(UsageGateException):
    """Raised when a notification could not be enqueued."""

    def __init__(self, notification_key: str, message: Optional[str] = None) -> None:
        """Initialize with the key of the notification that failed."""
        self.notification_key = notification_key
        self.message = message or f"Failed to schedule notification {notification_key}"
        super().__init__(self.message)
