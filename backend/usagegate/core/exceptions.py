"""Shared exceptions module."""

from typing import Optional


class UsageGateException(Exception):
    """Base exception for usagegate services."""

    pass


class NotConfiguredException(UsageGateException):
    """Raised when an adapter is wired without the settings it needs."""

    def __init__(self, setting: str, message: Optional[str] = None):
        """Create a new NotConfiguredException instance.

        Args:
        ----
            setting (str): Name of the missing setting.
            message (str, optional): The error message. Has default message.

        """
        self.setting = setting
        self.message = message or f"Required setting {setting} is not configured"
        super().__init__(self.message)
