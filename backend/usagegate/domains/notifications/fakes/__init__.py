"""Fake implementations for notification domain testing."""

from usagegate.domains.notifications.fakes.dispatcher import FakeNotificationDispatcher

__all__ = ["FakeNotificationDispatcher"]
