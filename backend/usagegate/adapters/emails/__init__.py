"""Notification dispatcher adapters."""

from usagegate.adapters.emails.http import HttpNotificationDispatcher
from usagegate.adapters.emails.in_memory import InMemoryNotificationDispatcher, ScheduledEmail

__all__ = ["HttpNotificationDispatcher", "InMemoryNotificationDispatcher", "ScheduledEmail"]
