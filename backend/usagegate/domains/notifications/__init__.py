"""Notification domain — templates, dedup keys and the dispatcher boundary.

The rate-limit refresh cycle builds ``NotificationRequest`` objects and hands
them to a ``NotificationDispatcherProtocol`` implementation from the
container. Rendering into subject/body happens on the dispatcher side.
"""
