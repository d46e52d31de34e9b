"""Retry helpers for the HTTP adapters.

Only transient transport failures and 5xx responses are retried; 4xx
responses are the caller's fault and fail immediately.
"""

import httpx
from tenacity import wait_exponential

MAX_ATTEMPTS = 3

default_wait = wait_exponential(multiplier=0.5, max=4)


def should_retry_on_timeout(exception: BaseException) -> bool:
    """Check if exception is a timeout or connection error that should be retried."""
    return isinstance(
        exception,
        (
            httpx.ConnectTimeout,
            httpx.ReadTimeout,
            httpx.WriteTimeout,
            httpx.PoolTimeout,
            httpx.ConnectError,
        ),
    )


def should_retry_on_server_error(exception: BaseException) -> bool:
    """Check if exception is an HTTP 5xx response."""
    if isinstance(exception, httpx.HTTPStatusError):
        return exception.response.status_code >= 500
    return False


def should_retry_transient(exception: BaseException) -> bool:
    """Combined retry condition for timeouts, connection errors and 5xx."""
    return should_retry_on_timeout(exception) or should_retry_on_server_error(exception)
