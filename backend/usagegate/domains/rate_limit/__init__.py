"""Rate-limit domain — snapshot builder, cache, refresh scheduler and query service.

The container owns one ``RateLimitService``. The FastAPI lifespan starts it
(first refresh + periodic timer) and stops it on shutdown; endpoints read from
it synchronously.
"""
