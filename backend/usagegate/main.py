"""Main module of the FastAPI application.

The lifespan builds the DI container, starts the rate-limit refresh
scheduler (first refresh runs before the app accepts traffic) and the
internal metrics server, and stops both on shutdown.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from usagegate.api.metrics import MetricsServer
from usagegate.api.middleware import add_request_id, exception_logging_middleware, log_requests
from usagegate.api.v1.api import api_router
from usagegate.core.config import settings
from usagegate.core.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    from usagegate.core import container as container_mod
    from usagegate.core.container import initialize_container

    logger.info("Initializing dependency injection container...")
    container = initialize_container(settings)
    logger.info("Container initialized successfully")

    metrics_server = None
    if settings.METRICS_PORT:
        metrics_server = MetricsServer(
            container.metrics,
            readiness=container.rate_limit_service.readiness,
            port=settings.METRICS_PORT,
        )
        await metrics_server.start()

    await container.rate_limit_service.start()
    try:
        yield
    finally:
        await container.rate_limit_service.stop()
        if metrics_server is not None:
            await metrics_server.stop()
        dispose = getattr(container.ownership_store, "dispose", None)
        if dispose is not None:
            await dispose()
        container_mod.reset_container()


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.include_router(api_router)

# First registered = innermost.
app.middleware("http")(exception_logging_middleware)
app.middleware("http")(log_requests)
app.middleware("http")(add_request_id)
