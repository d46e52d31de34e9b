"""Internal aiohttp server for Prometheus scraping and orchestrator probes.

Serves two routes on a port kept off the public API:

- ``/metrics``: the rate-limit metrics in text exposition format;
- ``/ready``: 200 once the first refresh was attempted, 503 otherwise.
  Probes can hit this without going through the API middleware stack.
"""

from typing import Callable

from aiohttp import web
from prometheus_client import CONTENT_TYPE_LATEST

from usagegate.core.logging import logger
from usagegate.core.protocols.metrics import RateLimitMetrics


class MetricsServer:
    """Serves the refresh metrics and the scheduler's readiness."""

    def __init__(
        self,
        metrics: RateLimitMetrics,
        readiness: Callable[[], bool],
        port: int,
        host: str = "0.0.0.0",
    ) -> None:
        self._metrics = metrics
        self._readiness = readiness
        self._port = port
        self._host = host
        self._runner: web.AppRunner | None = None

    @property
    def bound_port(self) -> int | None:
        """Port actually listened on; differs from ``port`` when that was 0."""
        if self._runner is None:
            return None
        for site in self._runner.sites:
            return site._server.sockets[0].getsockname()[1]
        return None

    async def start(self) -> None:
        app = web.Application()
        app.router.add_get("/metrics", self._handle_metrics)
        app.router.add_get("/ready", self._handle_ready)
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        await web.TCPSite(self._runner, self._host, self._port).start()
        logger.info(f"Metrics server listening on {self._host}:{self.bound_port}")

    async def stop(self) -> None:
        if self._runner is None:
            return
        await self._runner.cleanup()
        self._runner = None
        logger.info("Metrics server stopped")

    async def _handle_metrics(self, request: web.Request) -> web.Response:
        # CONTENT_TYPE_LATEST already carries the charset; aiohttp would add a second one.
        return web.Response(
            body=self._metrics.render(),
            headers={"Content-Type": CONTENT_TYPE_LATEST},
        )

    async def _handle_ready(self, request: web.Request) -> web.Response:
        if self._readiness():
            return web.json_response({"status": "ready"})
        return web.json_response({"status": "not_ready"}, status=503)
