"""Refresh scheduler — drives the snapshot builder on a fixed interval.

Lifecycle::

    STOPPED --start()--> STARTING --first build attempted--> RUNNING --stop()--> STOPPED

``start()`` runs one build inline, then arms an ``asyncio.Task`` that ticks
every ``interval`` seconds. Each tick launches one refresh cycle unless the
previous cycle is still in flight, in which case the tick is dropped.

A cycle that fails keeps the previous snapshot; the failure is logged and
reported, never raised. A cycle still running when ``stop()`` is called is
left to finish, but its result is discarded.
"""

import asyncio
import time
from datetime import UTC, datetime
from enum import Enum
from typing import Callable, Optional

from usagegate.core.logging import ContextualLogger
from usagegate.core.logging import logger as default_logger
from usagegate.core.protocols import ErrorReporter, RateLimitMetrics
from usagegate.domains.notifications.protocols import NotificationDispatcherProtocol
from usagegate.domains.notifications.types import NotificationRequest
from usagegate.domains.rate_limit.builder import BuildResult, SnapshotBuilder
from usagegate.domains.rate_limit.cache import RateLimitCache


class SchedulerState(str, Enum):
    """Lifecycle states of the refresh scheduler."""

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"


def _utc_now() -> datetime:
    return datetime.now(UTC)


class RefreshScheduler:
    """Periodically rebuilds the snapshot, publishes it and dispatches notifications."""

    def __init__(
        self,
        builder: SnapshotBuilder,
        cache: RateLimitCache,
        dispatcher: NotificationDispatcherProtocol,
        metrics: RateLimitMetrics,
        error_reporter: ErrorReporter,
        interval: float = 60.0,
        clock: Callable[[], datetime] = _utc_now,
        logger: Optional[ContextualLogger] = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            builder: Builds one snapshot per cycle.
            cache: Receives every successfully built snapshot.
            dispatcher: Enqueues the notifications of each cycle.
            metrics: Refresh-cycle instrumentation.
            error_reporter: Sink for refresh and dispatch failures.
            interval: Seconds between ticks.
            clock: Source of ``now`` for each cycle.
            logger: Logger to use; defaults to the service logger.
        """
        self._builder = builder
        self._cache = cache
        self._dispatcher = dispatcher
        self._metrics = metrics
        self._error_reporter = error_reporter
        self._interval = interval
        self._clock = clock
        self._logger = (logger or default_logger).with_prefix("RateLimiter: ").with_context(
            component="refresh_scheduler"
        )

        self._state = SchedulerState.STOPPED
        self._ready = False
        self._generation = 0
        self._cycle_lock = asyncio.Lock()
        self._timer_task: Optional[asyncio.Task[None]] = None
        self._cycle_tasks: set[asyncio.Task[bool]] = set()

    @property
    def state(self) -> SchedulerState:
        """Current lifecycle state."""
        return self._state

    @property
    def interval(self) -> float:
        """Seconds between ticks."""
        return self._interval

    def readiness(self) -> bool:
        """True once the first build was attempted and until ``stop()``."""
        return self._ready

    async def start(self) -> None:
        """Run the first build, mark ready and arm the periodic timer."""
        if self._state is not SchedulerState.STOPPED:
            self._logger.warning(f"start() called while {self._state.value}; ignoring")
            return

        self._state = SchedulerState.STARTING
        self._generation += 1
        generation = self._generation
        self._logger.info(
            f"Starting, will update rate-limit information every {self._interval}s"
        )

        # A cycle left over from a previous run may still hold the lock.
        async with self._cycle_lock:
            if generation == self._generation:
                await self._cycle(generation)

        if generation != self._generation:
            # stop() was called while the first build was running.
            return

        self._ready = True
        self._state = SchedulerState.RUNNING
        self._timer_task = asyncio.create_task(self._timer(generation))

    async def stop(self) -> None:
        """Cancel the timer; an in-flight cycle finishes but is discarded."""
        self._ready = False
        self._state = SchedulerState.STOPPED
        self._generation += 1

        if self._timer_task is not None:
            self._timer_task.cancel()
            try:
                await self._timer_task
            except asyncio.CancelledError:
                pass
            self._timer_task = None

        self._logger.info("Stopped")

    async def refresh_once(self) -> bool:
        """Run one cycle now unless another is in flight.

        Returns:
            True if a snapshot was published. Always False while stopped.
        """
        if self._state is SchedulerState.STOPPED:
            self._logger.debug("Scheduler stopped, ignoring refresh request")
            return False
        return await self._run_cycle(self._generation)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _timer(self, generation: int) -> None:
        """Fire a cycle every interval; drop ticks that overlap a running cycle."""
        while True:
            await asyncio.sleep(self._interval)
            if generation != self._generation:
                return
            if self._cycle_lock.locked():
                self._logger.debug("Previous refresh still running, skipping tick")
                continue
            self._logger.info("Interval triggered, updating rate-limit cache...")
            task = asyncio.create_task(self._run_cycle(generation))
            self._cycle_tasks.add(task)
            task.add_done_callback(self._cycle_tasks.discard)

    async def _run_cycle(self, generation: int) -> bool:
        if self._cycle_lock.locked():
            self._logger.debug("Refresh already in flight, not starting another")
            return False

        async with self._cycle_lock:
            return await self._cycle(generation)

    async def _cycle(self, generation: int) -> bool:
        """Build, publish and dispatch once. Caller holds ``_cycle_lock``."""
        started = time.monotonic()
        try:
            result = await self._builder.build(self._clock())
        except Exception as e:
            if generation != self._generation:
                self._logger.info(f"Refresh failed after stop, discarding: {e}")
                self._metrics.observe_refresh("discarded", time.monotonic() - started)
                return False
            self._logger.error(f"Failed to update rate-limit cache: {e}", exc_info=True)
            self._error_reporter.capture_exception(e, extra={"component": "rate_limit_refresh"})
            self._metrics.observe_refresh("failure", time.monotonic() - started)
            return False

        if generation != self._generation:
            self._logger.info("Scheduler stopped during refresh, discarding result")
            self._metrics.observe_refresh("discarded", time.monotonic() - started)
            return False

        self._publish(result)
        await self._dispatch(result.notifications)
        self._metrics.observe_refresh("success", time.monotonic() - started)
        return True

    def _publish(self, result: BuildResult) -> None:
        snapshot = result.snapshot
        self._cache.publish(snapshot)

        self._metrics.set_cached_organizations(len(snapshot.organizations))
        for org_id in result.limited_organizations:
            entry = snapshot.organizations[org_id]
            self._metrics.inc_limited_organization(org_id, entry.org_name)

        self._logger.info(
            f"Built a new rate-limit map: {len(snapshot.organizations)} organizations, "
            f"{len(snapshot.targets)} targets, "
            f"{len(result.limited_organizations)} limited"
        )

    async def _dispatch(self, requests: list[NotificationRequest]) -> None:
        """Enqueue every request; one failure never affects the others."""
        if not requests:
            return

        outcomes = await asyncio.gather(*(self._dispatch_one(r) for r in requests))
        scheduled = sum(1 for ok in outcomes if ok)
        self._logger.info(f"Scheduled {scheduled} emails ({len(requests) - scheduled} failed)")

    async def _dispatch_one(self, request: NotificationRequest) -> bool:
        try:
            await self._dispatcher.schedule(
                request.key, request.recipient_email, request.template
            )
        except Exception as e:
            self._logger.error(
                f"Failed to schedule {request.kind.value} notification for organization "
                f"{request.template.organization.id}: {e}",
                exc_info=True,
            )
            self._error_reporter.capture_exception(
                e,
                extra={"notification_key": request.key, "template": request.kind.value},
            )
            self._metrics.inc_notification(request.kind.value, "failed")
            return False

        self._metrics.inc_notification(request.kind.value, "scheduled")
        return True
