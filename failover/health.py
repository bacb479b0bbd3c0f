"""
Health Monitor: probes one endpoint on a fixed cadence and publishes its status.

Each health check owns one ``HealthState``. The monitor is its only writer;
resolvers read it through ``snapshot()`` and never wait on a probe. Status
changes follow an asymmetric rule:

- a single successful probe makes the endpoint HEALTHY immediately;
- the endpoint becomes UNHEALTHY only once ``failure_threshold`` consecutive
  probes have failed.

Probe failures are retried by the loop itself at the same interval, with no
backoff. A probe is classified, never raised: connection errors, timeouts and
4xx/5xx responses are all FAILURE.
"""

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

import httpx

from failover.models import HealthCheckConfig, HealthStatus

logger = logging.getLogger(__name__)


class ProbeOutcome(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


@dataclass(frozen=True)
class ProbeResult:
    outcome: ProbeOutcome
    status_code: int | None = None
    detail: str = ""
    latency: float = 0.0

    @property
    def ok(self) -> bool:
        return self.outcome is ProbeOutcome.SUCCESS


@dataclass(frozen=True)
class HealthSnapshot:
    """Consistent, read-only view of a HealthState at one instant."""

    name: str
    status: HealthStatus
    consecutive_failures: int
    last_probe_at: float | None
    last_transition_at: float | None

    @property
    def healthy(self) -> bool:
        return self.status is HealthStatus.HEALTHY


class HealthState:
    """
    Published health of one health check.

    Starts HEALTHY with no recorded probes. All reads and writes take the
    internal lock, so a reader never sees a status that disagrees with its
    failure counter.
    """

    def __init__(self, name: str):
        self.name = name
        self._lock = threading.Lock()
        self._status = HealthStatus.HEALTHY
        self._consecutive_failures = 0
        self._last_probe_at: float | None = None
        self._last_transition_at: float | None = None

    @property
    def status(self) -> HealthStatus:
        with self._lock:
            return self._status

    def snapshot(self) -> HealthSnapshot:
        with self._lock:
            return HealthSnapshot(
                name=self.name,
                status=self._status,
                consecutive_failures=self._consecutive_failures,
                last_probe_at=self._last_probe_at,
                last_transition_at=self._last_transition_at,
            )

    def record(self, outcome: ProbeOutcome, threshold: int, at: float) -> HealthStatus:
        """
        Apply one probe outcome and return the resulting status.

        Args:
            outcome: Result of the probe.
            threshold: Consecutive failures needed to declare UNHEALTHY.
            at: Time of the probe; stored as last_probe_at, and as
                last_transition_at when the status changes.
        """
        if threshold < 1:
            raise ValueError("threshold must be at least 1")
        with self._lock:
            if outcome is ProbeOutcome.SUCCESS:
                self._consecutive_failures = 0
                new_status = HealthStatus.HEALTHY
            else:
                self._consecutive_failures += 1
                if self._consecutive_failures >= threshold:
                    new_status = HealthStatus.UNHEALTHY
                else:
                    new_status = self._status
            if new_status is not self._status:
                self._status = new_status
                self._last_transition_at = at
            self._last_probe_at = at
            return self._status

    def __repr__(self):
        snap = self.snapshot()
        return (
            f"HealthState(name={snap.name!r}, status={snap.status.value}, "
            f"consecutive_failures={snap.consecutive_failures})"
        )


def classify_status_code(status_code: int) -> ProbeOutcome:
    """2xx and 3xx are SUCCESS; anything else is FAILURE."""
    if 200 <= status_code < 400:
        return ProbeOutcome.SUCCESS
    return ProbeOutcome.FAILURE


async def probe(config: HealthCheckConfig, client: httpx.AsyncClient) -> ProbeResult:
    """
    Request ``config.url`` once and classify the response.

    Redirects are not followed: a 3xx already proves a TLS-terminating HTTP
    responder is up. Network errors become FAILURE results.
    """
    start_time = time.perf_counter()
    try:
        response = await client.get(
            config.url,
            timeout=config.timeout_seconds,
            follow_redirects=False,
        )
    except httpx.TimeoutException:
        return ProbeResult(
            outcome=ProbeOutcome.FAILURE,
            detail="timeout",
            latency=time.perf_counter() - start_time,
        )
    except httpx.HTTPError as e:
        return ProbeResult(
            outcome=ProbeOutcome.FAILURE,
            detail=f"connection failed: {e}",
            latency=time.perf_counter() - start_time,
        )

    return ProbeResult(
        outcome=classify_status_code(response.status_code),
        status_code=response.status_code,
        detail=f"HTTP {response.status_code}",
        latency=time.perf_counter() - start_time,
    )


ProbeFn = Callable[[HealthCheckConfig], Awaitable[ProbeResult]]


async def _probe_with_fresh_client(config: HealthCheckConfig) -> ProbeResult:
    # One client per probe keeps probes independent (no pooled connections).
    async with httpx.AsyncClient() as client:
        return await probe(config, client)


class HealthMonitor:
    """
    Fixed-interval probe loop for one health check.

    Args:
        config: What to probe and the threshold/interval to apply.
        state: The HealthState this monitor publishes to. The monitor must be
            its only writer.
        probe_fn: Async callable returning a ProbeResult; defaults to an HTTPS
            probe with httpx.
        clock: Returns the timestamp recorded for each probe.
    """

    def __init__(
        self,
        config: HealthCheckConfig,
        state: HealthState,
        probe_fn: ProbeFn | None = None,
        clock: Callable[[], float] = time.time,
    ):
        if state.name != config.name:
            raise ValueError(
                f"state {state.name!r} does not belong to health check {config.name!r}"
            )
        self.config = config
        self.state = state
        self._probe_fn = probe_fn or _probe_with_fresh_client
        self._clock = clock
        # Created per run so the monitor is not tied to one event loop.
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task | None = None
        self.probes = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _probe(self) -> ProbeResult:
        try:
            return await self._probe_fn(self.config)
        except Exception as e:
            logger.exception("Probe raised for %s (%s)", self.config.name, self.config.url)
            return ProbeResult(
                outcome=ProbeOutcome.FAILURE,
                detail=f"probe error: {type(e).__name__}",
            )

    async def run_once(self) -> HealthStatus:
        """
        Run one probe, publish the outcome and return the new status.

        A probe function that raises counts as a failed probe.
        """
        result = await self._probe()
        self.probes += 1
        previous = self.state.status
        status = self.state.record(
            result.outcome, self.config.failure_threshold, self._clock()
        )
        if not result.ok:
            logger.debug(
                "Probe failed for %s (%s): %s",
                self.config.name,
                self.config.url,
                result.detail,
            )
        if status is not previous:
            if status is HealthStatus.UNHEALTHY:
                logger.warning(
                    "%s is UNHEALTHY after %d consecutive failed probes (%s)",
                    self.config.name,
                    self.config.failure_threshold,
                    result.detail,
                )
            else:
                logger.info("%s recovered: HEALTHY (%s)", self.config.name, result.detail)
        return status

    async def run(self, on_probe: Callable[[HealthStatus], None] | None = None) -> None:
        """
        Probe until stop() or request_stop() is called.

        The cadence is fixed: the wait after a probe is the interval minus the
        time the probe took. A stop request never interrupts a probe in
        flight; it only ends the wait between probes.

        Args:
            on_probe: Called with the published status after every probe.
        """
        self._stop_event = asyncio.Event()
        await self._loop(self._stop_event, on_probe)

    async def _loop(
        self,
        stop_event: asyncio.Event,
        on_probe: Callable[[HealthStatus], None] | None,
    ) -> None:
        loop = asyncio.get_running_loop()
        logger.info(
            "Monitoring %s every %ss (threshold %d)",
            self.config.url,
            self.config.probe_interval_seconds,
            self.config.failure_threshold,
        )
        while not stop_event.is_set():
            started = loop.time()
            status = await self.run_once()
            if on_probe is not None:
                on_probe(status)
            delay = max(0.0, self.config.probe_interval_seconds - (loop.time() - started))
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass
        logger.info("Stopped monitoring %s", self.config.name)

    def start(
        self, on_probe: Callable[[HealthStatus], None] | None = None
    ) -> asyncio.Task:
        """Schedule the probe loop on the running event loop and return its task."""
        if self.running:
            raise RuntimeError(f"monitor for {self.config.name} is already running")
        self._stop_event = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(
            self._loop(self._stop_event, on_probe),
            name=f"health-monitor:{self.config.name}",
        )
        return self._task

    def request_stop(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()

    async def stop(self) -> None:
        """Tear down the loop, letting an in-flight probe run to completion."""
        self.request_stop()
        if self._task is not None:
            await self._task
            self._task = None
