"""Timed reveal of scan results.

A scan plan is revealed as a radar sweep: each prospect is emitted at
``delay_ms`` after the scan starts, in ascending bearing order, and the
scan is marked complete after the sweep plus a short grace period.

Two consumers are supported:

- ``reveal_stream`` is an async generator for callers that want to pull
  reveals (the HTTP streaming endpoint uses it).
- ``ScanSession`` drives one scan at a time for a UI-style consumer,
  pushing reveals to a sink and tracking ``idle -> scanning -> complete``.
"""

import asyncio
import inspect
import time
import uuid
from enum import Enum
from typing import (
    AsyncIterator,
    Awaitable,
    Callable,
    List,
    Optional,
    Sequence,
    Union,
)

from .logging_utils import ContextAdapter, LogContext, get_logger
from .models import BoundingBox, ResidentialProspect, ScanPlan, ScheduledReveal
from .scanner import ProspectGenerator, ScanError, validate_region

RevealSink = Callable[[ScheduledReveal], Union[None, Awaitable[None]]]


class ScanState(str, Enum):
    """Lifecycle of a scan session."""

    IDLE = "idle"
    SCANNING = "scanning"
    COMPLETE = "complete"


class OverlapPolicy(str, Enum):
    """What to do when a scan is requested while another is running."""

    RESTART = "restart"  # cancel the running scan and start the new one
    REJECT = "reject"    # refuse the new scan


class ScanInProgress(ScanError):
    """Raised when a scan is requested while another is still running."""

    def __init__(self, scan_id: str):
        self.scan_id = scan_id
        super().__init__(f"Scan {scan_id} is still running")


class ScanToken:
    """Cancellation token shared by everything scheduled for one scan."""

    def __init__(self, scan_id: str):
        self.scan_id = scan_id
        self.outcome: Optional[ScanState] = None
        self._cancelled = False
        self._finished = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def finish(self, outcome: ScanState) -> None:
        """Record how the scan ended and wake its waiters."""
        self.outcome = outcome
        self._finished.set()

    async def wait(self) -> ScanState:
        await self._finished.wait()
        return self.outcome


async def reveal_stream(
    plan: ScanPlan,
    token: Optional[ScanToken] = None,
    clock: Callable[[], float] = time.monotonic,
    started: Optional[float] = None,
) -> AsyncIterator[ScheduledReveal]:
    """Yield each reveal of a plan when its delay has elapsed.

    Delays are measured from ``started``, or from the first iteration when
    it is not given. The stream stops early, without emitting anything
    further, once ``token`` is cancelled.

    Args:
        plan: Ordered scan plan.
        token: Optional cancellation token.
        clock: Monotonic clock in seconds.
        started: Clock reading the delays are relative to.

    Yields:
        ScheduledReveal objects in non-decreasing bearing order.
    """
    if started is None:
        started = clock()
    for reveal in plan.reveals:
        wait = started + reveal.delay_ms / 1000.0 - clock()
        if wait > 0:
            await asyncio.sleep(wait)
        if token is not None and token.cancelled:
            return
        yield reveal


class ScanSession:
    """One map view's scan lifecycle.

    Attributes:
        state: Current ScanState.
        results: Prospects revealed so far by the current scan.
        plan: Plan of the current (or last) scan.
        overlap_policy: Behaviour when ``start`` is called mid-scan.
    """

    def __init__(
        self,
        generator: Optional[ProspectGenerator] = None,
        overlap_policy: Union[OverlapPolicy, str] = OverlapPolicy.RESTART,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.generator = generator or ProspectGenerator()
        self.overlap_policy = OverlapPolicy(overlap_policy)
        self.clock = clock
        self.state = ScanState.IDLE
        self.results: List[ResidentialProspect] = []
        self.plan: Optional[ScanPlan] = None
        self.started_at: Optional[float] = None
        self.completed_at: Optional[float] = None
        self._token: Optional[ScanToken] = None
        self._driver: Optional[asyncio.Task] = None
        self.logger = ContextAdapter(get_logger(__name__), {})

    @property
    def scan_id(self) -> Optional[str]:
        return self._token.scan_id if self._token else None

    @property
    def is_scanning(self) -> bool:
        return self.state == ScanState.SCANNING

    async def start(
        self,
        region: BoundingBox,
        polygon: Optional[Sequence[Sequence[float]]] = None,
        sink: Optional[RevealSink] = None,
    ) -> ScanPlan:
        """Start a scan and schedule its reveals.

        Validation happens before anything is scheduled, so a rejected
        request leaves the session untouched.

        Args:
            region: Map region to scan.
            polygon: Optional containment ring as (lng, lat) vertices.
            sink: Optional callable (sync or async) receiving each reveal.

        Returns:
            The plan being revealed.

        Raises:
            InvalidRegion: If the region is degenerate.
            ScanInProgress: If a scan is running and the policy is REJECT.
        """
        validate_region(region)

        if self.is_scanning:
            if self.overlap_policy == OverlapPolicy.REJECT:
                self.logger.info(
                    "Scan rejected while another is running",
                    extra={"scan_id": self.scan_id},
                )
                raise ScanInProgress(self.scan_id)
            self.cancel()

        scan_id = str(uuid.uuid4())
        with LogContext(scan_id=scan_id):
            plan = self.generator.plan(region, polygon, scan_id=scan_id)

            self._token = ScanToken(scan_id)
            self.plan = plan
            self.results = []
            self.state = ScanState.SCANNING
            self.started_at = self.clock()
            self.completed_at = None

            self.logger.info(
                "Scan started",
                extra={
                    "candidates": len(plan.reveals),
                    "requested": plan.requested,
                    "dropped": plan.dropped,
                    "polygon": polygon is not None,
                },
            )

        self._driver = asyncio.create_task(self._run(plan, self._token, sink))
        return plan

    def cancel(self) -> None:
        """Cancel the running scan; no further reveals are emitted."""
        if self._token is None or not self.is_scanning:
            return
        self._token.cancel()
        if self._driver is not None and not self._driver.done():
            self._driver.cancel()
        self.logger.info(
            "Scan cancelled",
            extra={"scan_id": self._token.scan_id, "revealed": len(self.results)},
        )
        self.state = ScanState.IDLE
        self._token.finish(ScanState.IDLE)

    async def wait_complete(self) -> ScanState:
        """Wait until the current scan completes or is cancelled.

        Returns at once when no scan is running. The returned state is the
        outcome of the scan that was running when the call was made, even
        if a restart has since replaced it.
        """
        if not self.is_scanning or self._token is None:
            return self.state
        return await self._token.wait()

    async def _run(
        self,
        plan: ScanPlan,
        token: ScanToken,
        sink: Optional[RevealSink],
    ) -> None:
        async for reveal in reveal_stream(plan, token, self.clock, self.started_at):
            self.results.append(reveal.prospect)
            self.logger.debug(
                "Prospect revealed",
                extra={
                    "scan_id": token.scan_id,
                    "prospect_id": reveal.prospect.id,
                    "bearing": round(reveal.bearing, 2),
                },
            )
            if sink is not None:
                await self._emit(sink, reveal, token)
            if token.cancelled:
                return

        remaining = self.started_at + plan.complete_after_ms / 1000.0 - self.clock()
        if remaining > 0:
            await asyncio.sleep(remaining)

        if token.cancelled:
            return
        self.state = ScanState.COMPLETE
        self.completed_at = self.clock()
        token.finish(ScanState.COMPLETE)
        self.logger.info(
            "Scan completed",
            extra={
                "scan_id": token.scan_id,
                "revealed": len(self.results),
                "elapsed_ms": round((self.completed_at - self.started_at) * 1000),
            },
        )

    async def _emit(
        self,
        sink: RevealSink,
        reveal: ScheduledReveal,
        token: ScanToken,
    ) -> None:
        """Hand a reveal to the sink; a failing sink does not stop the sweep."""
        try:
            outcome = sink(reveal)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            self.logger.warning(
                f"Reveal sink failed: {e}",
                extra={"scan_id": token.scan_id, "prospect_id": reveal.prospect.id},
                exc_info=True,
            )
