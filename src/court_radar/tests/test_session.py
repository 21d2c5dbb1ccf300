# src/court_radar/tests/test_session.py
"""
Unit tests for the timed reveal of scans.

Tests cover:
- reveal_stream timing and order
- ScanSession lifecycle (idle -> scanning -> complete)
- Sink delivery, including failing sinks
- Overlap handling (restart and reject) and cancellation
"""
import asyncio
import time
import pytest

from court_radar.models import BoundingBox
from court_radar.scanner import InvalidRegion, ProspectGenerator, ScanPolicy
from court_radar.session import (
    OverlapPolicy,
    ScanInProgress,
    ScanSession,
    ScanState,
    ScanToken,
    reveal_stream,
)

REGION = BoundingBox.from_corners((33.50, -112.00), (33.56, -111.92))
OTHER_REGION = BoundingBox.from_corners((33.40, -112.10), (33.45, -112.00))
DEGENERATE = BoundingBox.from_corners((33.5, -112.0), (33.5, -112.0))

FAST_POLICY = ScanPolicy(min_candidates=5, max_candidates=5, scan_duration_ms=200, grace_ms=50)


def make_session(overlap_policy=OverlapPolicy.RESTART, seed=7):
    return ScanSession(ProspectGenerator(FAST_POLICY, seed=seed), overlap_policy=overlap_policy)


class TestRevealStream:
    """Tests for the reveal async generator."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_yields_every_reveal_in_order(self):
        plan = ProspectGenerator(FAST_POLICY, seed=3).plan(REGION)

        reveals = [reveal async for reveal in reveal_stream(plan)]

        assert reveals == plan.reveals
        bearings = [r.bearing for r in reveals]
        assert bearings == sorted(bearings)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reveals_not_early(self):
        plan = ProspectGenerator(FAST_POLICY, seed=3).plan(REGION)
        started = time.monotonic()

        async for reveal in reveal_stream(plan, started=started):
            elapsed_ms = (time.monotonic() - started) * 1000
            assert elapsed_ms >= reveal.delay_ms - 5

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cancelled_token_stops_stream(self):
        plan = ProspectGenerator(FAST_POLICY, seed=3).plan(REGION)
        token = ScanToken(plan.scan_id)
        token.cancel()

        reveals = [reveal async for reveal in reveal_stream(plan, token)]

        assert reveals == []


class TestScanSessionLifecycle:
    """Tests for a single scan run."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_initially_idle(self):
        session = make_session()
        assert session.state == ScanState.IDLE
        assert session.results == []
        assert session.scan_id is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_wait_without_scan_returns_immediately(self):
        session = make_session()
        state = await asyncio.wait_for(session.wait_complete(), timeout=0.5)
        assert state == ScanState.IDLE

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_wait_after_completion_returns_immediately(self):
        session = make_session()
        await session.start(REGION)
        await asyncio.wait_for(session.wait_complete(), timeout=2)

        state = await asyncio.wait_for(session.wait_complete(), timeout=0.1)
        assert state == ScanState.COMPLETE

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_scan_completes_with_all_results(self):
        session = make_session()
        received = []

        plan = await session.start(REGION, sink=received.append)
        assert session.state == ScanState.SCANNING

        state = await asyncio.wait_for(session.wait_complete(), timeout=2)

        assert state == ScanState.COMPLETE
        assert session.results == plan.prospects
        assert received == plan.reveals
        assert session.scan_id == plan.scan_id

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_completion_window(self):
        """Test that completion lands between the sweep and sweep plus grace."""
        session = make_session()

        await session.start(REGION)
        await asyncio.wait_for(session.wait_complete(), timeout=2)

        elapsed_ms = (session.completed_at - session.started_at) * 1000
        assert elapsed_ms >= FAST_POLICY.scan_duration_ms
        assert elapsed_ms <= FAST_POLICY.complete_after_ms + 100

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_async_sink(self):
        session = make_session()
        received = []

        async def sink(reveal):
            await asyncio.sleep(0)
            received.append(reveal.prospect.id)

        plan = await session.start(REGION, sink=sink)
        await asyncio.wait_for(session.wait_complete(), timeout=2)

        assert received == [p.id for p in plan.prospects]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failing_sink_does_not_stop_sweep(self):
        session = make_session()

        def sink(reveal):
            raise RuntimeError("display unavailable")

        plan = await session.start(REGION, sink=sink)
        state = await asyncio.wait_for(session.wait_complete(), timeout=2)

        assert state == ScanState.COMPLETE
        assert len(session.results) == len(plan.reveals)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_region_leaves_session_untouched(self):
        session = make_session()

        with pytest.raises(InvalidRegion):
            await session.start(DEGENERATE)

        assert session.state == ScanState.IDLE
        assert session.plan is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_region_does_not_disturb_running_scan(self):
        session = make_session()
        plan = await session.start(REGION)

        with pytest.raises(InvalidRegion):
            await session.start(DEGENERATE)

        assert session.scan_id == plan.scan_id
        assert await asyncio.wait_for(session.wait_complete(), timeout=2) == ScanState.COMPLETE


class TestScanSessionOverlap:
    """Tests for scans requested while another is running."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_restart_discards_first_scan(self):
        session = make_session(OverlapPolicy.RESTART)
        received = []

        await session.start(REGION, sink=received.append)
        second = await session.start(OTHER_REGION, sink=received.append)
        state = await asyncio.wait_for(session.wait_complete(), timeout=2)
        # Give any stale timers from the first scan a chance to fire
        await asyncio.sleep(FAST_POLICY.complete_after_ms / 1000)

        assert state == ScanState.COMPLETE
        assert session.results == second.prospects
        assert received == second.reveals

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_waiter_on_replaced_scan_sees_cancellation(self):
        session = make_session(OverlapPolicy.RESTART)
        await session.start(REGION)
        first_waiter = asyncio.ensure_future(session.wait_complete())
        await asyncio.sleep(0)

        await session.start(OTHER_REGION)

        assert await asyncio.wait_for(first_waiter, timeout=1) == ScanState.IDLE
        assert session.state == ScanState.SCANNING
        assert await asyncio.wait_for(session.wait_complete(), timeout=2) == ScanState.COMPLETE

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reject_raises_scan_in_progress(self):
        session = make_session(OverlapPolicy.REJECT)
        first = await session.start(REGION)

        with pytest.raises(ScanInProgress) as exc_info:
            await session.start(OTHER_REGION)

        assert exc_info.value.scan_id == first.scan_id
        assert session.plan is first
        assert await asyncio.wait_for(session.wait_complete(), timeout=2) == ScanState.COMPLETE

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_new_scan_allowed_after_completion(self):
        session = make_session(OverlapPolicy.REJECT)
        await session.start(REGION)
        await asyncio.wait_for(session.wait_complete(), timeout=2)

        plan = await session.start(OTHER_REGION)

        assert session.state == ScanState.SCANNING
        assert session.scan_id == plan.scan_id
        await asyncio.wait_for(session.wait_complete(), timeout=2)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_policy_accepts_strings(self):
        assert make_session("reject").overlap_policy == OverlapPolicy.REJECT


class TestScanSessionCancel:
    """Tests for cancellation."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cancel_stops_emission(self):
        session = make_session()
        received = []

        await session.start(REGION, sink=received.append)
        session.cancel()
        count = len(received)
        await asyncio.sleep(FAST_POLICY.complete_after_ms / 1000 + 0.05)

        assert session.state == ScanState.IDLE
        assert len(received) == count
        assert await session.wait_complete() == ScanState.IDLE

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cancel_when_idle_is_noop(self):
        session = make_session()
        session.cancel()
        assert session.state == ScanState.IDLE
