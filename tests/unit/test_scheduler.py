"""Tests for the health probe scheduler."""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from relayer_discovery.discovery.scheduler import HealthProbeScheduler
from relayer_discovery.domain.exceptions import StoreConnectionError
from relayer_discovery.infrastructure.store.memory import InMemoryMembershipStore


class FlakyStore(InMemoryMembershipStore):
    """In-memory store whose writes fail for selected members."""

    def __init__(self, failing: set[str]) -> None:
        super().__init__()
        self.failing = failing

    async def add(self, member: str) -> bool:
        if member in self.failing:
            raise StoreConnectionError("Redis add failed: connection reset", "add")
        return await super().add(member)

    async def remove(self, member: str) -> bool:
        if member in self.failing:
            raise StoreConnectionError("Redis remove failed: connection reset", "remove")
        return await super().remove(member)


async def wait_until(predicate, timeout: float = 1.0) -> None:
    async def _poll():
        while not predicate():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_poll(), timeout)


@pytest.fixture
def make_scheduler(store, prober, freshness):
    def _make(relayer_count: int = 3, interval_seconds: float = 10.0, **overrides):
        return HealthProbeScheduler(
            overrides.get("store", store),
            overrides.get("prober", prober),
            freshness,
            relayer_count=relayer_count,
            interval_seconds=interval_seconds,
        )

    return _make


class TestHealthCheckRound:
    """Test a single probe round."""

    @pytest.mark.asyncio
    async def test_all_healthy(self, make_scheduler, store, freshness):
        summary = await make_scheduler().run_round()

        assert await store.members() == {"oz-relayer-0", "oz-relayer-1", "oz-relayer-2"}
        assert summary.healthy == ["oz-relayer-0", "oz-relayer-1", "oz-relayer-2"]
        assert summary.total == 3
        assert summary.unhealthy == []
        assert summary.finished_at is not None
        assert len(freshness) == 3

    @pytest.mark.asyncio
    async def test_one_relayer_times_out(self, make_scheduler, store, freshness, relayer_pool):
        relayer_pool.outcomes["oz-relayer-1"] = httpx.ReadTimeout

        summary = await make_scheduler().run_round()

        assert await store.members() == {"oz-relayer-0", "oz-relayer-2"}
        assert summary.unhealthy == ["oz-relayer-1"]
        assert set(freshness.snapshot()) == {"oz-relayer-0", "oz-relayer-1", "oz-relayer-2"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "failing",
        [set(), {"oz-relayer-0"}, {"oz-relayer-1", "oz-relayer-3"}, {"oz-relayer-0", "oz-relayer-1", "oz-relayer-2", "oz-relayer-3", "oz-relayer-4"}],
    )
    async def test_round_totality(self, make_scheduler, store, freshness, relayer_pool, failing):
        """Test every relayer is timestamped and reconciled independently."""
        errors = [httpx.ConnectError, httpx.ReadTimeout, 500]
        for index, relayer_id in enumerate(sorted(failing)):
            relayer_pool.outcomes[relayer_id] = errors[index % len(errors)]

        await make_scheduler(relayer_count=5).run_round()

        all_ids = {f"oz-relayer-{i}" for i in range(5)}
        assert set(freshness.snapshot()) == all_ids
        assert await store.members() == all_ids - failing

    @pytest.mark.asyncio
    async def test_removes_previously_active_relayer(self, make_scheduler, store, relayer_pool):
        await store.add("oz-relayer-2")
        relayer_pool.outcomes["oz-relayer-2"] = 503

        await make_scheduler().run_round()

        assert "oz-relayer-2" not in await store.members()

    @pytest.mark.asyncio
    async def test_failed_relayer_rejoins_next_round(self, make_scheduler, store, relayer_pool):
        scheduler = make_scheduler()
        relayer_pool.outcomes["oz-relayer-1"] = httpx.ConnectError

        await scheduler.run_round()
        assert "oz-relayer-1" not in await store.members()

        del relayer_pool.outcomes["oz-relayer-1"]
        await scheduler.run_round()
        assert "oz-relayer-1" in await store.members()

    @pytest.mark.asyncio
    async def test_freshness_updated_every_round(self, make_scheduler, freshness, relayer_pool):
        scheduler = make_scheduler()
        relayer_pool.outcomes["oz-relayer-0"] = 500

        await scheduler.run_round()
        first = freshness.last_checked("oz-relayer-0")
        await asyncio.sleep(0.001)
        await scheduler.run_round()

        assert freshness.last_checked("oz-relayer-0") > first

    @pytest.mark.asyncio
    async def test_probes_run_concurrently(self, make_scheduler, relayer_pool):
        """Test no probe finishes before all have been issued."""
        all_started = asyncio.Event()

        async def gate(host: str) -> None:
            if len(relayer_pool.requests) == 3:
                all_started.set()
            await all_started.wait()

        relayer_pool.gate = gate

        summary = await asyncio.wait_for(make_scheduler().run_round(), timeout=2.0)

        assert len(summary.healthy) == 3

    @pytest.mark.asyncio
    async def test_store_failure_does_not_abort_round(self, make_scheduler, freshness):
        flaky = FlakyStore(failing={"oz-relayer-0"})
        await flaky.connect()

        summary = await make_scheduler(store=flaky).run_round()

        assert summary.store_errors == ["oz-relayer-0"]
        assert await flaky.members() == {"oz-relayer-1", "oz-relayer-2"}
        assert len(freshness) == 3

    @pytest.mark.asyncio
    async def test_raising_prober_treated_as_unhealthy(self, make_scheduler, store, prober):
        real_probe = prober.probe

        async def probe(relayer_id: str):
            if relayer_id == "oz-relayer-1":
                raise RuntimeError("prober bug")
            return await real_probe(relayer_id)

        prober.probe = AsyncMock(side_effect=probe)
        await store.add("oz-relayer-1")

        summary = await make_scheduler().run_round()

        assert summary.unhealthy == ["oz-relayer-1"]
        assert await store.members() == {"oz-relayer-0", "oz-relayer-2"}


class TestSchedulerLifecycle:
    """Test start/stop semantics."""

    @pytest.mark.asyncio
    async def test_stop_before_start(self, make_scheduler):
        scheduler = make_scheduler()

        await scheduler.stop()
        await scheduler.stop()

        assert scheduler.is_running is False

    @pytest.mark.asyncio
    async def test_start_runs_first_round_immediately(self, make_scheduler, store):
        scheduler = make_scheduler()

        await scheduler.start()
        try:
            assert await store.count() == 3
            assert scheduler.is_running is True
        finally:
            await scheduler.stop()

    @pytest.mark.asyncio
    async def test_stop_twice(self, make_scheduler):
        scheduler = make_scheduler()
        await scheduler.start()

        await scheduler.stop()
        await scheduler.stop()

        assert scheduler.is_running is False

    @pytest.mark.asyncio
    async def test_second_start_is_ignored(self, make_scheduler, relayer_pool):
        scheduler = make_scheduler()
        await scheduler.start()
        try:
            await scheduler.start()
            assert relayer_pool.total_requests == 3
        finally:
            await scheduler.stop()

    @pytest.mark.asyncio
    async def test_timer_repeats_rounds(self, make_scheduler, relayer_pool):
        scheduler = make_scheduler(interval_seconds=0.01)
        await scheduler.start()
        try:
            await wait_until(lambda: relayer_pool.total_requests >= 9)
        finally:
            await scheduler.stop()

    @pytest.mark.asyncio
    async def test_stop_halts_future_rounds(self, make_scheduler, relayer_pool):
        scheduler = make_scheduler(interval_seconds=0.01)
        await scheduler.start()
        await wait_until(lambda: relayer_pool.total_requests >= 6)

        await scheduler.stop()
        await asyncio.gather(*scheduler.in_flight_rounds)
        settled = relayer_pool.total_requests
        await asyncio.sleep(0.05)

        assert relayer_pool.total_requests == settled

    @pytest.mark.asyncio
    async def test_stop_leaves_in_flight_round_running(self, make_scheduler, store, relayer_pool):
        scheduler = make_scheduler(interval_seconds=0.01)
        await scheduler.start()

        release = asyncio.Event()

        async def gate(host: str) -> None:
            await release.wait()

        relayer_pool.gate = gate
        relayer_pool.outcomes["oz-relayer-0"] = 500
        await wait_until(lambda: len(scheduler.in_flight_rounds) > 0)

        await scheduler.stop()
        in_flight = scheduler.in_flight_rounds
        assert in_flight
        assert not any(task.cancelled() for task in in_flight)

        release.set()
        await asyncio.gather(*in_flight)

        assert "oz-relayer-0" not in await store.members()

    @pytest.mark.asyncio
    async def test_restart_after_stop(self, make_scheduler, relayer_pool):
        scheduler = make_scheduler()
        await scheduler.start()
        await scheduler.stop()

        await scheduler.start()
        try:
            assert relayer_pool.total_requests == 6
            assert scheduler.is_running is True
        finally:
            await scheduler.stop()
