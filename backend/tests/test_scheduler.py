"""SyncScheduler: cycle counting, failure tolerance, start/stop."""

import asyncio

import pytest

from cricket_api.services.scheduler import SyncScheduler


async def _wait_for(predicate, timeout: float = 1.0) -> None:
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)


def test_rejects_non_positive_interval():
    async def run():
        return None

    with pytest.raises(ValueError):
        SyncScheduler(run, interval_seconds=0)


@pytest.mark.asyncio
async def test_run_once_returns_result_and_counts():
    async def run():
        return ["done"]

    scheduler = SyncScheduler(run, interval_seconds=60)

    assert await scheduler.run_once() == ["done"]
    assert scheduler.cycles == 1
    assert not scheduler.is_running


@pytest.mark.asyncio
async def test_background_loop_repeats_and_survives_failures():
    calls = []

    async def run():
        calls.append(len(calls))
        if len(calls) == 1:
            raise RuntimeError("upstream down")

    scheduler = SyncScheduler(run, interval_seconds=0.01)
    await scheduler.start()
    try:
        await _wait_for(lambda: len(calls) >= 3)
    finally:
        await scheduler.stop()

    assert not scheduler.is_running
    # The failing first cycle is not counted; later ones are
    assert scheduler.cycles >= 2


@pytest.mark.asyncio
async def test_delayed_start_waits_one_interval():
    calls = []

    async def run():
        calls.append(1)

    scheduler = SyncScheduler(run, interval_seconds=30, run_immediately=False)
    await scheduler.start()
    await asyncio.sleep(0.05)
    await scheduler.stop()

    assert calls == []


@pytest.mark.asyncio
async def test_cycles_never_overlap():
    active = 0
    peak = 0

    async def run():
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1

    scheduler = SyncScheduler(run, interval_seconds=60)
    await asyncio.gather(*(scheduler.run_once() for _ in range(3)))

    assert peak == 1
    assert scheduler.cycles == 3


@pytest.mark.asyncio
async def test_start_twice_and_stop_twice_are_harmless():
    async def run():
        return None

    scheduler = SyncScheduler(run, interval_seconds=30, run_immediately=False)
    await scheduler.start()
    await scheduler.start()
    assert scheduler.is_running

    await scheduler.stop()
    await scheduler.stop()
    assert not scheduler.is_running
