from __future__ import annotations

import asyncio

import pytest

from resim_sync.core.contracts.exceptions import ApplyError, ApplyPhaseError, SyncCancelledError
from resim_sync.core.engine import run_concurrent
from tests.fakes.progress import RecordingProgress


def _apply_error(item: int) -> ApplyError:
    return ApplyError(f"item {item} failed", operation="test", entity=str(item), http_status=500)


@pytest.mark.asyncio
async def test_empty_phase_does_nothing() -> None:
    progress = RecordingProgress()

    async def task(item: int) -> None:
        raise AssertionError("never called")

    assert await run_concurrent("Phase", [], task, progress=progress) == 0
    assert progress.events == []


@pytest.mark.asyncio
async def test_runs_every_item_and_reports_progress() -> None:
    progress = RecordingProgress()
    seen: list[int] = []

    async def task(item: int) -> None:
        await asyncio.sleep(0)
        seen.append(item)

    completed = await run_concurrent("Phase", list(range(5)), task, workers=2, progress=progress)

    assert completed == 5
    assert sorted(seen) == [0, 1, 2, 3, 4]
    assert progress.totals == {"Phase": 5}
    assert progress.events[0] == ("start", "Phase")
    assert progress.events.count(("item", "Phase")) == 5
    assert progress.events[-1] == ("done", "Phase")


@pytest.mark.asyncio
async def test_bounds_in_flight_items() -> None:
    in_flight = 0
    peak = 0

    async def task(item: int) -> None:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.001)
        in_flight -= 1

    await run_concurrent("Phase", list(range(40)), task, workers=3)

    assert peak == 3


@pytest.mark.asyncio
async def test_collects_every_error_after_draining() -> None:
    progress = RecordingProgress()
    seen: list[int] = []

    async def task(item: int) -> None:
        seen.append(item)
        if item % 2:
            raise _apply_error(item)

    with pytest.raises(ApplyPhaseError) as exc_info:
        await run_concurrent("Phase", list(range(6)), task, workers=2, progress=progress)

    assert sorted(seen) == [0, 1, 2, 3, 4, 5]
    assert exc_info.value.phase == "Phase"
    assert sorted(error.entity for error in exc_info.value.errors) == ["1", "3", "5"]
    assert progress.events[-1] == ("error", "Phase")
    assert progress.errors == [exc_info.value]


@pytest.mark.asyncio
async def test_unexpected_exceptions_propagate() -> None:
    progress = RecordingProgress()

    async def task(item: int) -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        await run_concurrent("Phase", [1], task, progress=progress)

    assert progress.events[-1] == ("error", "Phase")


@pytest.mark.asyncio
async def test_cancel_stops_taking_new_items() -> None:
    cancel_event = asyncio.Event()
    progress = RecordingProgress()
    started: list[int] = []

    async def task(item: int) -> None:
        started.append(item)
        if item == 2:
            cancel_event.set()

    with pytest.raises(SyncCancelledError) as exc_info:
        await run_concurrent(
            "Phase", list(range(10)), task, workers=1, progress=progress, cancel_event=cancel_event
        )

    assert started == [0, 1, 2]
    assert exc_info.value.phase == "Phase"
    assert exc_info.value.completed == 3
    assert progress.events[-1] == ("error", "Phase")


@pytest.mark.asyncio
async def test_cancel_aborts_in_flight_items() -> None:
    cancel_event = asyncio.Event()
    finished: list[int] = []

    async def task(item: int) -> None:
        if item == 0:
            await asyncio.sleep(0)
            cancel_event.set()
            return
        await asyncio.sleep(10)
        finished.append(item)

    with pytest.raises(SyncCancelledError) as exc_info:
        await run_concurrent("Phase", list(range(4)), task, workers=4, cancel_event=cancel_event)

    assert finished == []
    assert exc_info.value.completed == 1


@pytest.mark.asyncio
async def test_cancel_before_start_runs_nothing() -> None:
    cancel_event = asyncio.Event()
    cancel_event.set()
    started: list[int] = []

    async def task(item: int) -> None:
        started.append(item)

    with pytest.raises(SyncCancelledError) as exc_info:
        await run_concurrent("Phase", [1, 2], task, cancel_event=cancel_event)

    assert started == []
    assert exc_info.value.completed == 0
