"""Bounded worker pool used by every apply phase."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from resim_sync.core.contracts.exceptions import ApplyError, ApplyPhaseError, SyncCancelledError
from resim_sync.core.contracts.progress import NullSyncProgress, SyncProgress

_LOG = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_WORKERS = 16


async def run_concurrent(
    phase: str,
    items: Sequence[T],
    task: Callable[[T], Awaitable[None]],
    *,
    workers: int = DEFAULT_WORKERS,
    progress: SyncProgress | None = None,
    cancel_event: asyncio.Event | None = None,
) -> int:
    """Run *task* over *items* with at most *workers* in flight.

    Every item is attempted even when earlier ones fail. ``ApplyError``s are
    logged as they happen and raised together as ``ApplyPhaseError`` once the
    phase drains. Setting *cancel_event* stops workers from taking new items
    and aborts the in-flight ones.

    Returns:
        The number of completed items.

    Raises:
        ApplyPhaseError: At least one item failed.
        SyncCancelledError: *cancel_event* was set before every item ran.
    """
    if not items:
        return 0
    progress = progress or NullSyncProgress()
    queue: asyncio.Queue[T] = asyncio.Queue()
    for item in items:
        queue.put_nowait(item)
    errors: list[ApplyError] = []
    completed = 0

    async def worker() -> None:
        nonlocal completed
        while cancel_event is None or not cancel_event.is_set():
            try:
                item = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            try:
                await task(item)
            except ApplyError as exc:
                _LOG.error("%s: %s failed for %s: %s", phase, exc.operation, exc.entity, exc)
                errors.append(exc)
            completed += 1
            progress.item_done(phase)

    _LOG.info("%s: %d item(s)", phase, len(items))
    progress.phase_start(phase, total=len(items))
    worker_tasks = [asyncio.create_task(worker()) for _ in range(min(workers, len(items)))]
    drained = asyncio.gather(*worker_tasks)
    cancel_waiter = asyncio.create_task(cancel_event.wait()) if cancel_event is not None else None
    try:
        if cancel_waiter is None:
            await drained
        else:
            await asyncio.wait({drained, cancel_waiter}, return_when=asyncio.FIRST_COMPLETED)
            if drained.done():
                drained.result()
    except BaseException as exc:
        progress.phase_error(phase, exc)
        raise
    finally:
        for worker_task in worker_tasks:
            worker_task.cancel()
        await asyncio.gather(*worker_tasks, return_exceptions=True)
        if drained.done() and not drained.cancelled():
            drained.exception()
        if cancel_waiter is not None:
            cancel_waiter.cancel()

    if completed < len(items):
        cancelled = SyncCancelledError(phase, completed)
        progress.phase_error(phase, cancelled)
        raise cancelled
    if errors:
        phase_error = ApplyPhaseError(phase, errors)
        progress.phase_error(phase, phase_error)
        raise phase_error
    progress.phase_done(phase)
    return completed
