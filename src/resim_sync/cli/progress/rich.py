"""Rich-based sync progress display."""

from __future__ import annotations

from types import TracebackType

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TaskID, TextColumn, TimeElapsedColumn

from resim_sync.core.contracts.exceptions import ApplyPhaseError, SyncCancelledError
from resim_sync.core.contracts.progress import SyncProgress

_PHASE_STYLES = {
    "Fetch": "cyan",
    "Experiences": "green",
    "Test Suites": "blue",
    "Tags & Systems": "magenta",
    "Archive": "yellow",
}


def _failure_status(error: BaseException) -> str:
    if isinstance(error, SyncCancelledError):
        return f"[yellow]cancelled after {error.completed}"
    if isinstance(error, ApplyPhaseError):
        return f"[red]{len(error.errors)} failed"
    return "[red]failed"


class RichSyncProgress(SyncProgress):
    """One progress row per sync phase, rendered on stderr."""

    def __init__(self, console: Console | None = None) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[{task.fields[style]}]{task.description:>14}"),
            BarColumn(),
            MofNCompleteColumn(),
            TextColumn("{task.fields[status]}"),
            TimeElapsedColumn(),
            console=console or Console(stderr=True),
        )
        # Indeterminate phases (the fetch) are closed out as 1/1.
        self._rows: dict[str, tuple[TaskID, int]] = {}

    def __enter__(self) -> RichSyncProgress:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def phase_start(self, phase: str, total: int | None = None) -> None:
        task_id = self._progress.add_task(phase, total=total, style=_PHASE_STYLES.get(phase, "white"), status="")
        self._rows[phase] = (task_id, total or 1)

    def item_done(self, phase: str) -> None:
        if phase in self._rows:
            self._progress.advance(self._rows[phase][0])

    def phase_done(self, phase: str) -> None:
        if phase not in self._rows:
            return
        task_id, total = self._rows[phase]
        self._progress.update(task_id, total=total, completed=total, status="[green]done")

    def phase_error(self, phase: str, error: BaseException) -> None:
        if phase not in self._rows:
            return
        task_id, _ = self._rows[phase]
        self._progress.update(task_id, style="red", status=_failure_status(error))
        self._progress.stop_task(task_id)
