"""Tests for RichSyncProgress and NullSyncProgress."""

from __future__ import annotations

import io

from rich.console import Console

from resim_sync.cli.progress.rich import RichSyncProgress
from resim_sync.core.contracts.exceptions import ApplyError, ApplyPhaseError, SyncCancelledError
from resim_sync.core.contracts.progress import NullSyncProgress, SyncProgress


def _quiet_console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False)


class TestNullSyncProgress:
    """NullSyncProgress is a no-op implementation."""

    def test_implements_protocol(self) -> None:
        assert issubclass(NullSyncProgress, SyncProgress)

    def test_phase_lifecycle_is_noop(self) -> None:
        progress = NullSyncProgress()
        progress.phase_start("Fetch")
        progress.item_done("Fetch")
        progress.phase_done("Fetch")
        progress.phase_error("Fetch", RuntimeError("boom"))


class TestRichSyncProgress:
    """RichSyncProgress drives Rich progress bars."""

    def test_implements_protocol(self) -> None:
        assert issubclass(RichSyncProgress, SyncProgress)

    def test_context_manager(self) -> None:
        progress = RichSyncProgress(console=_quiet_console())
        with progress as p:
            assert p is progress

    def test_determinate_phase_completes(self) -> None:
        with RichSyncProgress(console=_quiet_console()) as progress:
            progress.phase_start("Experiences", total=3)
            progress.item_done("Experiences")
            progress.phase_done("Experiences")

            task = progress._progress.tasks[0]
            assert task.completed == 3
            assert task.description == "Experiences"
            assert task.fields["style"] == "green"
            assert task.fields["status"] == "[green]done"

    def test_indeterminate_phase_completes(self) -> None:
        with RichSyncProgress(console=_quiet_console()) as progress:
            progress.phase_start("Fetch")
            progress.phase_done("Fetch")

            task = progress._progress.tasks[0]
            assert task.total == 1
            assert task.completed == 1

    def test_phase_error_marks_task(self) -> None:
        with RichSyncProgress(console=_quiet_console()) as progress:
            progress.phase_start("Archive", total=1)
            progress.phase_error("Archive", RuntimeError("boom"))

            task = progress._progress.tasks[0]
            assert task.fields["style"] == "red"
            assert task.fields["status"] == "[red]failed"
            assert task.completed == 0

    def test_failed_items_are_counted(self) -> None:
        errors = [ApplyError("boom", operation="update experience", entity=name) for name in ("a", "b")]
        with RichSyncProgress(console=_quiet_console()) as progress:
            progress.phase_start("Experiences", total=3)
            progress.item_done("Experiences")
            progress.phase_error("Experiences", ApplyPhaseError("Experiences", errors))

            assert progress._progress.tasks[0].fields["status"] == "[red]2 failed"

    def test_cancellation_reports_completed_items(self) -> None:
        with RichSyncProgress(console=_quiet_console()) as progress:
            progress.phase_start("Archive", total=4)
            progress.phase_error("Archive", SyncCancelledError("Archive", 1))

            assert progress._progress.tasks[0].fields["status"] == "[yellow]cancelled after 1"

    def test_unrecognised_phase_uses_plain_style(self) -> None:
        with RichSyncProgress(console=_quiet_console()) as progress:
            progress.phase_start("Extra", total=1)

            assert progress._progress.tasks[0].fields["style"] == "white"

    def test_unknown_phase_events_are_noops(self) -> None:
        with RichSyncProgress(console=_quiet_console()) as progress:
            progress.item_done("Unknown")
            progress.phase_done("Unknown")
            progress.phase_error("Unknown", RuntimeError("boom"))

            assert progress._progress.tasks == []

    def test_phases_in_sync_order(self) -> None:
        with RichSyncProgress(console=_quiet_console()) as progress:
            for phase, total in [("Fetch", None), ("Experiences", 2), ("Test Suites", 1), ("Archive", 1)]:
                progress.phase_start(phase, total=total)
                for _ in range(total or 0):
                    progress.item_done(phase)
                progress.phase_done(phase)

            assert len(progress._progress.tasks) == 4
