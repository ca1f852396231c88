"""Sync and clone commands."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import signal
from collections.abc import Iterator
from pathlib import Path

from resim_sync.cli.common import format_comma_or_none, plural
from resim_sync.cli.progress.rich import RichSyncProgress
from resim_sync.core.config import ClientSettings, build_settings, load_sync_config, write_sync_config
from resim_sync.core.contracts.exceptions import ConfigError
from resim_sync.core.contracts.experience import SyncConfig
from resim_sync.core.contracts.progress import SyncProgress
from resim_sync.core.contracts.sync import SyncResult


def format_sync_summary(result: SyncResult) -> str:
    lines = [
        "",
        "resim-sync - sync complete",
        "",
        f"  Project:      {result.project_id}",
        f"  Created:      {format_comma_or_none(result.created)}",
        f"  Updated:      {format_comma_or_none(result.updated)}",
        f"  Restored:     {format_comma_or_none(result.restored)}",
        f"  Archived:     {format_comma_or_none(result.archived)}",
        f"  Tags:         {result.tags_added} added, {result.tags_removed} removed",
        f"  Systems:      {result.systems_added} added",
        f"  Test suites:  {format_comma_or_none(result.test_suites_revised)}",
    ]
    if not result.has_changes:
        lines.append("  Status:       all experiences up to date")
    lines.append("")
    return "\n".join(lines)


def format_clone_summary(config: SyncConfig, path: Path) -> str:
    return f"\nresim-sync - cloned {plural(len(config.experiences), 'experience')} to {path}\n"


def settings_from_args(args: argparse.Namespace) -> ClientSettings:
    return build_settings(
        project=args.project,
        url=args.url,
        auth=args.auth,
        token=args.token,
        workers=args.workers,
    )


async def run_sync(args: argparse.Namespace) -> SyncResult | SyncConfig:
    import resim_sync.cli as cli

    settings = settings_from_args(args)
    config_path = Path(args.experience_config)
    if args.clone:
        if config_path.exists():
            raise ConfigError(f"refusing to overwrite existing file: {config_path}")
        config = None
    else:
        config = load_sync_config(config_path)

    cancel_event = asyncio.Event()
    with _cancel_on_sigterm(cancel_event), _progress(args.verbose) as progress:
        sdk = await cli.ResimSync.from_settings(settings, progress=progress, cancel_event=cancel_event)
        if config is not None:
            result = await sdk.sync(config)
        else:
            cloned = await sdk.clone()
            write_sync_config(cloned, config_path)

    if config is not None:
        print(cli._format_summary(result))
        return result
    print(format_clone_summary(cloned, config_path))
    return cloned


@contextlib.contextmanager
def _progress(verbose: bool) -> Iterator[SyncProgress | None]:
    if not verbose:
        yield None
        return
    with RichSyncProgress() as progress:
        yield progress


@contextlib.contextmanager
def _cancel_on_sigterm(cancel_event: asyncio.Event) -> Iterator[None]:
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGTERM, cancel_event.set)
    except (NotImplementedError, RuntimeError, ValueError):
        # Signal handlers are unavailable off the main thread and on Windows.
        yield
        return
    try:
        yield
    finally:
        loop.remove_signal_handler(signal.SIGTERM)


__all__ = ["format_clone_summary", "format_sync_summary", "run_sync", "settings_from_args"]
