"""CLI parser construction."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version


def _package_version() -> str:
    try:
        return version("resim-sync")
    except PackageNotFoundError:
        return "0.0.0"


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if parsed < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="resim-sync")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Reconcile a project's experiences with a YAML config")
    sync_parser.add_argument("--project", required=True, help="Name or ID of the project to sync")
    sync_parser.add_argument(
        "--experience-config",
        required=True,
        help="Path to the experience config YAML (written when --clone is set)",
    )
    sync_parser.add_argument(
        "--clone",
        action="store_true",
        help="Write the current experiences to --experience-config instead of syncing",
    )
    sync_parser.add_argument("--verbose", "-v", action="store_true", help="Show progress and info logging")
    sync_parser.add_argument("--url", default=None, help="API base URL (default: $RESIM_URL or the ReSim API)")
    sync_parser.add_argument(
        "--auth",
        choices=["env", "token"],
        default=None,
        help="Token source: 'env' reads RESIM_API_TOKEN, 'token' uses --token",
    )
    sync_parser.add_argument("--token", default=None, help="API token (implies --auth token)")
    sync_parser.add_argument(
        "--workers",
        type=_positive_int,
        default=None,
        help="Concurrent requests per phase (default: 16)",
    )

    return parser
