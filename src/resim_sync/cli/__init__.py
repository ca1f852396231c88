"""Command-line interface for resim-sync."""

from __future__ import annotations

import asyncio
import logging as logging

from resim_sync import ResimSync as ResimSync
from resim_sync.cli.app import main as main
from resim_sync.cli.commands import sync as sync_command
from resim_sync.cli.parser import build_parser as build_parser

_format_summary = sync_command.format_sync_summary
_run_sync = sync_command.run_sync

__all__ = ["ResimSync", "asyncio", "build_parser", "main"]
