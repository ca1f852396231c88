"""SDK composition root for resim-sync."""

from __future__ import annotations

import asyncio

import httpx

from resim_sync.core.auth import create_token_resolver
from resim_sync.core.config import ClientSettings, load_sync_config, write_sync_config
from resim_sync.core.contracts.client import ExperienceSyncClient
from resim_sync.core.contracts.experience import SyncConfig
from resim_sync.core.contracts.plan import UpdatePlan
from resim_sync.core.contracts.progress import SyncProgress
from resim_sync.core.contracts.sync import SyncResult
from resim_sync.core.engine import ExperienceSyncEngine
from resim_sync.core.providers.resim import ResimApiClient

__all__ = ["ResimSync", "load_sync_config", "write_sync_config"]


class ResimSync:
    """resim-sync SDK public API."""

    def __init__(
        self,
        *,
        client: ExperienceSyncClient,
        settings: ClientSettings,
        progress: SyncProgress | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        self._client = client
        self._settings = settings
        self._progress = progress
        self._cancel_event = cancel_event

    @classmethod
    async def from_settings(
        cls,
        settings: ClientSettings,
        *,
        progress: SyncProgress | None = None,
        cancel_event: asyncio.Event | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ResimSync:
        token = await create_token_resolver(settings).resolve()
        client = ResimApiClient(
            project=settings.project,
            token=token,
            url=settings.url,
            timeout_seconds=settings.timeout_seconds,
            max_retries=settings.max_retries,
            max_connections=settings.workers,
            transport=transport,
        )
        return cls(client=client, settings=settings, progress=progress, cancel_event=cancel_event)

    async def sync(self, config: SyncConfig) -> SyncResult:
        """Reconcile the project with *config*."""
        async with self._client as client:
            return await self._engine(client).sync(config)

    async def plan(self, config: SyncConfig) -> UpdatePlan:
        """Compute the plan for *config* without applying it."""
        async with self._client as client:
            return await self._engine(client).plan(config)

    async def clone(self) -> SyncConfig:
        """Read the project's active experiences into a configuration."""
        async with self._client as client:
            return await self._engine(client).clone()

    def _engine(self, client: ExperienceSyncClient) -> ExperienceSyncEngine:
        return ExperienceSyncEngine(
            client,
            project_id=getattr(client, "project_id", "") or self._settings.project,
            workers=self._settings.workers,
            progress=self._progress,
            cancel_event=self._cancel_event,
        )
