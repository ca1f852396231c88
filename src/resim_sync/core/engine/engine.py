"""Core sync pipeline: fetch, plan, apply."""

from __future__ import annotations

import asyncio
import logging

from resim_sync.core.contracts.client import ExperienceSyncClient
from resim_sync.core.contracts.experience import SyncConfig
from resim_sync.core.contracts.plan import UpdatePlan
from resim_sync.core.contracts.progress import NullSyncProgress, SyncProgress
from resim_sync.core.contracts.sync import SyncResult
from resim_sync.core.engine.applier import PlanApplier
from resim_sync.core.engine.pool import DEFAULT_WORKERS
from resim_sync.core.fetch.state import StateFetcher
from resim_sync.core.planner.planner import compute_update_plan

_LOG = logging.getLogger(__name__)


class ExperienceSyncEngine:
    def __init__(
        self,
        client: ExperienceSyncClient,
        *,
        project_id: str = "",
        workers: int = DEFAULT_WORKERS,
        progress: SyncProgress | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        self._client = client
        self._project_id = project_id
        self._workers = workers
        self._progress: SyncProgress = progress or NullSyncProgress()
        self._cancel_event = cancel_event

    async def plan(self, config: SyncConfig) -> UpdatePlan:
        """Fetch the current state and plan against it without mutating anything."""
        state = await StateFetcher(self._client, max_concurrent=self._workers, progress=self._progress).fetch()
        return compute_update_plan(config, state)

    async def sync(self, config: SyncConfig) -> SyncResult:
        plan = await self.plan(config)
        applier = PlanApplier(
            self._client,
            workers=self._workers,
            progress=self._progress,
            cancel_event=self._cancel_event,
        )
        result = await applier.apply(plan, project_id=self._project_id)
        _LOG.info(
            "Sync finished: %d created, %d updated, %d restored, %d archived",
            len(result.created),
            len(result.updated),
            len(result.restored),
            len(result.archived),
        )
        return result

    async def clone(self) -> SyncConfig:
        """Build a configuration that reproduces the current active experiences.

        Test-suite membership is not fetched, so the result manages no suites.
        Experiences without locations are left out because the loader would
        reject them.
        """
        state = await StateFetcher(self._client, max_concurrent=self._workers, progress=self._progress).fetch()
        experiences = []
        for experience in sorted(state.experiences_by_name.values(), key=lambda e: e.name):
            if experience.archived:
                continue
            if not experience.locations:
                _LOG.warning("Skipping experience %r in clone: it has no locations", experience.name)
                continue
            experiences.append(experience.model_copy(deep=True))
        return SyncConfig(experiences=experiences)
