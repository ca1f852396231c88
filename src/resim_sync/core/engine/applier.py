"""Execute an ``UpdatePlan`` against the backend in four ordered phases."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from functools import partial
from typing import TypeVar

from resim_sync.core.contracts.client import ExperienceSyncClient
from resim_sync.core.contracts.exceptions import ApiError, ApplyError
from resim_sync.core.contracts.experience import Experience
from resim_sync.core.contracts.plan import (
    ExperienceMatch,
    MatchKind,
    SystemUpdates,
    TagUpdates,
    TestSuiteUpdate,
    UpdatePlan,
)
from resim_sync.core.contracts.progress import NullSyncProgress, SyncProgress
from resim_sync.core.contracts.sync import SyncResult
from resim_sync.core.engine.pool import DEFAULT_WORKERS, run_concurrent

_LOG = logging.getLogger(__name__)

T = TypeVar("T")

EXPERIENCES_PHASE = "Experiences"
TEST_SUITES_PHASE = "Test Suites"
TAGS_AND_SYSTEMS_PHASE = "Tags & Systems"
ARCHIVE_PHASE = "Archive"

_ALWAYS_UPDATED = ("name", "description", "cache_exempt", "locations")
# Left untouched on the backend unless the configuration sets them.
_UPDATED_WHEN_SET = ("container_timeout_seconds", "profile", "environment_variables", "custom_fields")

_Operation = Callable[[], Awaitable[None]]


def update_mask_for(experience: Experience) -> list[str]:
    """Fields an in-place update of *experience* overwrites."""
    mask = list(_ALWAYS_UPDATED)
    mask.extend(field for field in _UPDATED_WHEN_SET if getattr(experience, field) is not None)
    return mask


def needs_update(match: ExperienceMatch) -> bool:
    """Whether an in-place update would change anything on the backend."""
    if match.original is None:
        return True
    if match.original.archived and not match.new.archived:
        return True
    return any(getattr(match.new, field) != getattr(match.original, field) for field in update_mask_for(match.new))


class PlanApplier:
    """Applies a plan phase by phase: experiences, test suites, tags and systems, archive.

    A phase only starts once the previous one has drained. The first phase that
    records an error stops the run with ``ApplyPhaseError``.
    """

    def __init__(
        self,
        client: ExperienceSyncClient,
        *,
        workers: int = DEFAULT_WORKERS,
        progress: SyncProgress | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        self._client = client
        self._workers = workers
        self._progress: SyncProgress = progress or NullSyncProgress()
        self._cancel_event = cancel_event

    async def apply(self, plan: UpdatePlan, *, project_id: str = "") -> SyncResult:
        result = SyncResult(project_id=project_id)

        pending: list[ExperienceMatch] = []
        for match in plan.matches_of_kind(MatchKind.CREATE, MatchKind.UPDATE, MatchKind.RESTORE):
            if needs_update(match):
                pending.append(match)
            else:
                result.unchanged.append(match.new.name)
        await self._run(EXPERIENCES_PHASE, pending, partial(self._apply_experience, result=result))

        await self._run(
            TEST_SUITES_PHASE,
            list(plan.test_suite_updates.values()),
            partial(self._revise_test_suite, result=result),
        )

        operations: list[_Operation] = []
        for tag_updates in plan.tag_updates.values():
            operations.extend(self._tag_operations(tag_updates, result))
        for system_updates in plan.system_updates.values():
            if system_updates.additions:
                operations.append(partial(self._add_system, system_updates, result))
        await self._run(TAGS_AND_SYSTEMS_PHASE, operations, _invoke)

        to_archive = plan.matches_of_kind(MatchKind.ARCHIVE)
        if to_archive:
            await self._run(ARCHIVE_PHASE, [to_archive], partial(self._archive, result=result))

        return result

    async def _run(self, phase: str, items: list, task: Callable[..., Awaitable[None]]) -> None:
        await run_concurrent(
            phase,
            items,
            task,
            workers=self._workers,
            progress=self._progress,
            cancel_event=self._cancel_event,
        )

    async def _apply_experience(self, match: ExperienceMatch, *, result: SyncResult) -> None:
        new = match.new
        if match.original is None:
            new.experience_id = await _call("create experience", new.name, self._client.create_experience(new))
            _LOG.info("Created experience %r (%s)", new.name, new.experience_id)
            result.created.append(new.name)
            return

        experience_id = _require_id(new, "update experience")
        if match.original.archived:
            await _call("restore experience", new.name, self._client.restore_experience(experience_id))
            _LOG.info("Restored experience %r", new.name)
        await _call(
            "update experience",
            new.name,
            self._client.update_experience(experience_id, new, update_mask_for(new)),
        )
        (result.restored if match.original.archived else result.updated).append(new.name)

    async def _revise_test_suite(self, update: TestSuiteUpdate, *, result: SyncResult) -> None:
        experience_ids = [_require_id(e, "revise test suite", entity=update.name) for e in update.experiences]
        await _call(
            "revise test suite",
            update.name,
            self._client.revise_test_suite(update.test_suite_id, experience_ids),
        )
        result.test_suites_revised.append(update.name)

    def _tag_operations(self, updates: TagUpdates, result: SyncResult) -> list[_Operation]:
        operations: list[_Operation] = []
        if updates.additions:
            operations.append(partial(self._add_tag, updates, result))
        # The API only removes one (tag, experience) pair per call.
        for experience in updates.removals:
            operations.append(partial(self._remove_tag, updates, experience, result))
        return operations

    async def _add_tag(self, updates: TagUpdates, result: SyncResult) -> None:
        experience_ids = [_require_id(e, "add tag", entity=updates.name) for e in updates.additions]
        await _call("add tag", updates.name, self._client.add_tags_to_experiences([updates.tag_id], experience_ids))
        result.tags_added += len(experience_ids)

    async def _remove_tag(self, updates: TagUpdates, experience: Experience, result: SyncResult) -> None:
        experience_id = _require_id(experience, "remove tag", entity=updates.name)
        await _call(
            "remove tag",
            f"{updates.name}/{experience.name}",
            self._client.remove_tag_from_experience(updates.tag_id, experience_id),
        )
        result.tags_removed += 1

    async def _add_system(self, updates: SystemUpdates, result: SyncResult) -> None:
        experience_ids = [_require_id(e, "add system", entity=updates.name) for e in updates.additions]
        await _call(
            "add system",
            updates.name,
            self._client.add_systems_to_experiences([updates.system_id], experience_ids),
        )
        result.systems_added += len(experience_ids)

    async def _archive(self, matches: list[ExperienceMatch], *, result: SyncResult) -> None:
        experience_ids = [_require_id(match.new, "archive experiences") for match in matches]
        await _call(
            "archive experiences",
            f"{len(experience_ids)} experience(s)",
            self._client.bulk_archive_experiences(experience_ids),
        )
        _LOG.info("Archived %d experience(s)", len(experience_ids))
        result.archived.extend(match.new.name for match in matches)


async def _invoke(operation: _Operation) -> None:
    await operation()


async def _call(operation: str, entity: str, awaitable: Awaitable[T]) -> T:
    try:
        return await awaitable
    except ApiError as exc:
        raise ApplyError(
            f"failed to {operation}: {exc}",
            operation=operation,
            entity=entity,
            http_status=exc.status_code,
            body=exc.body,
        ) from exc


def _require_id(experience: Experience, operation: str, *, entity: str | None = None) -> str:
    if experience.experience_id is None:
        raise ApplyError(
            f"experience {experience.name!r} has no id; it may have failed to be created",
            operation=operation,
            entity=entity or experience.name,
        )
    return experience.experience_id
