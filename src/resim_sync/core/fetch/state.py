"""Build a ``DatabaseState`` snapshot from paginated list calls."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from resim_sync.core.contracts.client import ExperienceSyncClient, Page, SystemRef, TagRef
from resim_sync.core.contracts.exceptions import ApiError, FetchError
from resim_sync.core.contracts.experience import Experience
from resim_sync.core.contracts.progress import NullSyncProgress, SyncProgress
from resim_sync.core.contracts.state import DatabaseState, SystemSet, TagSet

_LOG = logging.getLogger(__name__)

T = TypeVar("T")

FETCH_PHASE = "Fetch"
_MAX_PAGES = 10_000


class StateFetcher:
    """Fetches the current project state, fanning independent list calls out concurrently."""

    def __init__(
        self,
        client: ExperienceSyncClient,
        *,
        max_concurrent: int = 16,
        progress: SyncProgress | None = None,
    ) -> None:
        self._client = client
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._progress: SyncProgress = progress or NullSyncProgress()

    async def fetch(self) -> DatabaseState:
        self._progress.phase_start(FETCH_PHASE)
        try:
            state = await self._fetch()
        except BaseException as exc:
            self._progress.phase_error(FETCH_PHASE, exc)
            raise
        self._progress.phase_done(FETCH_PHASE)
        return state

    async def _fetch(self) -> DatabaseState:
        client = self._client
        try:
            async with asyncio.TaskGroup() as tg:
                active_task = tg.create_task(
                    self._collect(
                        "list experiences",
                        lambda token: client.list_experiences(archived=False, page_token=token),
                    )
                )
                archived_task = tg.create_task(
                    self._collect(
                        "list archived experiences",
                        lambda token: client.list_experiences(archived=True, page_token=token),
                    )
                )
                tags_task = tg.create_task(self._tag_sets())
                systems_task = tg.create_task(self._system_sets())
                suites_task = tg.create_task(
                    self._collect("list test suites", lambda token: client.list_test_suites(page_token=token))
                )
        except* FetchError as error_group:
            raise error_group.exceptions[0] from None

        state = DatabaseState(
            experiences_by_name=_merge_experiences(active_task.result(), archived_task.result()),
            tag_sets_by_name=tags_task.result(),
            system_sets_by_name=systems_task.result(),
            test_suite_ids_by_name={suite.name: suite.test_suite_id for suite in suites_task.result()},
        )
        _attach_memberships(state)
        _LOG.info(
            "Fetched %d experience(s), %d tag(s), %d system(s), %d test suite(s)",
            len(state.experiences_by_name),
            len(state.tag_sets_by_name),
            len(state.system_sets_by_name),
            len(state.test_suite_ids_by_name),
        )
        return state

    async def _tag_sets(self) -> dict[str, TagSet]:
        client = self._client
        tags: list[TagRef] = await self._collect(
            "list experience tags", lambda token: client.list_experience_tags(page_token=token)
        )
        try:
            async with asyncio.TaskGroup() as tg:
                member_tasks = {tag.name: tg.create_task(self._tag_members(tag)) for tag in tags}
        except* FetchError as error_group:
            raise error_group.exceptions[0] from None
        return {
            tag.name: TagSet(name=tag.name, tag_id=tag.tag_id, experience_ids=member_tasks[tag.name].result())
            for tag in tags
        }

    async def _tag_members(self, tag: TagRef) -> set[str]:
        client = self._client
        members: set[str] = set()
        for archived in (False, True):
            members.update(
                await self._collect(
                    f"list experiences for tag {tag.name}",
                    lambda token, archived=archived: client.list_experiences_for_tag(
                        tag.tag_id, archived=archived, page_token=token
                    ),
                )
            )
        return members

    async def _system_sets(self) -> dict[str, SystemSet]:
        client = self._client
        systems: list[SystemRef] = await self._collect(
            "list systems", lambda token: client.list_systems(page_token=token)
        )
        try:
            async with asyncio.TaskGroup() as tg:
                member_tasks = {system.name: tg.create_task(self._system_members(system)) for system in systems}
        except* FetchError as error_group:
            raise error_group.exceptions[0] from None
        return {
            system.name: SystemSet(
                name=system.name,
                system_id=system.system_id,
                experience_ids=member_tasks[system.name].result(),
            )
            for system in systems
        }

    async def _system_members(self, system: SystemRef) -> set[str]:
        client = self._client
        members: set[str] = set()
        for archived in (False, True):
            members.update(
                await self._collect(
                    f"list experiences for system {system.name}",
                    lambda token, archived=archived: client.list_experiences_for_system(
                        system.system_id, archived=archived, page_token=token
                    ),
                )
            )
        return members

    async def _collect(
        self,
        operation: str,
        fetch_page: Callable[[str | None], Awaitable[Page[T]]],
    ) -> list[T]:
        items: list[T] = []
        token: str | None = None
        for _ in range(_MAX_PAGES):
            try:
                async with self._semaphore:
                    page = await fetch_page(token)
            except ApiError as exc:
                raise FetchError(operation, exc) from exc
            items.extend(page.items)
            token = page.next_page_token
            if not token or not page.items:
                return items
        raise FetchError(operation, RuntimeError("pagination did not terminate"))


def _merge_experiences(active: list[Experience], archived: list[Experience]) -> dict[str, Experience]:
    by_name = {experience.name: experience for experience in archived}
    for experience in active:
        if experience.name in by_name:
            _LOG.warning("Experience %r is both active and archived; using the active record", experience.name)
        by_name[experience.name] = experience
    return by_name


def _attach_memberships(state: DatabaseState) -> None:
    for experience in state.experiences_by_name.values():
        experience_id = experience.experience_id
        if experience_id is None:
            continue
        experience.tags = sorted(
            name for name, tag_set in state.tag_sets_by_name.items() if experience_id in tag_set.experience_ids
        )
        experience.systems = sorted(
            name
            for name, system_set in state.system_sets_by_name.items()
            if experience_id in system_set.experience_ids
        )
