"""REST collaborator contract used by the fetcher and the applier."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import TracebackType
from typing import Generic, TypeVar

from resim_sync.core.contracts.experience import Experience

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a list call. An empty or missing token ends pagination."""

    items: list[T] = field(default_factory=list)
    next_page_token: str | None = None


@dataclass(frozen=True)
class TagRef:
    name: str
    tag_id: str


@dataclass(frozen=True)
class SystemRef:
    name: str
    system_id: str


@dataclass(frozen=True)
class TestSuiteRef:
    __test__ = False

    name: str
    test_suite_id: str
    revision: int = 0


class ExperienceSyncClient(ABC):
    """Project-scoped operations required by experience sync.

    Implementations raise ``ApiError`` for any failed call.
    """

    @abstractmethod
    async def __aenter__(self) -> ExperienceSyncClient: ...  # pragma: no cover

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    async def list_experiences(
        self, *, archived: bool, page_token: str | None = None
    ) -> Page[Experience]: ...  # pragma: no cover

    @abstractmethod
    async def list_experience_tags(self, *, page_token: str | None = None) -> Page[TagRef]: ...  # pragma: no cover

    @abstractmethod
    async def list_experiences_for_tag(
        self, tag_id: str, *, archived: bool, page_token: str | None = None
    ) -> Page[str]: ...  # pragma: no cover

    @abstractmethod
    async def list_systems(self, *, page_token: str | None = None) -> Page[SystemRef]: ...  # pragma: no cover

    @abstractmethod
    async def list_experiences_for_system(
        self, system_id: str, *, archived: bool, page_token: str | None = None
    ) -> Page[str]: ...  # pragma: no cover

    @abstractmethod
    async def list_test_suites(self, *, page_token: str | None = None) -> Page[TestSuiteRef]: ...  # pragma: no cover

    @abstractmethod
    async def create_experience(self, experience: Experience) -> str: ...  # pragma: no cover

    @abstractmethod
    async def update_experience(
        self, experience_id: str, experience: Experience, update_mask: list[str]
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    async def restore_experience(self, experience_id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def bulk_archive_experiences(self, experience_ids: list[str]) -> None: ...  # pragma: no cover

    @abstractmethod
    async def add_tags_to_experiences(
        self, tag_ids: list[str], experience_ids: list[str]
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    async def remove_tag_from_experience(self, tag_id: str, experience_id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def add_systems_to_experiences(
        self, system_ids: list[str], experience_ids: list[str]
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    async def revise_test_suite(self, test_suite_id: str, experience_ids: list[str]) -> None: ...  # pragma: no cover
