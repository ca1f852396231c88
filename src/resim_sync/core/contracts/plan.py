"""Update-plan contracts produced by the planner and consumed by the applier."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from resim_sync.core.contracts.experience import Experience


class MatchKind(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    RESTORE = "restore"
    ARCHIVE = "archive"
    NOOP = "noop"


@dataclass
class ExperienceMatch:
    """A desired experience paired with the current record it replaces, if any."""

    new: Experience
    original: Experience | None = None

    @property
    def kind(self) -> MatchKind:
        if self.original is None:
            return MatchKind.NOOP if self.new.archived else MatchKind.CREATE
        if self.new.archived:
            return MatchKind.NOOP if self.original.archived else MatchKind.ARCHIVE
        if self.original.archived:
            return MatchKind.RESTORE
        return MatchKind.UPDATE


@dataclass
class TagUpdates:
    name: str
    tag_id: str
    additions: list[Experience] = field(default_factory=list)
    removals: list[Experience] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.additions and not self.removals


@dataclass
class SystemUpdates:
    name: str
    system_id: str
    additions: list[Experience] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.additions


@dataclass
class TestSuiteUpdate:
    __test__ = False

    name: str
    test_suite_id: str
    experiences: list[Experience] = field(default_factory=list)


@dataclass
class UpdatePlan:
    """Everything needed to move the backend to the configured state.

    ``matches`` is the single owner of the experience handles; every other
    collection references the same ``Experience`` objects.
    """

    matches: dict[str, ExperienceMatch] = field(default_factory=dict)
    tag_updates: dict[str, TagUpdates] = field(default_factory=dict)
    system_updates: dict[str, SystemUpdates] = field(default_factory=dict)
    test_suite_updates: dict[str, TestSuiteUpdate] = field(default_factory=dict)

    def matches_of_kind(self, *kinds: MatchKind) -> list[ExperienceMatch]:
        return [match for match in self.matches.values() if match.kind in kinds]
