"""Database snapshot contracts consumed by the planner."""

from __future__ import annotations

from dataclasses import dataclass, field

from resim_sync.core.contracts.experience import Experience


@dataclass
class TagSet:
    name: str
    tag_id: str
    experience_ids: set[str] = field(default_factory=set)


@dataclass
class SystemSet:
    name: str
    system_id: str
    experience_ids: set[str] = field(default_factory=set)


@dataclass
class DatabaseState:
    """Current backend state for one project.

    Every experience is pre-populated with the tags and systems it currently
    belongs to.
    """

    experiences_by_name: dict[str, Experience] = field(default_factory=dict)
    tag_sets_by_name: dict[str, TagSet] = field(default_factory=dict)
    system_sets_by_name: dict[str, SystemSet] = field(default_factory=dict)
    test_suite_ids_by_name: dict[str, str] = field(default_factory=dict)
