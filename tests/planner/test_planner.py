from __future__ import annotations

import pytest

from resim_sync.core.contracts.exceptions import AmbiguousRenameError, PlanningError, UnknownOrDuplicateIdError
from resim_sync.core.contracts.experience import Experience, SyncConfig, TestSuiteConfig
from resim_sync.core.contracts.plan import MatchKind
from resim_sync.core.contracts.state import DatabaseState, SystemSet, TagSet
from resim_sync.core.planner import compute_update_plan
from tests.fakes.factories import ID_A, ID_B, make_experience


def _state(*experiences: Experience, **kwargs: object) -> DatabaseState:
    return DatabaseState(experiences_by_name={e.name: e for e in experiences}, **kwargs)


def test_create_one_experience_from_empty_state() -> None:
    config = SyncConfig(experiences=[Experience(name="A", description="d", locations=["s3://b/o"])])

    plan = compute_update_plan(config, DatabaseState())

    assert list(plan.matches) == ["A"]
    assert plan.matches["A"].original is None
    assert plan.tag_updates == {}
    assert plan.system_updates == {}
    assert plan.test_suite_updates == {}


def test_archive_when_absent_from_config() -> None:
    plan = compute_update_plan(SyncConfig(), _state(make_experience("A", ID_A)))

    assert [m.kind for m in plan.matches.values()] == [MatchKind.ARCHIVE]
    assert plan.matches["A"].new.archived is True


def test_rename_by_id_keeps_the_id() -> None:
    config = SyncConfig(experiences=[make_experience("new", ID_B)])

    plan = compute_update_plan(config, _state(make_experience("old", ID_B)))

    match = plan.matches["new"]
    assert match.original is not None
    assert match.original.name == "old"
    assert match.new.experience_id == ID_B


def test_ambiguous_rename_rejected() -> None:
    config = SyncConfig(experiences=[make_experience("X"), make_experience("Y", ID_B)])

    with pytest.raises(AmbiguousRenameError) as exc_info:
        compute_update_plan(config, _state(make_experience("X", ID_B)))

    assert exc_info.value.name == "X"


def test_unknown_id_rejected() -> None:
    config = SyncConfig(experiences=[make_experience("A", ID_A)])

    with pytest.raises(UnknownOrDuplicateIdError):
        compute_update_plan(config, DatabaseState())


def test_managed_vs_unmanaged_tag_removal() -> None:
    current = make_experience("E", ID_A, tags=["regression", "special"])
    state = _state(
        current,
        tag_sets_by_name={
            "regression": TagSet("regression", "t1", {ID_A}),
            "special": TagSet("special", "t2", {ID_A}),
        },
    )
    config = SyncConfig(experiences=[make_experience("E", tags=[])], managed_experience_tags=["regression"])

    plan = compute_update_plan(config, state)

    assert [e.name for e in plan.tag_updates["regression"].removals] == ["E"]
    assert plan.tag_updates["special"].removals == []


def test_test_suite_revision_references_new_name() -> None:
    state = _state(make_experience("old-name", ID_B), test_suite_ids_by_name={"S": "suite-1"})
    config = SyncConfig(
        experiences=[make_experience("new-name", ID_B)],
        managed_test_suites=[TestSuiteConfig(name="S", experiences=["new-name"])],
    )

    plan = compute_update_plan(config, state)

    suite = plan.test_suite_updates["S"]
    assert suite.experiences == [plan.matches["new-name"].new]
    assert suite.experiences[0].experience_id == ID_B


def test_plan_entities_share_the_matched_experience_objects() -> None:
    state = _state(
        tag_sets_by_name={"regression": TagSet("regression", "t1")},
        system_sets_by_name={"planner": SystemSet("planner", "s1")},
        test_suite_ids_by_name={"S": "suite-1"},
    )
    config = SyncConfig(
        experiences=[make_experience("A", tags=["regression"], systems=["planner"])],
        managed_test_suites=[TestSuiteConfig(name="S", experiences=["A"])],
    )

    plan = compute_update_plan(config, state)

    new = plan.matches["A"].new
    assert plan.tag_updates["regression"].additions[0] is new
    assert plan.system_updates["planner"].additions[0] is new
    assert plan.test_suite_updates["S"].experiences[0] is new


@pytest.mark.parametrize(
    "config",
    [
        SyncConfig(experiences=[make_experience("A", tags=["missing"])]),
        SyncConfig(experiences=[make_experience("A", systems=["missing"])]),
        SyncConfig(managed_experience_tags=["missing"]),
        SyncConfig(managed_test_suites=[TestSuiteConfig(name="missing")]),
    ],
)
def test_references_to_unknown_entities_are_planning_errors(config: SyncConfig) -> None:
    with pytest.raises(PlanningError):
        compute_update_plan(config, DatabaseState())
