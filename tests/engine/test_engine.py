from __future__ import annotations

import logging

import pytest

from resim_sync.core.config import parse_sync_config
from resim_sync.core.contracts.experience import SyncConfig, TestSuiteConfig
from resim_sync.core.contracts.plan import MatchKind
from resim_sync.core.engine import ExperienceSyncEngine, needs_update
from tests.fakes.client import FakeResimClient
from tests.fakes.factories import make_experience


def _desired_config() -> SyncConfig:
    return SyncConfig(
        experiences=[
            make_experience("drive-1", description="first", tags=["regression"], systems=["planner"]),
            make_experience("drive-2", profile="sim-profile", container_timeout_seconds=900),
            make_experience("drive-renamed", tags=["smoke"]),
        ],
        managed_experience_tags=["regression"],
        managed_test_suites=[TestSuiteConfig(name="nightly", experiences=["drive-2", "drive-1"])],
    )


def _seed(client: FakeResimClient) -> dict[str, str]:
    renamed = client.add_experience("drive-old")
    stale = client.add_experience("stale")
    client.add_experience("drive-2", archived=True)
    client.add_tag("regression", stale)
    client.add_tag("smoke")
    client.add_system("planner")
    client.add_test_suite("nightly")
    return {"renamed": renamed, "stale": stale}


@pytest.mark.asyncio
async def test_second_plan_after_sync_is_empty(fake_client: FakeResimClient) -> None:
    ids = _seed(fake_client)
    config = _desired_config()
    config.experiences[2].experience_id = ids["renamed"]
    engine = ExperienceSyncEngine(fake_client, project_id=fake_client.project_id)

    first = await engine.sync(config)

    assert first.created == ["drive-1"]
    assert first.restored == ["drive-2"]
    assert first.updated == ["drive-renamed"]
    assert first.archived == ["stale"]

    replan_config = _desired_config()
    replan = await engine.plan(replan_config)

    assert replan.matches_of_kind(MatchKind.CREATE, MatchKind.RESTORE, MatchKind.ARCHIVE) == []
    assert not any(needs_update(match) for match in replan.matches.values())
    assert all(updates.is_empty for updates in replan.tag_updates.values())
    assert all(updates.is_empty for updates in replan.system_updates.values())
    assert replan.matches["drive-renamed"].new.experience_id == ids["renamed"]


@pytest.mark.asyncio
async def test_sync_applies_final_state(fake_client: FakeResimClient) -> None:
    ids = _seed(fake_client)
    config = _desired_config()
    config.experiences[2].experience_id = ids["renamed"]

    await ExperienceSyncEngine(fake_client).sync(config)

    drive_1 = fake_client.by_name("drive-1")
    drive_2 = fake_client.by_name("drive-2")
    # Archiving leaves memberships in place.
    assert fake_client.tag_members("regression") == {drive_1.experience_id, ids["stale"]}
    assert fake_client.tag_members("smoke") == {ids["renamed"]}
    assert fake_client.system_members("planner") == {drive_1.experience_id}
    assert drive_2.archived is False
    assert drive_2.container_timeout_seconds == 900
    assert fake_client.by_name("stale").archived is True
    suite = next(iter(fake_client.suites.values()))
    assert suite.experience_ids == [drive_2.experience_id, drive_1.experience_id]
    assert suite.revision == 1


@pytest.mark.asyncio
async def test_plan_does_not_mutate(fake_client: FakeResimClient) -> None:
    _seed(fake_client)

    await ExperienceSyncEngine(fake_client).plan(SyncConfig())

    assert fake_client.mutations == []


@pytest.mark.asyncio
async def test_clone_returns_active_experiences_sorted(fake_client: FakeResimClient) -> None:
    beta = fake_client.add_experience("beta", description="b")
    alpha = fake_client.add_experience("alpha")
    fake_client.add_experience("gone", archived=True)
    fake_client.add_tag("regression", beta)
    fake_client.add_system("planner", alpha)

    config = await ExperienceSyncEngine(fake_client).clone()

    assert [e.name for e in config.experiences] == ["alpha", "beta"]
    assert config.experiences[0].experience_id == alpha
    assert config.experiences[0].systems == ["planner"]
    assert config.experiences[1].tags == ["regression"]
    assert config.managed_experience_tags == []
    assert config.managed_test_suites == []
    assert fake_client.mutations == []


@pytest.mark.asyncio
async def test_clone_skips_experiences_without_locations(
    fake_client: FakeResimClient, caplog: pytest.LogCaptureFixture
) -> None:
    fake_client.add_experience("bare", locations=[])
    fake_client.add_experience("drive")

    with caplog.at_level(logging.WARNING):
        config = await ExperienceSyncEngine(fake_client).clone()

    assert [e.name for e in config.experiences] == ["drive"]
    assert "'bare'" in caplog.text
    assert parse_sync_config(config.model_dump(mode="json")).experiences[0].name == "drive"


@pytest.mark.asyncio
async def test_padded_tag_names_resolve_to_existing_tags(fake_client: FakeResimClient) -> None:
    experience_id = fake_client.add_experience("drive")
    fake_client.add_tag("regression")
    config = parse_sync_config(
        {
            "experiences": [{"name": "drive", "locations": ["s3://bucket/drive"], "tags": [" regression"]}],
            "managed_experience_tags": [" regression"],
        }
    )

    result = await ExperienceSyncEngine(fake_client).sync(config)

    assert result.tags_added == 1
    assert fake_client.tag_members("regression") == {experience_id}
