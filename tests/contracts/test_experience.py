from __future__ import annotations

import uuid

import pytest
from pydantic import ValidationError

from resim_sync.core.contracts.experience import Experience, SyncConfig, normalize_experience_id


def test_normalize_experience_id_canonicalises_uuid_strings() -> None:
    raw = "  3DD91177-1E73-4F3A-A0F4-D1E6F6A0F5A1 "
    assert normalize_experience_id(raw) == "3dd91177-1e73-4f3a-a0f4-d1e6f6a0f5a1"
    assert normalize_experience_id(uuid.UUID(raw.strip())) == "3dd91177-1e73-4f3a-a0f4-d1e6f6a0f5a1"


@pytest.mark.parametrize("value", [None, "", "   "])
def test_normalize_experience_id_treats_blank_as_unset(value: str | None) -> None:
    assert normalize_experience_id(value) is None


def test_normalize_experience_id_rejects_non_uuid() -> None:
    with pytest.raises(ValueError):
        normalize_experience_id("not-a-uuid")


def test_experience_name_is_stripped_and_required() -> None:
    assert Experience(name="  drive  ").name == "drive"
    with pytest.raises(ValidationError):
        Experience(name="   ")


def test_experience_null_collections_become_empty() -> None:
    experience = Experience.model_validate(
        {"name": "a", "locations": None, "tags": None, "description": None, "archived": None}
    )

    assert experience.locations == []
    assert experience.tags == []
    assert experience.description == ""
    assert experience.archived is False


def test_archived_copy_is_independent() -> None:
    original = Experience(name="a", locations=["s3://a"], tags=["t"])

    copy = original.archived_copy()
    copy.tags.append("u")

    assert copy.archived is True
    assert original.archived is False
    assert original.tags == ["t"]


def test_sync_config_dedupes_managed_tags() -> None:
    config = SyncConfig.model_validate({"managed_experience_tags": [" regression", "regression", "nightly"]})

    assert config.managed_experience_tags == ["regression", "nightly"]


@pytest.mark.parametrize("profile", ["", "   ", None])
def test_blank_profile_is_unset(profile: str | None) -> None:
    assert Experience(name="a", profile=profile).profile is None


def test_tags_and_systems_are_stripped_before_dedupe() -> None:
    experience = Experience(name="a", tags=[" regression", "regression "], systems=["planner "])

    assert experience.tags == ["regression"]
    assert experience.systems == ["planner"]


def test_blank_tag_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Experience(name="a", tags=["  "])
