"""Experience and sync-configuration contracts."""

from __future__ import annotations

import uuid
from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, field_validator, model_validator

# Quoted scalars such as "yes" or "600" are rejected rather than coerced.
StrictPositiveInt = Annotated[StrictInt, Field(gt=0)]


class CustomFieldType(StrEnum):
    TEXT = "text"
    NUMBER = "number"
    TIMESTAMP = "timestamp"
    JSON = "json"


class EnvironmentVariable(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    value: str


class CustomField(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    type: CustomFieldType
    values: list[str] = Field(default_factory=list)


def normalize_experience_id(value: Any) -> str | None:
    """Return the canonical string form of an experience id, or ``None`` when unset."""
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return str(value)
    if not isinstance(value, str):
        raise ValueError("experience_id must be a UUID string")
    stripped = value.strip()
    if not stripped:
        return None
    return str(uuid.UUID(stripped))


class Experience(BaseModel):
    """A single experience, either desired (from config) or current (from the API).

    Instances are shared by reference between plan entities; the applier writes
    ``experience_id`` back onto newly created experiences.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    experience_id: str | None = None
    description: str = ""
    locations: list[str] = Field(default_factory=list)
    profile: str | None = None
    environment_variables: list[EnvironmentVariable] | None = None
    cache_exempt: StrictBool = False
    container_timeout_seconds: StrictPositiveInt | None = None
    custom_fields: list[CustomField] | None = None
    tags: list[str] = Field(default_factory=list)
    systems: list[str] = Field(default_factory=list)
    archived: StrictBool = False

    @model_validator(mode="before")
    @classmethod
    def _canonicalize_empty_sequences(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        # A key that is present but null means "set to empty", not "leave unchanged".
        for key in ("environment_variables", "custom_fields"):
            if key in data and data[key] is None:
                data[key] = []
        for key in ("locations", "tags", "systems"):
            if key in data and data[key] is None:
                data[key] = []
        for key in ("cache_exempt", "archived"):
            if key in data and data[key] is None:
                data[key] = False
        if "description" in data and data["description"] is None:
            data["description"] = ""
        return data

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("experience name must not be empty")
        return stripped

    @field_validator("profile")
    @classmethod
    def _blank_profile_is_unset(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("experience_id", mode="before")
    @classmethod
    def _parse_experience_id(cls, value: Any) -> str | None:
        return normalize_experience_id(value)

    @field_validator("tags", "systems")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        stripped = [item.strip() for item in value]
        if not all(stripped):
            raise ValueError("tag and system names must not be empty")
        return list(dict.fromkeys(stripped))

    def archived_copy(self) -> Experience:
        """Return an independent copy of this experience marked archived."""
        return self.model_copy(update={"archived": True}, deep=True)


class TestSuiteConfig(BaseModel):
    """Desired (exclusive, ordered) membership of a managed test suite."""

    __test__ = False

    model_config = ConfigDict(extra="forbid")

    name: str
    experiences: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("test suite name must not be empty")
        return stripped

    @field_validator("experiences", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class SyncConfig(BaseModel):
    """Desired state for a project's experiences, tags, systems and test suites."""

    model_config = ConfigDict(extra="forbid")

    experiences: list[Experience] = Field(default_factory=list)
    managed_experience_tags: list[str] = Field(default_factory=list)
    managed_test_suites: list[TestSuiteConfig] = Field(default_factory=list)

    @field_validator("experiences", "managed_experience_tags", "managed_test_suites", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("managed_experience_tags")
    @classmethod
    def _dedupe_tags(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(tag.strip() for tag in value))
