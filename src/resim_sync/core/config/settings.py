"""Client settings resolved from CLI flags and the environment."""

from __future__ import annotations

import os
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from resim_sync.core.contracts.exceptions import ConfigError

DEFAULT_API_URL = "https://api.resim.ai/v1/"
URL_ENV_VAR = "RESIM_URL"


class ClientSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    project: str
    url: str = DEFAULT_API_URL
    auth: Literal["env", "token"] = "env"
    token: str | None = None
    workers: int = Field(default=16, ge=1)
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=0)

    @field_validator("project")
    @classmethod
    def _require_project(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("project must not be empty")
        return stripped

    @field_validator("url")
    @classmethod
    def _trailing_slash(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped.startswith(("http://", "https://")):
            raise ValueError("url must start with http:// or https://")
        return stripped if stripped.endswith("/") else f"{stripped}/"


def build_settings(
    *,
    project: str | None,
    url: str | None = None,
    auth: str | None = None,
    token: str | None = None,
    workers: int | None = None,
) -> ClientSettings:
    """Build settings from explicit values, falling back to the environment."""
    if not project:
        raise ConfigError("project is required")

    values: dict[str, object] = {"project": project}
    resolved_url = url or os.getenv(URL_ENV_VAR)
    if resolved_url:
        values["url"] = resolved_url
    if token:
        values["token"] = token
        values["auth"] = auth or "token"
    elif auth:
        values["auth"] = auth
    if workers is not None:
        values["workers"] = workers

    try:
        return ClientSettings.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"invalid settings: {exc}") from exc
