"""Sync-configuration loading, validation and rendering."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from resim_sync.core.contracts.exceptions import ConfigError, DuplicateNameError, ParseError, SchemaError
from resim_sync.core.contracts.experience import Experience, SyncConfig

_LOG = logging.getLogger(__name__)

# Keys whose default value is left out when rendering a config.
_OMIT_WHEN_DEFAULT: dict[str, Any] = {
    "cache_exempt": False,
    "archived": False,
    "tags": [],
    "systems": [],
}


def parse_sync_config(raw: Any) -> SyncConfig:
    """Validate an already-parsed YAML document into a ``SyncConfig``."""
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise SchemaError(f"config must be a mapping at the top level, got {type(raw).__name__}")

    try:
        config = SyncConfig.model_validate(raw)
    except ValidationError as exc:
        raise SchemaError(f"invalid config: {exc}") from exc

    seen: set[str] = set()
    for experience in config.experiences:
        if experience.name in seen:
            raise DuplicateNameError(experience.name)
        seen.add(experience.name)
        if not experience.archived and not experience.locations:
            raise SchemaError(f"no locations provided for experience: {experience.name}")
    return config


def load_sync_config(path: str | Path) -> SyncConfig:
    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise ConfigError(f"config file does not exist: {config_path}")

    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"failed reading config file: {config_path}") from exc

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ParseError(f"invalid YAML in config file {config_path}: {exc}") from exc

    config = parse_sync_config(raw)
    _LOG.debug(
        "Loaded %d experience(s), %d managed tag(s), %d managed test suite(s) from %s",
        len(config.experiences),
        len(config.managed_experience_tags),
        len(config.managed_test_suites),
        config_path,
    )
    return config


def _experience_to_yaml_dict(experience: Experience) -> dict[str, Any]:
    data = experience.model_dump(mode="json", exclude_none=True)
    for key, default in _OMIT_WHEN_DEFAULT.items():
        if data.get(key) == default:
            data.pop(key, None)
    return data


def dump_sync_config(config: SyncConfig) -> str:
    """Render a config as YAML that ``load_sync_config`` reads back unchanged."""
    document: dict[str, Any] = {
        "experiences": [_experience_to_yaml_dict(experience) for experience in config.experiences],
    }
    if config.managed_experience_tags:
        document["managed_experience_tags"] = list(config.managed_experience_tags)
    if config.managed_test_suites:
        document["managed_test_suites"] = [suite.model_dump(mode="json") for suite in config.managed_test_suites]
    return yaml.safe_dump(document, sort_keys=False, default_flow_style=False, allow_unicode=True)


def write_sync_config(config: SyncConfig, path: str | Path, *, overwrite: bool = False) -> Path:
    config_path = Path(path).expanduser()
    if config_path.exists() and not overwrite:
        raise ConfigError(f"refusing to overwrite existing config file: {config_path}")
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(dump_sync_config(config), encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"failed writing config file: {config_path}") from exc
    return config_path
