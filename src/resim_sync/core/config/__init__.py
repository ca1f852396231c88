"""Configuration loading and client settings."""

from resim_sync.core.config.loader import dump_sync_config, load_sync_config, parse_sync_config, write_sync_config
from resim_sync.core.config.settings import DEFAULT_API_URL, ClientSettings, build_settings

__all__ = [
    "DEFAULT_API_URL",
    "ClientSettings",
    "build_settings",
    "dump_sync_config",
    "load_sync_config",
    "parse_sync_config",
    "write_sync_config",
]
