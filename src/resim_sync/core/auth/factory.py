"""Token resolver factory."""

from __future__ import annotations

from resim_sync.core.auth.base import TokenResolver
from resim_sync.core.auth.resolvers import EnvTokenResolver, StaticTokenResolver
from resim_sync.core.config.settings import ClientSettings
from resim_sync.core.contracts.exceptions import ConfigError

RESOLVERS: dict[str, type[TokenResolver]] = {
    "env": EnvTokenResolver,
    "token": StaticTokenResolver,
}


def create_token_resolver(settings: ClientSettings) -> TokenResolver:
    if settings.auth not in RESOLVERS:
        raise ConfigError(f"Unknown auth mode: {settings.auth}")
    if settings.auth == "env":
        return EnvTokenResolver()
    return StaticTokenResolver(token=settings.token or "")
