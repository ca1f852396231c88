"""Authentication token resolution."""

from resim_sync.core.auth.base import TokenResolver
from resim_sync.core.auth.factory import create_token_resolver
from resim_sync.core.auth.resolvers import TOKEN_ENV_VAR, EnvTokenResolver, StaticTokenResolver

__all__ = ["TOKEN_ENV_VAR", "EnvTokenResolver", "StaticTokenResolver", "TokenResolver", "create_token_resolver"]
