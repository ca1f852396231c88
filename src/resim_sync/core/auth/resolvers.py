"""Token resolvers."""

from __future__ import annotations

import os
from dataclasses import dataclass

from resim_sync.core.auth.base import TokenResolver
from resim_sync.core.contracts.exceptions import AuthenticationError

TOKEN_ENV_VAR = "RESIM_API_TOKEN"


class EnvTokenResolver(TokenResolver):
    async def resolve(self) -> str:
        token = (os.getenv(TOKEN_ENV_VAR) or "").strip()
        if not token:
            raise AuthenticationError(f"{TOKEN_ENV_VAR} is not set or empty")
        return token


@dataclass(frozen=True)
class StaticTokenResolver(TokenResolver):
    token: str

    async def resolve(self) -> str:
        resolved = self.token.strip()
        if not resolved:
            raise AuthenticationError("Static token is empty")
        return resolved
