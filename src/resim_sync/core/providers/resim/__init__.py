"""ReSim REST API provider."""

from resim_sync.core.providers.resim.client import ResimApiClient

__all__ = ["ResimApiClient"]
