"""Current-state fetching."""

from resim_sync.core.fetch.state import FETCH_PHASE, StateFetcher

__all__ = ["FETCH_PHASE", "StateFetcher"]
