"""Public API surface for resim-sync."""

__version__ = "0.1.0"

from resim_sync.core.auth import create_token_resolver
from resim_sync.core.config import (
    ClientSettings,
    build_settings,
    dump_sync_config,
    load_sync_config,
    parse_sync_config,
    write_sync_config,
)
from resim_sync.core.contracts.client import ExperienceSyncClient, Page, SystemRef, TagRef, TestSuiteRef
from resim_sync.core.contracts.exceptions import (
    ApiError,
    ApplyError,
    ApplyPhaseError,
    AuthenticationError,
    ConfigError,
    FetchError,
    PlanningError,
    ResimSyncError,
    SyncCancelledError,
)
from resim_sync.core.contracts.experience import Experience, SyncConfig, TestSuiteConfig
from resim_sync.core.contracts.plan import MatchKind, UpdatePlan
from resim_sync.core.contracts.progress import NullSyncProgress, SyncProgress
from resim_sync.core.contracts.sync import SyncResult
from resim_sync.core.engine import ExperienceSyncEngine
from resim_sync.core.planner import compute_update_plan
from resim_sync.core.providers.resim import ResimApiClient
from resim_sync.sdk import ResimSync

__all__ = [
    "ApiError",
    "ApplyError",
    "ApplyPhaseError",
    "AuthenticationError",
    "ClientSettings",
    "ConfigError",
    "Experience",
    "ExperienceSyncClient",
    "ExperienceSyncEngine",
    "FetchError",
    "MatchKind",
    "NullSyncProgress",
    "Page",
    "PlanningError",
    "ResimApiClient",
    "ResimSync",
    "ResimSyncError",
    "SyncCancelledError",
    "SyncConfig",
    "SyncProgress",
    "SyncResult",
    "SystemRef",
    "TagRef",
    "TestSuiteConfig",
    "TestSuiteRef",
    "UpdatePlan",
    "__version__",
    "build_settings",
    "compute_update_plan",
    "create_token_resolver",
    "dump_sync_config",
    "load_sync_config",
    "parse_sync_config",
    "write_sync_config",
]
