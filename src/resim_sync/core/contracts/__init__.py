"""Core contracts-domain exports."""

from resim_sync.core.contracts.client import (
    ExperienceSyncClient,
    Page,
    SystemRef,
    TagRef,
    TestSuiteRef,
)
from resim_sync.core.contracts.exceptions import (
    AmbiguousRenameError,
    ApiError,
    ApplyError,
    ApplyPhaseError,
    AuthenticationError,
    ConfigError,
    DuplicateNameError,
    FetchError,
    NameCollisionError,
    ParseError,
    PlanningError,
    ResimSyncError,
    SchemaError,
    SyncCancelledError,
    TestSuiteReferencesMissingExperienceError,
    UnknownManagedTagError,
    UnknownOrDuplicateIdError,
    UnknownSystemError,
    UnknownTagError,
    UnknownTestSuiteError,
)
from resim_sync.core.contracts.experience import (
    CustomField,
    CustomFieldType,
    EnvironmentVariable,
    Experience,
    SyncConfig,
    TestSuiteConfig,
)
from resim_sync.core.contracts.plan import (
    ExperienceMatch,
    MatchKind,
    SystemUpdates,
    TagUpdates,
    TestSuiteUpdate,
    UpdatePlan,
)
from resim_sync.core.contracts.progress import NullSyncProgress, SyncProgress
from resim_sync.core.contracts.state import DatabaseState, SystemSet, TagSet
from resim_sync.core.contracts.sync import SyncResult

__all__ = [
    "AmbiguousRenameError",
    "ApiError",
    "ApplyError",
    "ApplyPhaseError",
    "AuthenticationError",
    "ConfigError",
    "CustomField",
    "CustomFieldType",
    "DatabaseState",
    "DuplicateNameError",
    "EnvironmentVariable",
    "Experience",
    "ExperienceMatch",
    "ExperienceSyncClient",
    "FetchError",
    "MatchKind",
    "NameCollisionError",
    "NullSyncProgress",
    "Page",
    "ParseError",
    "PlanningError",
    "ResimSyncError",
    "SchemaError",
    "SyncCancelledError",
    "SyncConfig",
    "SyncProgress",
    "SyncResult",
    "SystemRef",
    "SystemSet",
    "SystemUpdates",
    "TagRef",
    "TagSet",
    "TagUpdates",
    "TestSuiteConfig",
    "TestSuiteReferencesMissingExperienceError",
    "TestSuiteRef",
    "TestSuiteUpdate",
    "UnknownManagedTagError",
    "UnknownOrDuplicateIdError",
    "UnknownSystemError",
    "UnknownTagError",
    "UnknownTestSuiteError",
    "UpdatePlan",
]
