"""Apply stage and the end-to-end sync pipeline."""

from .applier import (
    ARCHIVE_PHASE,
    EXPERIENCES_PHASE,
    TAGS_AND_SYSTEMS_PHASE,
    TEST_SUITES_PHASE,
    PlanApplier,
    needs_update,
    update_mask_for,
)
from .engine import ExperienceSyncEngine
from .pool import DEFAULT_WORKERS, run_concurrent

__all__ = [
    "ARCHIVE_PHASE",
    "DEFAULT_WORKERS",
    "EXPERIENCES_PHASE",
    "TAGS_AND_SYSTEMS_PHASE",
    "TEST_SUITES_PHASE",
    "ExperienceSyncEngine",
    "PlanApplier",
    "needs_update",
    "run_concurrent",
    "update_mask_for",
]
