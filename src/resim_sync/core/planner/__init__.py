"""Planner: reconcile configuration against the current database state."""

from resim_sync.core.planner.experiences import match_experiences
from resim_sync.core.planner.planner import compute_update_plan
from resim_sync.core.planner.tags import compute_system_updates, compute_tag_updates
from resim_sync.core.planner.test_suites import compute_test_suite_updates

__all__ = [
    "compute_system_updates",
    "compute_tag_updates",
    "compute_test_suite_updates",
    "compute_update_plan",
    "match_experiences",
]
