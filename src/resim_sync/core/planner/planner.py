"""Turn desired configuration plus current state into an ``UpdatePlan``."""

from __future__ import annotations

import logging

from resim_sync.core.contracts.experience import SyncConfig
from resim_sync.core.contracts.plan import MatchKind, UpdatePlan
from resim_sync.core.contracts.state import DatabaseState
from resim_sync.core.planner.experiences import match_experiences
from resim_sync.core.planner.tags import compute_system_updates, compute_tag_updates
from resim_sync.core.planner.test_suites import compute_test_suite_updates

_LOG = logging.getLogger(__name__)


def compute_update_plan(config: SyncConfig, state: DatabaseState) -> UpdatePlan:
    """Plan every change needed to reconcile *state* with *config*.

    Pure apart from writing matched ids back onto the configured experiences.
    Raises a ``PlanningError`` subclass when the configuration cannot be applied.
    """
    matches = match_experiences(config.experiences, state.experiences_by_name)
    plan = UpdatePlan(
        matches=matches,
        tag_updates=compute_tag_updates(matches, state.tag_sets_by_name, config.managed_experience_tags),
        system_updates=compute_system_updates(matches, state.system_sets_by_name),
        test_suite_updates=compute_test_suite_updates(
            matches, config.managed_test_suites, state.test_suite_ids_by_name
        ),
    )
    _LOG.info(
        "Planned %d create(s), %d update(s), %d restore(s), %d archive(s)",
        len(plan.matches_of_kind(MatchKind.CREATE)),
        len(plan.matches_of_kind(MatchKind.UPDATE)),
        len(plan.matches_of_kind(MatchKind.RESTORE)),
        len(plan.matches_of_kind(MatchKind.ARCHIVE)),
    )
    return plan
