"""Pair configured experiences with the records they replace."""

from __future__ import annotations

import logging

from resim_sync.core.contracts.exceptions import (
    AmbiguousRenameError,
    NameCollisionError,
    UnknownOrDuplicateIdError,
)
from resim_sync.core.contracts.experience import Experience
from resim_sync.core.contracts.plan import ExperienceMatch

_LOG = logging.getLogger(__name__)


def match_experiences(
    configured: list[Experience],
    current_by_name: dict[str, Experience],
) -> dict[str, ExperienceMatch]:
    """Match every configured experience to at most one current record.

    Names are matched before ids, so a configured entry whose name is unchanged
    claims its record without needing an explicit id. A configured entry that
    only carries an id claims that record under a new name (a rename). Current
    records that nobody claims are archived.

    The configured ``Experience`` objects are stored in the result by reference
    and get the matched record's id written back onto them.

    Returns:
        Matches keyed by the configured (new) name, in config order followed by
        leftover records sorted by name.

    Raises:
        NameCollisionError: A record was already claimed by an earlier entry.
        AmbiguousRenameError: The name belongs to a different record, or the
            explicit id belongs to a record another entry keeps by name.
        UnknownOrDuplicateIdError: The explicit id is unknown or already claimed.
    """
    matches: dict[str, ExperienceMatch] = {}
    remaining_by_id = {
        experience.experience_id: experience
        for experience in current_by_name.values()
        if experience.experience_id is not None
    }
    claimed_by_name: dict[str, str] = {}

    for experience in configured:
        existing = current_by_name.get(experience.name)
        if existing is not None:
            if existing.experience_id is None:
                raise AmbiguousRenameError(experience.name)
            if existing.experience_id not in remaining_by_id:
                raise NameCollisionError(experience.name)
            if experience.experience_id is not None and experience.experience_id != existing.experience_id:
                raise AmbiguousRenameError(experience.name)
            experience.experience_id = existing.experience_id
            _insert(matches, ExperienceMatch(new=experience, original=existing))
            del remaining_by_id[existing.experience_id]
            claimed_by_name[existing.experience_id] = existing.name
            continue

        if experience.experience_id is not None:
            existing = remaining_by_id.pop(experience.experience_id, None)
            if existing is None:
                owner = claimed_by_name.get(experience.experience_id)
                if owner is not None:
                    # Claimed by an entry that keeps the current name.
                    raise AmbiguousRenameError(owner)
                raise UnknownOrDuplicateIdError(experience.experience_id)
            _LOG.debug("Renaming experience %r to %r", existing.name, experience.name)
            _insert(matches, ExperienceMatch(new=experience, original=existing))
            continue

        _insert(matches, ExperienceMatch(new=experience))

    # Leftovers are archived; records that are already archived stay as no-op matches.
    for leftover in sorted(remaining_by_id.values(), key=lambda experience: experience.name):
        new = leftover if leftover.archived else leftover.archived_copy()
        _insert(matches, ExperienceMatch(new=new, original=leftover))

    return matches


def _insert(matches: dict[str, ExperienceMatch], match: ExperienceMatch) -> None:
    if match.new.name in matches:
        raise NameCollisionError(match.new.name)
    matches[match.new.name] = match
