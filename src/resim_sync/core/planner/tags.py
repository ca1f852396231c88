"""Tag and system membership plans."""

from __future__ import annotations

from resim_sync.core.contracts.exceptions import UnknownManagedTagError, UnknownSystemError, UnknownTagError
from resim_sync.core.contracts.plan import ExperienceMatch, SystemUpdates, TagUpdates
from resim_sync.core.contracts.state import SystemSet, TagSet


def compute_tag_updates(
    matches: dict[str, ExperienceMatch],
    tag_sets_by_name: dict[str, TagSet],
    managed_tags: list[str],
) -> dict[str, TagUpdates]:
    """Compute per-tag additions and removals.

    Any existing tag may gain experiences. Only managed tags lose experiences
    whose configured version no longer lists them.
    """
    updates = {
        name: TagUpdates(name=name, tag_id=tag_set.tag_id) for name, tag_set in tag_sets_by_name.items()
    }
    for tag in managed_tags:
        if tag not in tag_sets_by_name:
            raise UnknownManagedTagError(tag)

    for match in matches.values():
        if match.new.archived:
            # Archiving drops memberships on the backend.
            continue
        for tag in match.new.tags:
            tag_set = tag_sets_by_name.get(tag)
            if tag_set is None:
                raise UnknownTagError(tag)
            if match.original is None or match.original.experience_id not in tag_set.experience_ids:
                updates[tag].additions.append(match.new)

        if match.original is None:
            continue
        for tag in managed_tags:
            if match.original.experience_id in tag_sets_by_name[tag].experience_ids and tag not in match.new.tags:
                updates[tag].removals.append(match.new)

    return updates


def compute_system_updates(
    matches: dict[str, ExperienceMatch],
    system_sets_by_name: dict[str, SystemSet],
) -> dict[str, SystemUpdates]:
    """Compute per-system additions. System memberships are never removed."""
    updates = {
        name: SystemUpdates(name=name, system_id=system_set.system_id)
        for name, system_set in system_sets_by_name.items()
    }
    for match in matches.values():
        if match.new.archived:
            continue
        for system in match.new.systems:
            system_set = system_sets_by_name.get(system)
            if system_set is None:
                raise UnknownSystemError(system)
            if match.original is None or match.original.experience_id not in system_set.experience_ids:
                updates[system].additions.append(match.new)
    return updates
