from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from .intents import rule_for, venue_fits_slot, venue_fits_template
from .models import ActivityTemplate, Venue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Allocation:
    """Venues chosen for one template, plus the run's claimed ids after the claim."""

    venues: tuple[Venue, ...]
    used: frozenset[str]
    reused: tuple[str, ...] = ()


def venue_preference_key(venue: Venue) -> tuple[float, float, str]:
    """Closest first, then best rated (unrated last), then id for a stable order."""
    rating = venue.rating if venue.rating is not None else -1.0
    return (venue.distance, -rating, venue.id)


def _wanted_by_pending(venue: Venue, pending: Iterable[ActivityTemplate]) -> bool:
    return any(venue_fits_template(venue, template) for template in pending)


def allocate(
    template: ActivityTemplate,
    venues: Sequence[Venue],
    used: Iterable[str] = frozenset(),
    pending: Sequence[ActivityTemplate] = (),
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> Allocation | None:
    """
    Claim one venue per required slot of ``template``.

    Slots with the fewest open venues are served first. Nothing is claimed
    unless every slot can be filled; the caller's ``used`` set is never
    modified, the updated set is returned on the Allocation instead.

    When ``config.allow_venue_reuse`` is on, a slot with no open venue may
    take an already-claimed one, but only if none of the ``pending``
    templates (those still waiting for allocation) could use it.
    Returns None when the template cannot be satisfied.
    """
    claimed = frozenset(used)
    slots = template.required_venue_categories
    if not slots:
        return Allocation(venues=(), used=claimed)

    rule = rule_for(template)
    options_by_slot = [
        sorted((v for v in venues if venue_fits_slot(v, slot, rule)), key=venue_preference_key)
        for slot in slots
    ]

    def open_count(index: int) -> int:
        return sum(1 for v in options_by_slot[index] if v.id not in claimed)

    order = sorted(range(len(slots)), key=lambda i: (open_count(i), i))

    chosen: dict[int, Venue] = {}
    taken: set[str] = set()
    reused: list[str] = []
    for index in order:
        options = options_by_slot[index]
        pick = next((v for v in options if v.id not in claimed and v.id not in taken), None)

        if pick is None and config.allow_venue_reuse:
            pick = next(
                (
                    v for v in options
                    if v.id in claimed and v.id not in taken and not _wanted_by_pending(v, pending)
                ),
                None,
            )
            if pick is not None:
                reused.append(pick.id)
                logger.info("Re-offering venue %s for template %s", pick.id, template.id)

        if pick is None:
            logger.debug("No venue left for slot %r of template %s", slots[index], template.id)
            return None

        chosen[index] = pick
        taken.add(pick.id)

    return Allocation(
        venues=tuple(chosen[i] for i in range(len(slots))),
        used=claimed | taken,
        reused=tuple(reused),
    )
