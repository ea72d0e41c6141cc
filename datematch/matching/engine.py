from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from ..venues.config import DEFAULT_VENUE_POOL_CONFIG, VenuePoolConfig
from ..venues.normalizer import available_categories, normalize_venues
from .allocation import allocate
from .config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from .filtering import filter_templates
from .models import ActivityTemplate, ScoredCandidate, UserPreferences
from .ranking import order_for_display, select_diverse
from .scoring import score_template

logger = logging.getLogger(__name__)


def match(
    templates: Sequence[ActivityTemplate],
    venues: Iterable[Any],
    preferences: UserPreferences,
    environment: str | None = None,
    k: int | None = None,
    *,
    exclude_ids: Iterable[str] = (),
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
    venue_config: VenuePoolConfig = DEFAULT_VENUE_POOL_CONFIG,
) -> list[ScoredCandidate]:
    """
    Recommend up to ``k`` date plans.

    Steps:
    - Normalize the raw venue pool.
    - Drop templates the pool or environment cannot serve.
    - Score every survivor once with nothing claimed to fix the claiming order.
    - In that order, re-score against the venues claimed so far and allocate.
    - Pick a diverse shortlist and order it closest-first for display.

    The claimed-venue set lives only inside this call. Returns an empty list
    when there is nothing to recommend.
    """
    limit = config.default_limit if k is None else k
    if limit <= 0:
        return []

    pool = normalize_venues(venues, venue_config)
    if not pool:
        logger.info("No usable venues nearby, nothing to match")
        return []

    survivors = filter_templates(templates, available_categories(pool), environment, exclude_ids)
    if not survivors:
        logger.info("No templates can be served by %d venues", len(pool))
        return []

    # --- Claiming order ---
    preliminary = [
        (score_template(t, pool, preferences, frozenset(), config).total, i)
        for i, t in enumerate(survivors)
    ]
    order = [survivors[i] for _, i in sorted(preliminary, key=lambda p: (-p[0], p[1]))]

    # --- Scoring & allocation ---
    used: frozenset[str] = frozenset()
    candidates: list[ScoredCandidate] = []
    for position, template in enumerate(order):
        breakdown = score_template(template, pool, preferences, used, config)
        if (
            template.required_venue_categories
            and breakdown.venue_available == 0
            and not config.allow_venue_reuse
        ):
            continue

        allocation = allocate(template, pool, used, order[position + 1:], config)
        if allocation is None:
            continue

        used = allocation.used
        candidates.append(ScoredCandidate(
            template=template,
            score=breakdown.total,
            score_breakdown=breakdown,
            venues=allocation.venues,
        ))

    selected = select_diverse(candidates, limit)
    logger.debug(
        "Matched %d candidates from %d templates and %d venues, returning %d",
        len(candidates), len(survivors), len(pool), len(selected),
    )
    return order_for_display(selected, config.distance_tolerance)
