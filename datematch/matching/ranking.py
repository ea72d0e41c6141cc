from __future__ import annotations

import math
from collections.abc import Sequence

from .models import ScoredCandidate


def rank_by_score(candidates: Sequence[ScoredCandidate]) -> list[ScoredCandidate]:
    """Highest score first; ties keep their incoming order."""
    return sorted(candidates, key=lambda c: -c.score)


def _adds_variety(candidate: ScoredCandidate, categories: set[str], styles: set[str]) -> bool:
    venue_categories = {v.category for v in candidate.venues}
    return bool(venue_categories - categories) or bool(set(candidate.template.styles) - styles)


def select_diverse(candidates: Sequence[ScoredCandidate], k: int) -> list[ScoredCandidate]:
    """
    Greedy top-k selection favouring variety.

    The best-scored candidate is always taken. After that the best remaining
    candidate that brings a new venue category or style is taken; when none
    does, the best remaining candidate is taken regardless.
    """
    if k <= 0:
        return []
    remaining = rank_by_score(candidates)
    if not remaining:
        return []

    accepted = [remaining.pop(0)]
    seen_categories = {v.category for v in accepted[0].venues}
    seen_styles = set(accepted[0].template.styles)

    while remaining and len(accepted) < k:
        index = next(
            (i for i, c in enumerate(remaining) if _adds_variety(c, seen_categories, seen_styles)),
            0,
        )
        pick = remaining.pop(index)
        accepted.append(pick)
        seen_categories.update(v.category for v in pick.venues)
        seen_styles.update(pick.template.styles)

    return accepted


def distance_band(distance: float, tolerance: float) -> float:
    if not math.isfinite(distance):
        return math.inf
    if tolerance <= 0:
        return distance
    return float(math.floor(distance / tolerance))


def order_for_display(
    candidates: Sequence[ScoredCandidate],
    tolerance: float = 1.0,
) -> list[ScoredCandidate]:
    """Closest plans first (within ``tolerance`` bands), then by score."""
    indexed = list(enumerate(candidates))
    indexed.sort(
        key=lambda item: (
            distance_band(item[1].closest_venue_distance, tolerance),
            -item[1].score,
            item[0],
        )
    )
    return [c for _, c in indexed]
