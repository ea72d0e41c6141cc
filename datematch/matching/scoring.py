from __future__ import annotations

from collections.abc import Iterable, Sequence

from .config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from .intents import fitting_venues
from .models import (
    BUDGET_TIERS,
    DURATION_CLASSES,
    ActivityTemplate,
    ScoreBreakdown,
    UserPreferences,
    Venue,
)

# Share of the venue-preference weight given when the user wants several
# venues but the template only needs one
PARTIAL_VENUE_PREFERENCE = 0.3


def _level_distance(levels: list[str], a: str | None, b: str | None) -> int | None:
    """Return how many steps apart two ordered levels are, or None if either is unknown."""
    try:
        return abs(levels.index(a) - levels.index(b))
    except ValueError:
        return None


def _graded(levels: list[str], template_value: str, user_value: str | None, weight: float) -> float:
    steps = _level_distance(levels, template_value, user_value)
    if steps == 0:
        return weight
    if steps == 1:
        return weight * 0.5
    return 0.0


def _normalize_tag(tag: str) -> str:
    return " ".join(tag.replace("_", " ").lower().split())


def score_budget(template: ActivityTemplate, budget: str | None, weight: float) -> float:
    return _graded(BUDGET_TIERS, template.budget, budget, weight)


def score_duration(template: ActivityTemplate, duration: str | None, weight: float) -> float:
    return _graded(DURATION_CLASSES, template.duration_class, duration, weight)


def score_venue_preference(template: ActivityTemplate, preference: str | None, weight: float) -> float:
    if template.venue_count_class == preference:
        return weight
    if preference == "multiple" and len(template.required_venue_categories) == 1:
        return weight * PARTIAL_VENUE_PREFERENCE
    return 0.0


def score_basic_template(template: ActivityTemplate, weight: float) -> float:
    return weight if template.basic else 0.0


def score_availability(open_venue_count: int, needs_venues: bool, weight: float, saturation: int) -> float:
    if not needs_venues:
        return weight
    if open_venue_count == 0:
        return 0.0
    ratio = min(open_venue_count / max(saturation, 1), 1.0)
    return weight * ratio


def score_love_language(template: ActivityTemplate, languages: Iterable[str], weight: float) -> float:
    wanted = {_normalize_tag(lang) for lang in languages if lang}
    if not template.love_languages or not wanted:
        return 0.0
    matches = sum(1 for lang in template.love_languages if _normalize_tag(lang) in wanted)
    return weight * matches / len(template.love_languages)


def score_interest(template: ActivityTemplate, interests: Iterable[str], weight: float) -> float:
    keywords = [i.strip().lower() for i in interests if i and i.strip()]
    tags = list(dict.fromkeys(t.lower() for t in (*template.interest_tags, *template.styles)))
    if not keywords or not tags:
        return 0.0
    matches = sum(1 for tag in tags if any(k in tag or tag in k for k in keywords))
    return weight * matches / len(tags)


def score_distance(open_venues: Sequence[Venue], weight: float, max_distance: float) -> float:
    if not open_venues or max_distance <= 0:
        return 0.0
    closest = min(v.distance for v in open_venues)
    return weight * max(0.0, 1.0 - closest / max_distance)


def score_variety(claimed_count: int, weight: float) -> float:
    return weight / (1 + claimed_count)


def score_template(
    template: ActivityTemplate,
    venues: Sequence[Venue],
    preferences: UserPreferences,
    used: Iterable[str] = frozenset(),
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> ScoreBreakdown:
    """Compute the itemised score of one template against the current venue pool.

    ``used`` holds the venue ids already claimed earlier in the same run; it
    lowers the availability, distance and variety factors but is never
    modified here.
    """
    w = config.weights
    claimed = frozenset(used)
    needs_venues = bool(template.required_venue_categories)
    open_venues = fitting_venues(template, venues, claimed) if needs_venues else []

    raw = {
        "budget_match": score_budget(template, preferences.budget, w.budget_match),
        "duration_match": score_duration(template, preferences.duration, w.duration_match),
        "venue_preference_match": score_venue_preference(
            template, preferences.venue_preference, w.venue_preference_match
        ),
        "basic_template": score_basic_template(template, w.basic_template),
        "venue_available": score_availability(
            len(open_venues), needs_venues, w.venue_available, config.availability_saturation
        ),
        "love_language_match": score_love_language(
            template, preferences.love_languages, w.love_language_match
        ),
        "interest_match": score_interest(template, preferences.interests, w.interest_match),
        "distance_bonus": score_distance(open_venues, w.distance_bonus, config.max_distance),
        "variety_bonus": score_variety(len(claimed), w.variety_bonus),
    }
    # Each factor is floored at 0 and capped at its own weight
    clamped = {name: min(max(value, 0.0), max(w.cap(name), 0.0)) for name, value in raw.items()}
    return ScoreBreakdown(**clamped)
