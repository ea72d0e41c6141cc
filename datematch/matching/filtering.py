from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .intents import rule_for, slot_categories
from .models import ActivityTemplate

logger = logging.getLogger(__name__)

AT_HOME = "at-home"

ENVIRONMENT_COMPATIBILITY: dict[str, set[str]] = {
    "indoor": {"indoor", "both"},
    "outdoor": {"outdoor", "both"},
}

_UNCONSTRAINED = {"", "any", "all", "both", "anywhere"}


def normalize_environment(environment: str | None) -> str | None:
    """Map free-form environment input onto indoor / outdoor / at-home, or None."""
    if environment is None:
        return None
    value = environment.strip().lower().replace("_", "-").replace(" ", "-")
    if value in _UNCONSTRAINED:
        return None
    if value in ("home", "athome", AT_HOME):
        return AT_HOME
    if value in ENVIRONMENT_COMPATIBILITY:
        return value
    logger.warning("Ignoring unknown environment %r", environment)
    return None


def environment_allows(template: ActivityTemplate, environment: str | None) -> bool:
    requested = normalize_environment(environment)
    if requested is None:
        return True
    if requested == AT_HOME:
        return not template.required_venue_categories
    return template.environment in ENVIRONMENT_COMPATIBILITY[requested]


def can_be_served(template: ActivityTemplate, available_categories: set[str]) -> bool:
    """Coarse check: at least one required slot has a usable category in the pool."""
    if not template.required_venue_categories:
        return True
    rule = rule_for(template)
    return any(
        slot_categories(slot, rule) & available_categories
        for slot in template.required_venue_categories
    )


def filter_templates(
    templates: Sequence[ActivityTemplate],
    available_categories: Iterable[str],
    environment: str | None = None,
    exclude_ids: Iterable[str] = (),
) -> list[ActivityTemplate]:
    """Keep templates the current venue pool and environment could satisfy, in order."""
    categories = set(available_categories)
    excluded = set(exclude_ids)
    seen: set[str] = set()
    survivors: list[ActivityTemplate] = []

    for template in templates:
        if template.id in excluded or template.id in seen:
            continue
        seen.add(template.id)
        if not environment_allows(template, environment):
            continue
        if not can_be_served(template, categories):
            continue
        survivors.append(template)

    logger.debug("%d of %d templates survive filtering", len(survivors), len(templates))
    return survivors
