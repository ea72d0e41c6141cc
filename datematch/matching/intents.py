"""
Template intent table.

Every template is classified into a single intent (wine tasting, dinner,
coffee, ...). The intent decides which venue categories may fill the
template's required slots:

* ``substitutes`` - categories that are interchangeable for any slot whose
  own category is also in the set (a "bar" slot of a drinks date may be
  filled by a winery).
* ``keyword_gated`` - categories only accepted when the venue's name or
  description mentions one of ``venue_keywords`` (a bar only counts for a
  wine tasting if it is actually a wine bar).
* ``denied`` - categories never accepted for this intent, whatever the
  venue is called.

A slot the template's intent does not cover is judged by the intent that
owns the slot's category (``SLOT_INTENTS``), so the theater slot of a dinner
date still accepts a cinema.

Both the template filter and the venue allocator read this table, so a
venue is judged the same way everywhere.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from collections.abc import Iterable

from .models import ActivityTemplate, Venue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntentRule:
    keywords: tuple[str, ...] = ()
    substitutes: frozenset[str] = frozenset()
    keyword_gated: frozenset[str] = frozenset()
    venue_keywords: tuple[str, ...] = ()
    denied: frozenset[str] = frozenset()


DEFAULT_RULE = IntentRule()

# Checked in order; the first intent whose keywords appear in a template's
# title or description wins, so specialised intents come first.
INTENT_RULES: dict[str, IntentRule] = {
    "wine_tasting": IntentRule(
        keywords=("wine tasting", "wine", "winery", "vineyard"),
        substitutes=frozenset({"winery", "bar"}),
        keyword_gated=frozenset({"bar"}),
        venue_keywords=("wine", "winery", "vineyard"),
        denied=frozenset({"cafe"}),
    ),
    "brewery": IntentRule(
        keywords=("brewery", "craft beer", "beer tasting"),
        substitutes=frozenset({"brewery", "bar"}),
        keyword_gated=frozenset({"bar"}),
        venue_keywords=("brew", "beer", "taproom"),
        denied=frozenset({"cafe"}),
    ),
    "poetry": IntentRule(
        keywords=("poetry", "open mic", "spoken word"),
        substitutes=frozenset({"bar", "theater", "entertainment"}),
        keyword_gated=frozenset({"bar", "theater", "entertainment"}),
        venue_keywords=("poetry", "open mic", "open-mic", "spoken word"),
        denied=frozenset({"cafe"}),
    ),
    "farmers_market": IntentRule(
        keywords=("farmers market", "farmer's market", "farmers' market"),
        substitutes=frozenset({"market", "shopping"}),
        keyword_gated=frozenset({"shopping"}),
        venue_keywords=("farmers market", "farmer's market", "farm", "produce"),
    ),
    "spa": IntentRule(
        keywords=("spa", "massage"),
        substitutes=frozenset({"spa", "activity"}),
        keyword_gated=frozenset({"activity"}),
        venue_keywords=("spa", "massage"),
    ),
    "drinks": IntentRule(
        keywords=("drinks", "cocktail", "cocktails", "bar", "pub", "happy hour"),
        substitutes=frozenset({"bar", "winery", "brewery"}),
        denied=frozenset({"cafe"}),
    ),
    "coffee": IntentRule(
        keywords=("coffee", "cafe", "café", "espresso"),
        substitutes=frozenset({"cafe"}),
        denied=frozenset({"bar"}),
    ),
    "dinner": IntentRule(
        keywords=("dinner", "lunch", "brunch", "restaurant", "dining"),
        substitutes=frozenset({"restaurant"}),
        denied=frozenset({"cafe"}),
    ),
    "museum": IntentRule(
        keywords=("museum", "gallery", "exhibit", "exhibition"),
        substitutes=frozenset({"museum", "gallery"}),
    ),
    "movie": IntentRule(
        keywords=("movie", "cinema", "film", "theater", "theatre"),
        substitutes=frozenset({"theater", "cinema"}),
    ),
    "outdoors": IntentRule(
        keywords=("park", "picnic", "walk", "hike", "stroll", "garden"),
        substitutes=frozenset({"park"}),
    ),
}

_INTENT_PATTERNS: dict[str, re.Pattern[str]] = {
    name: re.compile(r"\b(?:" + "|".join(re.escape(k) for k in rule.keywords) + r")\b")
    for name, rule in INTENT_RULES.items()
}

# Intent whose venue rules apply to a slot the template's own intent does not
# cover, e.g. the theater slot of a dinner-and-a-movie date.
SLOT_INTENTS: dict[str, str] = {
    "restaurant": "dinner",
    "cafe": "coffee",
    "bar": "drinks",
    "winery": "wine_tasting",
    "brewery": "brewery",
    "museum": "museum",
    "gallery": "museum",
    "theater": "movie",
    "cinema": "movie",
    "park": "outdoors",
    "spa": "spa",
    "market": "farmers_market",
}


def detect_intent(template: ActivityTemplate) -> str | None:
    """Return the template's intent key, preferring an explicit ``intent`` field."""
    if template.intent:
        if template.intent in INTENT_RULES:
            return template.intent
        logger.warning("Unknown intent %r on template %s", template.intent, template.id)
        return None

    text = f"{template.title} {template.description}".lower()
    for name, pattern in _INTENT_PATTERNS.items():
        if pattern.search(text):
            return name
    return None


def rule_for(template: ActivityTemplate) -> IntentRule:
    intent = detect_intent(template)
    if intent is None:
        return DEFAULT_RULE
    rule = INTENT_RULES[intent]
    # A category the template explicitly asks for can never be denied
    required = set(template.required_venue_categories)
    if rule.denied & required:
        rule = replace(rule, denied=rule.denied - required)
    return rule


def _mentions(venue: Venue, keywords: Iterable[str]) -> bool:
    text = f"{venue.name} {venue.description}".lower()
    return any(keyword in text for keyword in keywords)


def slot_rule(slot: str, rule: IntentRule) -> IntentRule:
    """Rule deciding which venues may fill ``slot`` of a template governed by ``rule``.

    Slots listed in the template intent's substitutes follow that intent. Any
    other slot follows the intent owning its category, while the template's
    denied categories still apply.
    """
    owner = SLOT_INTENTS.get(slot)
    if owner is None or slot in rule.substitutes:
        return rule
    owner_rule = INTENT_RULES[owner]
    return replace(owner_rule, denied=rule.denied | owner_rule.denied)


def slot_categories(slot: str, rule: IntentRule) -> set[str]:
    """Venue categories that could possibly fill ``slot`` under ``rule``."""
    rule = slot_rule(slot, rule)
    categories = {slot}
    if slot in rule.substitutes:
        categories |= rule.substitutes
    return categories - rule.denied


def venue_fits_slot(venue: Venue, slot: str, rule: IntentRule) -> bool:
    rule = slot_rule(slot, rule)
    category = venue.category
    if category in rule.denied:
        return False
    if category != slot and not (slot in rule.substitutes and category in rule.substitutes):
        return False
    if category in rule.keyword_gated:
        return _mentions(venue, rule.venue_keywords)
    return True


def venue_fits_template(venue: Venue, template: ActivityTemplate, rule: IntentRule | None = None) -> bool:
    rule = rule or rule_for(template)
    return any(venue_fits_slot(venue, slot, rule) for slot in template.required_venue_categories)


def fitting_venues(
    template: ActivityTemplate,
    venues: Iterable[Venue],
    used: Iterable[str] = (),
) -> list[Venue]:
    """Unclaimed venues that can fill at least one of the template's slots."""
    rule = rule_for(template)
    claimed = set(used)
    return [
        v for v in venues
        if v.id not in claimed and venue_fits_template(v, template, rule)
    ]
