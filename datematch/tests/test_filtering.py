import pytest

from datematch.matching.filtering import (
    AT_HOME,
    environment_allows,
    filter_templates,
    normalize_environment,
)
from datematch.matching.models import ActivityTemplate

TEMPLATES = [
    ActivityTemplate(id="museum", title="Museum Visit", required_venue_categories=["museum"], environment="indoor"),
    ActivityTemplate(id="dinner", title="Dinner Date", required_venue_categories=["restaurant"], environment="indoor"),
    ActivityTemplate(id="picnic", title="Picnic in the Park", required_venue_categories=["park"], environment="outdoor"),
    ActivityTemplate(id="wine", title="Wine Tasting", required_venue_categories=["winery"], environment="both"),
    ActivityTemplate(id="games", title="Game Night at Home", environment="indoor"),
]


def _ids(templates):
    return [t.id for t in templates]


@pytest.mark.parametrize("raw, expected", [
    (None, None),
    ("", None),
    ("Any", None),
    ("both", None),
    ("Outdoor", "outdoor"),
    (" indoor ", "indoor"),
    ("at home", AT_HOME),
    ("home", AT_HOME),
    ("underwater", None),
])
def test_normalize_environment(raw, expected):
    assert normalize_environment(raw) == expected


def test_no_environment_allows_everything():
    assert all(environment_allows(t, None) for t in TEMPLATES)


def test_at_home_only_allows_templates_without_venues():
    assert [t.id for t in TEMPLATES if environment_allows(t, "at-home")] == ["games"]


def test_unsatisfiable_template_is_dropped():
    survivors = filter_templates(TEMPLATES, {"restaurant"})
    assert "museum" not in _ids(survivors)
    assert "dinner" in _ids(survivors)


def test_outdoor_keeps_outdoor_and_both():
    survivors = filter_templates(TEMPLATES, {"restaurant", "park", "museum", "winery"}, "outdoor")
    assert _ids(survivors) == ["picnic", "wine"]


def test_substitute_category_counts_as_available():
    # A winery pool can serve a drinks date through substitution
    drinks = ActivityTemplate(id="drinks", title="Cocktails for Two", required_venue_categories=["bar"])
    assert _ids(filter_templates([drinks], {"winery"})) == ["drinks"]


def test_denied_category_does_not_count():
    coffee = ActivityTemplate(id="coffee", title="Coffee Date", required_venue_categories=["cafe"])
    wine = ActivityTemplate(id="wine", title="Wine Tasting", required_venue_categories=["winery"])
    assert _ids(filter_templates([coffee, wine], {"cafe"})) == ["coffee"]


def test_excluded_and_duplicate_ids_are_dropped():
    templates = TEMPLATES + [TEMPLATES[1]]
    survivors = filter_templates(templates, {"restaurant", "park"}, exclude_ids=["picnic"])
    assert _ids(survivors) == ["dinner", "games"]


def test_empty_catalog():
    assert filter_templates([], {"restaurant"}) == []
