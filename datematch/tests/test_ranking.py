import math

from datematch.matching.models import ActivityTemplate, ScoreBreakdown, ScoredCandidate, Venue
from datematch.matching.ranking import (
    distance_band,
    order_for_display,
    rank_by_score,
    select_diverse,
)


def _candidate(id, score, category=None, distance=1.0, styles=()):
    venues = ()
    if category:
        venues = (Venue(id=f"{id}-v", name=f"{id} venue", category=category,
                        latitude=0.0, longitude=0.0, distance=distance),)
    template = ActivityTemplate(
        id=id,
        title=id.title(),
        required_venue_categories=[category] if category else [],
        styles=list(styles),
    )
    return ScoredCandidate(template=template, score=score, score_breakdown=ScoreBreakdown(), venues=venues)


def _ids(candidates):
    return [c.template.id for c in candidates]


def test_rank_by_score_is_stable():
    a, b, c = _candidate("a", 50), _candidate("b", 80), _candidate("c", 50)
    assert _ids(rank_by_score([a, b, c])) == ["b", "a", "c"]


class TestSelectDiverse:
    def test_best_is_always_first(self):
        best = _candidate("best", 100, "restaurant", styles=["romantic"])
        other = _candidate("other", 10, "park", styles=["outdoors"])
        assert _ids(select_diverse([other, best], 1)) == ["best"]

    def test_prefers_new_category_or_style(self):
        a = _candidate("a", 100, "restaurant", styles=["romantic"])
        b = _candidate("b", 90, "restaurant", styles=["romantic"])
        c = _candidate("c", 80, "park", styles=["outdoors"])
        assert _ids(select_diverse([a, b, c], 2)) == ["a", "c"]

    def test_falls_back_to_best_remaining(self):
        a = _candidate("a", 100, "restaurant", styles=["romantic"])
        b = _candidate("b", 90, "restaurant", styles=["romantic"])
        c = _candidate("c", 80, "park", styles=["outdoors"])
        assert _ids(select_diverse([a, b, c], 3)) == ["a", "c", "b"]

    def test_new_style_counts_as_variety(self):
        a = _candidate("a", 100, "restaurant", styles=["romantic"])
        b = _candidate("b", 90, "restaurant", styles=["romantic"])
        c = _candidate("c", 80, "restaurant", styles=["foodie"])
        assert _ids(select_diverse([a, b, c], 2)) == ["a", "c"]

    def test_k_limits(self):
        items = [_candidate("a", 3, "bar"), _candidate("b", 2, "park")]
        assert select_diverse(items, 0) == []
        assert select_diverse([], 3) == []
        assert len(select_diverse(items, 5)) == 2


def test_distance_band():
    assert distance_band(0.4, 1.0) == 0
    assert distance_band(2.7, 1.0) == 2
    assert distance_band(math.inf, 1.0) == math.inf


class TestOrderForDisplay:
    def test_closer_band_first(self):
        far = _candidate("far", 100, "restaurant", distance=3.0)
        near = _candidate("near", 50, "park", distance=0.5)
        assert _ids(order_for_display([far, near])) == ["near", "far"]

    def test_score_within_band(self):
        x = _candidate("x", 50, "restaurant", distance=0.2)
        y = _candidate("y", 90, "park", distance=0.8)
        assert _ids(order_for_display([x, y])) == ["y", "x"]

    def test_no_venue_plans_go_last(self):
        home = _candidate("home", 200)
        out = _candidate("out", 10, "park", distance=9.0)
        assert _ids(order_for_display([home, out])) == ["out", "home"]
