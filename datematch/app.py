from __future__ import annotations

from fastapi import FastAPI

from .catalog.store import get_templates
from .llm.groq_client import describe_plans
from .matching.engine import match
from .matching.filtering import environment_allows
from .matching.models import (
    ActivityTemplate,
    Coordinates,
    MidpointRequest,
    PlanOut,
    PlanRequest,
    PlanResponse,
    ScoredCandidate,
    UserPreferences,
    VenueOut,
)
from .venues.geo import annotate_distances, midpoint
from .venues.normalizer import normalize_venues

app = FastAPI(title="Date Plan Recommendation API", version="1.0.0")


def _resolve_origin(body: PlanRequest) -> tuple[float, float] | None:
    if body.origin is not None:
        return (body.origin.latitude, body.origin.longitude)
    prefs: UserPreferences = body.preferences
    if prefs.user_location and prefs.partner_location:
        return midpoint(
            (prefs.user_location.latitude, prefs.user_location.longitude),
            (prefs.partner_location.latitude, prefs.partner_location.longitude),
        )
    if prefs.user_location:
        return (prefs.user_location.latitude, prefs.user_location.longitude)
    return None


def _to_plan_out(candidate: ScoredCandidate, reason: str | None) -> PlanOut:
    template = candidate.template
    return PlanOut(
        template_id=template.id,
        title=template.title,
        description=template.description,
        budget=template.budget,
        duration=template.duration_class,
        styles=list(template.styles),
        venues=[
            VenueOut(
                id=v.id,
                name=v.name,
                category=v.category,
                distance=v.distance,
                latitude=v.latitude,
                longitude=v.longitude,
                rating=v.rating,
                price_level=v.price_level,
                address=v.address,
            )
            for v in candidate.venues
        ],
        score=round(candidate.score, 4),
        score_breakdown=candidate.score_breakdown,
        reason=reason,
    )


# ── Endpoints ────────────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/templates", response_model=list[ActivityTemplate])
def templates(environment: str | None = None) -> list[ActivityTemplate]:
    return [t for t in get_templates() if environment_allows(t, environment)]


@app.post("/plans", response_model=PlanResponse)
def plans(body: PlanRequest) -> PlanResponse:
    records = body.venues
    origin = _resolve_origin(body)
    if origin is not None:
        records = annotate_distances(records, origin)

    pool = normalize_venues(records)
    results = match(
        get_templates(),
        pool,
        body.preferences,
        body.environment,
        body.limit,
        exclude_ids=body.exclude_template_ids,
    )

    reasons: dict[str, str] = {}
    if body.explain and results:
        reasons = describe_plans(
            body.preferences.model_dump(),
            [
                {
                    "id": c.template.id,
                    "title": c.template.title,
                    "budget": c.template.budget,
                    "venues": [v.name for v in c.venues],
                }
                for c in results
            ],
        )

    return PlanResponse(
        plans=[_to_plan_out(c, reasons.get(c.template.id)) for c in results],
        total_venues=len(pool),
        total_plans=len(results),
    )


@app.post("/midpoint", response_model=Coordinates)
def find_midpoint(body: MidpointRequest) -> Coordinates:
    lat, lon = midpoint(
        (body.first.latitude, body.first.longitude),
        (body.second.latitude, body.second.longitude),
    )
    return Coordinates(latitude=lat, longitude=lon)
