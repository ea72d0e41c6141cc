from __future__ import annotations

import math
import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

BUDGET_TIERS = ["$", "$$", "$$$"]
DURATION_CLASSES = ["quick", "half-day", "full-day"]
VENUE_PREFERENCES = ["single", "multiple"]

VENUE_CATEGORIES = frozenset({
    "restaurant",
    "cafe",
    "bar",
    "winery",
    "brewery",
    "park",
    "museum",
    "gallery",
    "theater",
    "cinema",
    "activity",
    "spa",
    "market",
    "shopping",
    "entertainment",
})

_PRICE_LEVELS = ["Free", "$", "$$", "$$$", "$$$$"]
_QUANTITY_RE = re.compile(
    r"(\d+(?:\.\d+)?)(?:\s*(?:-|–|to)\s*(\d+(?:\.\d+)?))?\s*([a-z]*)"
)
_MINUTE_UNITS = frozenset({"m", "min", "mins", "minute", "minutes"})
_DAY_UNITS = frozenset({"d", "day", "days"})
_FULL_DAY_WORDS = ("full day", "full-day", "all day", "all-day", "overnight", "weekend")
_HALF_DAY_WORDS = ("half day", "half-day")


def parse_duration_hours(text: str | None) -> float | None:
    """Best-effort conversion of a free-text duration ("1-2 hours", "90 min") to hours."""
    raw = (text or "").strip().lower()
    if not raw:
        return None
    if any(word in raw for word in _HALF_DAY_WORDS):
        return 4.0
    if any(word in raw for word in _FULL_DAY_WORDS):
        return 8.0

    quantities = _QUANTITY_RE.findall(raw)
    if not quantities:
        return 8.0 if "day" in raw else None

    # "2 hours 30 minutes" adds up; a range like "2-4 hours" counts its upper bound
    total = 0.0
    for low, high, unit in quantities:
        value = float(high or low)
        if unit in _MINUTE_UNITS:
            total += value / 60.0
        elif unit in _DAY_UNITS:
            total += value * 8.0
        else:
            total += value
    return total


def parse_duration_class(text: str | None) -> str:
    hours = parse_duration_hours(text)
    if hours is None or hours <= 3:
        return "quick"
    if hours <= 5:
        return "half-day"
    return "full-day"


class Coordinates(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class Venue(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str
    latitude: float = Field(..., ge=-90.0, le=90.0, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180.0, le=180.0, allow_inf_nan=False)
    distance: float = Field(..., ge=0.0, allow_inf_nan=False)
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    price_level: str | None = None
    is_open: bool | None = None
    description: str = ""
    address: str = ""

    @field_validator("id", "name", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        return value.strip() if isinstance(value, str) else value

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        category = value.strip().lower()
        return category if category in VENUE_CATEGORIES else "other"

    @field_validator("price_level", mode="before")
    @classmethod
    def _map_price_level(cls, value: Any) -> Any:
        # Places APIs report price as 0-4, sometimes serialized as 2.0
        if isinstance(value, bool):
            return None
        if isinstance(value, float):
            if not value.is_integer():
                return None
            value = int(value)
        if isinstance(value, int):
            return _PRICE_LEVELS[value] if 0 <= value < len(_PRICE_LEVELS) else None
        return value

    @field_validator("description", "address", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


class ActivityTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = ""
    required_venue_categories: tuple[str, ...] = ()
    budget: Literal["$", "$$", "$$$"] = "$$"
    time_required: str = ""
    styles: tuple[str, ...] = ()
    love_languages: tuple[str, ...] = ()
    interest_tags: tuple[str, ...] = ()
    environment: Literal["indoor", "outdoor", "both"] = "both"
    intent: str | None = None
    basic: bool = False

    @field_validator("required_venue_categories", mode="before")
    @classmethod
    def _lower_categories(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return tuple(str(c).strip().lower() for c in value if str(c).strip())
        return value

    @property
    def duration_class(self) -> str:
        return parse_duration_class(self.time_required)

    @property
    def venue_count_class(self) -> str:
        return "multiple" if len(self.required_venue_categories) > 1 else "single"


class UserPreferences(BaseModel):
    budget: str | None = Field(default=None, description='One of "$", "$$", "$$$"')
    duration: str | None = Field(default=None, description="quick, half-day or full-day")
    venue_preference: str | None = Field(default=None, description="single or multiple")
    love_languages: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    user_location: Coordinates | None = None
    partner_location: Coordinates | None = None


class ScoreBreakdown(BaseModel):
    budget_match: float = 0.0
    duration_match: float = 0.0
    venue_preference_match: float = 0.0
    basic_template: float = 0.0
    venue_available: float = 0.0
    love_language_match: float = 0.0
    interest_match: float = 0.0
    distance_bonus: float = 0.0
    variety_bonus: float = 0.0

    @property
    def total(self) -> float:
        return sum(self.model_dump().values())


class ScoredCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    template: ActivityTemplate
    score: float
    score_breakdown: ScoreBreakdown
    venues: tuple[Venue, ...] = ()

    @property
    def primary_venue_category(self) -> str | None:
        return self.venues[0].category if self.venues else None

    @property
    def closest_venue_distance(self) -> float:
        return min((v.distance for v in self.venues), default=math.inf)


# ── HTTP payloads ────────────────────────────────────────────────────────


class PlanRequest(BaseModel):
    venues: list[Any] = Field(
        default_factory=list,
        description="Raw venue records from the discovery service; invalid ones are skipped",
    )
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    environment: str | None = Field(default=None, description="indoor, outdoor or at-home")
    limit: int = Field(default=3, ge=1, le=10)
    exclude_template_ids: list[str] = Field(default_factory=list)
    origin: Coordinates | None = Field(
        default=None, description="Used to fill in distances missing from venue records"
    )
    explain: bool = False


class VenueOut(BaseModel):
    id: str
    name: str
    category: str
    distance: float
    latitude: float
    longitude: float
    rating: float | None
    price_level: str | None
    address: str


class PlanOut(BaseModel):
    template_id: str
    title: str
    description: str
    budget: str
    duration: str
    styles: list[str]
    venues: list[VenueOut]
    score: float
    score_breakdown: ScoreBreakdown
    reason: str | None = None


class PlanResponse(BaseModel):
    plans: list[PlanOut]
    total_venues: int
    total_plans: int


class MidpointRequest(BaseModel):
    first: Coordinates
    second: Coordinates
