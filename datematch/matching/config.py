from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ScoringWeights:
    """Maximum contribution of each scoring factor."""

    budget_match: float = 40.0
    duration_match: float = 40.0
    venue_preference_match: float = 30.0
    basic_template: float = 25.0
    venue_available: float = 20.0
    love_language_match: float = 15.0
    interest_match: float = 10.0
    distance_bonus: float = 10.0
    variety_bonus: float = 10.0

    def cap(self, factor: str) -> float:
        return getattr(self, factor)


@dataclass(frozen=True)
class MatchingConfig:
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    # Number of open venues at which the availability factor saturates
    availability_saturation: int = 5
    # Distance (same unit as venue distances) at which the distance bonus reaches 0
    max_distance: float = float(os.getenv("DATEMATCH_MAX_DISTANCE", "10"))
    # Width of the distance bands used when ordering the final shortlist
    distance_tolerance: float = 1.0
    allow_venue_reuse: bool = _env_flag("DATEMATCH_ALLOW_VENUE_REUSE")
    default_limit: int = 3


DEFAULT_MATCHING_CONFIG = MatchingConfig()
