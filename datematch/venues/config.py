from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

# Names that discovery services return for localities or whole categories
# rather than for an actual place
GENERIC_VENUE_NAMES: frozenset[str] = frozenset({
    "unknown",
    "point of interest",
    "establishment",
    "restaurant",
    "restaurants",
    "cafe",
    "bar",
    "park",
    "museum",
    "downtown",
    "city center",
    "city centre",
    "main street",
    "united states",
    "usa",
    "new york",
    "los angeles",
    "chicago",
    "san francisco",
    "london",
})


@dataclass(frozen=True)
class VenuePoolConfig:
    """
    Configuration for venue pool normalization.
    """

    max_radius: float = float(os.getenv("DATEMATCH_MAX_RADIUS", "20"))
    min_name_length: int = 3
    denylist: frozenset[str] = GENERIC_VENUE_NAMES


DEFAULT_VENUE_POOL_CONFIG = VenuePoolConfig()
