from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import pandas as pd
from pydantic import ValidationError

from ..matching.models import Venue
from .config import DEFAULT_VENUE_POOL_CONFIG, VenuePoolConfig

logger = logging.getLogger(__name__)


def _parse_record(record: Any) -> Venue | None:
    try:
        return Venue.model_validate(record)
    except ValidationError as exc:
        logger.debug("Skipping malformed venue record: %s", exc.errors()[0].get("msg"))
        return None


def normalize_venues(
    records: Iterable[Any],
    config: VenuePoolConfig = DEFAULT_VENUE_POOL_CONFIG,
) -> list[Venue]:
    """
    Turn raw discovery results into the venue pool used for matching.

    Steps:
    - Parse each record into a Venue, skipping malformed ones.
    - Drop empty ids, short or generic names and venues beyond ``max_radius``.
    - Deduplicate by id, keeping the first occurrence.
    - Sort by distance, closest first.

    Never raises; an empty list means nothing usable is nearby.
    """
    parsed = [v for v in (_parse_record(r) for r in records or ()) if v is not None]
    if not parsed:
        return []

    df = pd.DataFrame({
        "id": [v.id for v in parsed],
        "name": [v.name for v in parsed],
        "distance": [v.distance for v in parsed],
    })
    denylist = {name.strip().lower() for name in config.denylist}

    # --- Hard filters ---
    mask = df["id"].str.len() > 0
    mask = mask & (df["name"].str.len() >= config.min_name_length)
    mask = mask & ~df["name"].str.lower().isin(denylist)
    mask = mask & (df["distance"] <= config.max_radius)

    kept = (
        df.loc[mask]
        .drop_duplicates(subset="id", keep="first")
        .sort_values("distance", kind="mergesort")
    )

    dropped = len(parsed) - len(kept)
    if dropped:
        logger.debug("Dropped %d of %d venue records during normalization", dropped, len(parsed))

    return [parsed[i] for i in kept.index]


def available_categories(venues: Iterable[Venue]) -> set[str]:
    return {v.category for v in venues}
