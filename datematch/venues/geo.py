from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

EARTH_RADIUS_KM = 6371.0
KM_PER_MILE = 1.609344


def midpoint(a: tuple[float, float], b: tuple[float, float]) -> tuple[float, float]:
    """Plain average of two (latitude, longitude) pairs, good enough for a meeting point."""
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def annotate_distances(
    records: Iterable[Any],
    origin: tuple[float, float],
    unit: str = "mi",
) -> list[Any]:
    """Fill in ``distance`` from ``origin`` for mapping records that lack one.

    Records that already carry a distance, or have no usable coordinates, are
    passed through unchanged.
    """
    annotated: list[Any] = []
    for record in records:
        if not isinstance(record, dict) or record.get("distance") is not None:
            annotated.append(record)
            continue
        lat, lon = record.get("latitude"), record.get("longitude")
        if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
            annotated.append(record)
            continue
        km = haversine_km(origin[0], origin[1], float(lat), float(lon))
        distance = km / KM_PER_MILE if unit == "mi" else km
        annotated.append({**record, "distance": round(distance, 2)})
    return annotated
