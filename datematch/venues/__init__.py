"""
Venue pool preparation.

Responsibilities:
- Validate raw venue records handed over by the discovery service.
- Drop generic, out-of-range and duplicate venues.
- Provide small geographic helpers (midpoint, haversine distances).
"""
