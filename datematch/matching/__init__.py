"""
Recommendation matching engine.

Responsibilities:
- Filter activity templates down to those the venue pool can serve.
- Score templates against user preferences using deterministic heuristics.
- Allocate concrete venues to templates without reusing a venue.
- Select a diverse shortlist and order it for display.
"""
