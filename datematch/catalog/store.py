from __future__ import annotations

import json
from pathlib import Path

from ..matching.models import ActivityTemplate

_TEMPLATES_JSON = Path(__file__).resolve().parent / "data" / "templates.json"

_templates: tuple[ActivityTemplate, ...] | None = None


def load_templates(path: Path = _TEMPLATES_JSON) -> tuple[ActivityTemplate, ...]:
    """Read and validate a template catalog file."""
    with path.open(encoding="utf-8") as fh:
        raw = json.load(fh)
    return tuple(ActivityTemplate.model_validate(item) for item in raw)


def get_templates() -> tuple[ActivityTemplate, ...]:
    """Return the bundled template catalog, loading it on first call."""
    global _templates
    if _templates is None:
        _templates = load_templates()
    return _templates


def get_template(template_id: str) -> ActivityTemplate | None:
    return next((t for t in get_templates() if t.id == template_id), None)
