from __future__ import annotations

import json
import logging
from typing import Any

from groq import Groq

from .config import DEFAULT_PITCH_CONFIG, PitchConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a warm, upbeat date planner. "
    "Given a couple's preferences and a list of date plans that have already "
    "been chosen for them, write one short, friendly sentence per plan saying "
    "why it suits them. Do not add, remove or reorder plans. Leave any "
    "{partner_name} placeholder exactly as written.\n\n"
    "Return ONLY valid JSON in this exact format:\n"
    '{"plans": [{"id": "<plan_id>", "reason": "<one sentence>"}]}'
)


def _build_user_message(
    preferences: dict[str, Any],
    plans: list[dict[str, Any]],
) -> str:
    lines = ["## Couple Preferences"]
    if preferences.get("budget"):
        lines.append(f"- Budget: {preferences['budget']}")
    if preferences.get("duration"):
        lines.append(f"- Duration: {preferences['duration']}")
    if preferences.get("venue_preference"):
        lines.append(f"- Venues: {preferences['venue_preference']}")
    if preferences.get("love_languages"):
        lines.append(f"- Love languages: {', '.join(preferences['love_languages'])}")
    if preferences.get("interests"):
        lines.append(f"- Interests: {', '.join(preferences['interests'])}")

    lines.append("\n## Chosen Plans")
    lines.append("| ID | Title | Budget | Venues |")
    lines.append("|---|---|---|---|")
    for p in plans:
        venues_str = ", ".join(p.get("venues", [])) or "at home"
        lines.append(f"| {p['id']} | {p['title']} | {p.get('budget', '?')} | {venues_str} |")

    return "\n".join(lines)


def _clip(text: str, limit: int) -> str:
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    cut = text[:limit].rsplit(" ", 1)[0]
    return cut.rstrip(",;:") + "..."


def describe_plans(
    preferences: dict[str, Any],
    plans: list[dict[str, Any]],
    config: PitchConfig = DEFAULT_PITCH_CONFIG,
) -> dict[str, str]:
    """
    Ask Groq for a one-sentence pitch per plan.

    Returns a dict mapping plan (template) id -> pitch.
    Returns empty dict on any failure (timeout, bad JSON, API error).
    """
    if not config.enabled or not config.api_key:
        return {}

    if not plans:
        return {}

    known_ids = {str(p["id"]) for p in plans}

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": _build_user_message(preferences, plans),
                },
            ],
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content or ""
        parsed = json.loads(content)

        pitches: dict[str, str] = {}
        for item in parsed.get("plans", []):
            if not isinstance(item, dict):
                continue
            pid = str(item.get("id", ""))
            reason = _clip(str(item.get("reason") or ""), config.max_reason_chars)
            # First answer per plan wins; invented plan ids are dropped
            if pid in known_ids and reason and pid not in pitches:
                pitches[pid] = reason

        return pitches

    except Exception:
        logger.warning("Groq pitch call failed, returning plans without pitches", exc_info=True)
        return {}
