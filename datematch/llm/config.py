from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class PitchConfig:
    """Settings for the optional one-line plan pitches written by Groq."""

    api_key: str = os.getenv("GROQ_API_KEY", "")
    model: str = os.getenv("DATEMATCH_PITCH_MODEL", "llama-3.3-70b-versatile")
    # Pitches are decoration; a slow answer is dropped rather than awaited
    timeout: float = 5.0
    max_tokens: int = 512
    temperature: float = 0.7
    max_reason_chars: int = 200
    enabled: bool = os.getenv("DATEMATCH_PLAN_PITCHES", "true").strip().lower() in ("1", "true", "yes", "on")


DEFAULT_PITCH_CONFIG = PitchConfig()
