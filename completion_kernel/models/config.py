"""Prompting configuration — cadences, limits and ranking tables."""

import os
from typing import Dict, Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "COMPLETION_KERNEL"

DEFAULT_CATEGORY_RANKS: Dict[str, int] = {
    "boss": 1,
    "quest": 2,
    "exploration": 3,
    "item": 4,
    "character": 5,
    "custom": 6,
}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class PromptingConfig(BaseModel):
    """Configuration for the Completion Prompting Engine."""

    central_cadence: int = Field(default=3, ge=1)     # Every Nth turn when central tasks exist
    ai_cadence: int = Field(default=6, ge=1)          # Every Nth turn on AI tasks (paid tiers)
    max_tasks_per_prompt: int = Field(default=2, ge=1)
    recency_window_seconds: float = Field(default=24 * 60 * 60, ge=0)
    category_ranks: Dict[str, int] = Field(default_factory=lambda: dict(DEFAULT_CATEGORY_RANKS))
    unknown_category_rank: int = 7
    central_prompt_text: str = "Have you completed any of these tasks?"
    ai_prompt_text: str = "Have you completed any of these recent objectives?"

    @classmethod
    def from_env(cls, prefix: Optional[str] = None) -> "PromptingConfig":
        """Build a config from <PREFIX>_* environment variables, keeping defaults for the rest."""
        prefix = prefix or ENV_PREFIX
        defaults = cls()
        return cls(
            central_cadence=_env_int(f"{prefix}_CENTRAL_CADENCE", defaults.central_cadence),
            ai_cadence=_env_int(f"{prefix}_AI_CADENCE", defaults.ai_cadence),
            max_tasks_per_prompt=_env_int(f"{prefix}_MAX_TASKS", defaults.max_tasks_per_prompt),
            recency_window_seconds=_env_float(
                f"{prefix}_RECENCY_WINDOW_SECONDS", defaults.recency_window_seconds
            ),
        )
