"""Process-wide settings, read once from the environment.

Settings are frozen: the delta-T model, iteration ceilings and scan step are
chosen when the process first asks for them and never change afterwards.
Tests that need other values call ``get_settings.cache_clear()`` after patching
the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

DELTA_T_MODELS = ("em2006", "jplhorizons", "table")


@dataclass(frozen=True)
class Settings:
    delta_t_model: str = "em2006"
    delta_t_table: Optional[str] = None
    search_max_iterations: int = 50
    light_time_max_iterations: int = 10
    rise_set_step_hours: float = 2.0

    def __post_init__(self) -> None:
        if self.delta_t_model not in DELTA_T_MODELS:
            raise ValueError(f"delta_t_model must be one of: {', '.join(DELTA_T_MODELS)}")
        if self.search_max_iterations < 5:
            raise ValueError("search_max_iterations must be >= 5")
        if self.light_time_max_iterations < 5:
            raise ValueError("light_time_max_iterations must be >= 5")
        if not (0.0 < self.rise_set_step_hours <= 6.0):
            raise ValueError("rise_set_step_hours must be in (0, 6]")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Build the settings object from environment variables:

      EPHEMSEARCH_DELTA_T              em2006 | jplhorizons | table
      EPHEMSEARCH_DELTAT_TABLE         CSV path used by the 'table' model
      EPHEMSEARCH_SEARCH_MAX_ITER      iteration ceiling of search()
      EPHEMSEARCH_LIGHT_TIME_MAX_ITER  iteration ceiling of the light-time loop
      EPHEMSEARCH_RISE_SET_STEP_HOURS  pre-scan step of rise/set searches
    """
    table = os.environ.get("EPHEMSEARCH_DELTAT_TABLE", "").strip() or None
    return Settings(
        delta_t_model=os.environ.get("EPHEMSEARCH_DELTA_T", "em2006").strip().lower() or "em2006",
        delta_t_table=table,
        search_max_iterations=_env_int("EPHEMSEARCH_SEARCH_MAX_ITER", 50),
        light_time_max_iterations=_env_int("EPHEMSEARCH_LIGHT_TIME_MAX_ITER", 10),
        rise_set_step_hours=_env_float("EPHEMSEARCH_RISE_SET_STEP_HOURS", 2.0),
    )
