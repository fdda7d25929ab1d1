"""
Engine settings, read from the environment (and a local .env file).

Variables:
    SNAKE_MOVE_TIMEOUT_MS      per-move budget in milliseconds (default 250)
    SNAKE_MAX_FOOD_DISTANCE    food farther than this many hops is ignored (default 20)
    SNAKE_LOOKAHEAD_DEPTH      extra simulated ticks; 0 checks one step, -1 disables (default 0)
    SNAKE_MIN_PATH_SAFETY      candidate paths must score above this (default 0.8)
    SNAKE_FALLBACK_DIRECTION   move returned when every direction is blocked (default DOWN)
    SNAKE_LOG_LEVEL            logging level for the entry points (default INFO)
"""

import os
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from dotenv import load_dotenv

from domain.constants import (
    FALLBACK_DIRECTION,
    LOOKAHEAD_DEPTH,
    MAX_FOOD_DISTANCE,
    MIN_PATH_SAFETY,
    MOVE_TIMEOUT_MS,
    VALID_MOVES,
)

T = TypeVar("T")

MAX_LOOKAHEAD_DEPTH = 3


def _sanitize_env_value(value: Optional[str]) -> Optional[str]:
    """
    Clean up env-provided strings that may include surrounding quotes or whitespace.

    Some shells/export flows set values like SNAKE_LOG_LEVEL="DEBUG".
    """
    if value is None:
        return None
    cleaned = value.strip()
    if len(cleaned) >= 2 and (
        (cleaned[0] == '"' and cleaned[-1] == '"') or (cleaned[0] == "'" and cleaned[-1] == "'")
    ):
        cleaned = cleaned[1:-1].strip()
    return cleaned or None


def _env(name: str, parse: Callable[[str], T], default: T) -> T:
    raw = _sanitize_env_value(os.getenv(name))
    if raw is None:
        return default
    try:
        return parse(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from exc


@dataclass(frozen=True)
class EngineSettings:
    move_timeout_ms: int = MOVE_TIMEOUT_MS
    max_food_distance: int = MAX_FOOD_DISTANCE
    lookahead_depth: int = LOOKAHEAD_DEPTH
    min_path_safety: float = MIN_PATH_SAFETY
    fallback_direction: str = FALLBACK_DIRECTION
    log_level: str = "INFO"

    def __post_init__(self):
        if self.move_timeout_ms <= 0:
            raise ValueError("move_timeout_ms must be positive")
        if self.lookahead_depth > MAX_LOOKAHEAD_DEPTH:
            raise ValueError(
                f"lookahead_depth {self.lookahead_depth} exceeds {MAX_LOOKAHEAD_DEPTH}; "
                "deeper searches cannot finish inside a tick"
            )
        if self.fallback_direction not in VALID_MOVES:
            raise ValueError(f"Unknown fallback direction {self.fallback_direction!r}")

    @property
    def move_timeout_seconds(self) -> float:
        return self.move_timeout_ms / 1000.0


def _direction(value: str) -> str:
    value = value.upper()
    if value not in VALID_MOVES:
        raise ValueError(value)
    return value


def load_settings(dotenv: bool = True) -> EngineSettings:
    """Build EngineSettings from SNAKE_* environment variables."""
    if dotenv:
        load_dotenv()

    return EngineSettings(
        move_timeout_ms=_env("SNAKE_MOVE_TIMEOUT_MS", int, MOVE_TIMEOUT_MS),
        max_food_distance=_env("SNAKE_MAX_FOOD_DISTANCE", int, MAX_FOOD_DISTANCE),
        lookahead_depth=_env("SNAKE_LOOKAHEAD_DEPTH", int, LOOKAHEAD_DEPTH),
        min_path_safety=_env("SNAKE_MIN_PATH_SAFETY", float, MIN_PATH_SAFETY),
        fallback_direction=_env("SNAKE_FALLBACK_DIRECTION", _direction, FALLBACK_DIRECTION),
        log_level=_env("SNAKE_LOG_LEVEL", str.upper, "INFO"),
    )
