"""
Lifecycle events delivered to players between ticks.

Players may use these to reset per-game state; none of them is required to
answer the next move request.
"""

from dataclasses import dataclass
from typing import Optional

from .geometry import Coordinate


@dataclass(frozen=True)
class GameStartingEvent:
    game_id: str
    player_count: int
    width: int
    height: int


@dataclass(frozen=True)
class SnakeDeadEvent:
    game_id: str
    snake_id: str
    death_reason: str
    position: Optional[Coordinate]
    round_number: int


@dataclass(frozen=True)
class GameEndedEvent:
    game_id: str
    winner_id: Optional[str]
    round_number: int
