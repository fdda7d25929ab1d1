"""
Snake entities: the mutable snake driven by the local game, and the frozen
per-tick view of a snake handed to players.
"""

from collections import deque
from dataclasses import dataclass
from functools import cached_property
from typing import FrozenSet, Iterable, List, Optional, Tuple

from .geometry import Coordinate


class Snake:
    """
    Represents a snake on the board.

    Attributes:
        positions: deque of (x, y) from head at index 0 to tail at the end
        alive: whether this snake is still alive
        death_reason: e.g., 'wall', 'obstacle', 'head_collision', 'body_collision'
        death_round: The round number when the snake died
    """

    def __init__(self, positions: List[Tuple[int, int]]):
        self.positions = deque(Coordinate(*p) for p in positions)
        self.alive = True
        self.death_reason: Optional[str] = None
        self.death_round: Optional[int] = None

    @property
    def head(self) -> Coordinate:
        """Return the head position (first element)."""
        return self.positions[0]

    @property
    def tail(self) -> Coordinate:
        return self.positions[-1]

    def snapshot(self, snake_id: str) -> "SnakeState":
        return SnakeState(snake_id, tuple(self.positions))


@dataclass(frozen=True)
class SnakeState:
    """
    Read-only view of one snake for a single tick.

    `body` runs from head (index 0) to tail.
    """

    snake_id: str
    body: Tuple[Coordinate, ...]

    def __post_init__(self):
        if not self.body:
            raise ValueError(f"Snake {self.snake_id!r} has an empty body")

    @classmethod
    def from_positions(cls, snake_id: str, positions: Iterable[Tuple[int, int]]) -> "SnakeState":
        return cls(snake_id, tuple(Coordinate(*p) for p in positions))

    @property
    def head(self) -> Coordinate:
        return self.body[0]

    @property
    def tail(self) -> Coordinate:
        return self.body[-1]

    @property
    def length(self) -> int:
        return len(self.body)

    @cached_property
    def occupied(self) -> FrozenSet[Coordinate]:
        """Cells that stay occupied next tick; the tail moves away."""
        return frozenset(self.body[:-1])

    def advanced(self, next_head: Coordinate) -> "SnakeState":
        """This snake after stepping onto `next_head` and growing by one segment."""
        return SnakeState(self.snake_id, (Coordinate(*next_head),) + self.body)
