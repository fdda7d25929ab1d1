"""
GameMap entity - a read-only snapshot of the board for one tick.
"""

import copy
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from .constants import (
    DIRECTIONS,
    EMPTY,
    FOOD,
    OBSTACLE,
    OUT_OF_BOUNDS,
    SNAKE,
)
from .geometry import Coordinate
from .snake import SnakeState


class GameMap:
    """
    A snapshot of the board as seen by one player.

    A GameMap is never mutated once built. "What if" positions are explored
    through `with_player_step`, which returns a new map sharing everything
    except the player's snake.

    Attributes:
        width, height: board dimensions
        snakes: dict of snake_id -> SnakeState, alive snakes only
        player_id: id of the snake this map is evaluated for
        food: frozenset of food coordinates
        obstacles: frozenset of obstacle coordinates
        round_number: game tick this snapshot belongs to
        game_id: identifier of the running game, if known
    """

    def __init__(
        self,
        width: int,
        height: int,
        snakes: Iterable[SnakeState],
        player_id: str,
        food: Iterable[Tuple[int, int]] = (),
        obstacles: Iterable[Tuple[int, int]] = (),
        round_number: int = 0,
        game_id: Optional[str] = None,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid board size {width}x{height}")
        self.width = width
        self.height = height
        self.snakes: Dict[str, SnakeState] = {s.snake_id: s for s in snakes}
        self.player_id = player_id
        self.food: FrozenSet[Coordinate] = frozenset(Coordinate(*c) for c in food)
        self.obstacles: FrozenSet[Coordinate] = frozenset(Coordinate(*c) for c in obstacles)
        self.round_number = round_number
        self.game_id = game_id
        self._blocked_by_others = self._compute_blocked_by_others()

    # ------------------------------------------------------------------
    # Snakes
    # ------------------------------------------------------------------

    @property
    def player_snake(self) -> Optional[SnakeState]:
        """The player's own snake, or None once it is dead."""
        return self.snakes.get(self.player_id)

    @property
    def opponents(self) -> List[SnakeState]:
        return [s for sid, s in self.snakes.items() if sid != self.player_id]

    # ------------------------------------------------------------------
    # Tiles
    # ------------------------------------------------------------------

    def is_out_of_bounds(self, coord: Tuple[int, int]) -> bool:
        return Coordinate(*coord).is_out_of_bounds(self.width, self.height)

    def tile_type(self, coord: Tuple[int, int]) -> str:
        coord = Coordinate(*coord)
        if self.is_out_of_bounds(coord):
            return OUT_OF_BOUNDS
        if coord in self.obstacles:
            return OBSTACLE
        if any(coord in s.body for s in self.snakes.values()):
            return SNAKE
        if coord in self.food:
            return FOOD
        return EMPTY

    def _compute_blocked_by_others(self) -> FrozenSet[Coordinate]:
        """Obstacles plus every opponent cell that stays occupied next tick."""
        cells = set(self.obstacles)
        for snake in self.opponents:
            cells.update(snake.occupied)
        return frozenset(cells)

    def is_tile_free(self, coord: Tuple[int, int]) -> bool:
        """
        True if a snake head could stand on `coord` next tick: in bounds,
        not an obstacle, and not a body segment that will still be there.
        """
        if self.is_out_of_bounds(coord):
            return False
        if coord in self._blocked_by_others:
            return False
        player = self.player_snake
        return player is None or coord not in player.occupied

    def can_move_in_direction(self, direction: str, snake_id: Optional[str] = None) -> bool:
        """Whether the snake (default: the player) can move without colliding immediately."""
        snake = self.snakes.get(snake_id if snake_id is not None else self.player_id)
        if snake is None:
            return False
        return self.is_tile_free(snake.head.translate(direction))

    def legal_directions(self, snake_id: Optional[str] = None) -> List[str]:
        return [d for d in DIRECTIONS if self.can_move_in_direction(d, snake_id)]

    # ------------------------------------------------------------------
    # Derived snapshots
    # ------------------------------------------------------------------

    def with_player_step(self, next_head: Tuple[int, int]) -> "GameMap":
        """
        Return the map after the player steps onto `next_head` and grows.

        Only the player's snake is rebuilt; obstacles, food, opponents and the
        precomputed opponent blocking set are shared with this map.
        """
        player = self.player_snake
        if player is None:
            raise ValueError(f"Player {self.player_id!r} is not on the board")
        derived = copy.copy(self)
        derived.snakes = dict(self.snakes)
        derived.snakes[self.player_id] = player.advanced(Coordinate(*next_head))
        return derived

    def for_player(self, player_id: str) -> "GameMap":
        """The same board evaluated from another snake's point of view."""
        if player_id == self.player_id:
            return self
        view = copy.copy(self)
        view.player_id = player_id
        view._blocked_by_others = view._compute_blocked_by_others()
        return view

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        A = food
        # = obstacle
        T = snake body
        0,1,2... = snake head (showing snake index)
        (0,0) is at the bottom left, x-axis labels at the bottom
        """
        board = [['.' for _ in range(self.width)] for _ in range(self.height)]

        for x, y in self.obstacles:
            board[y][x] = '#'

        for x, y in self.food:
            board[y][x] = 'A'

        for i, snake in enumerate(self.snakes.values()):
            for pos_idx, (x, y) in enumerate(snake.body):
                if self.is_out_of_bounds((x, y)):
                    continue
                board[y][x] = str(i) if pos_idx == 0 else 'T'

        result = []
        # Rows bottom to top
        for y in range(self.height - 1, -1, -1):
            result.append(f"{y:2d} {' '.join(board[y])}")
        result.append("   " + " ".join(str(i) for i in range(self.width)))

        return "\n".join(result)

    def __repr__(self):
        return (
            f"<GameMap round={self.round_number}, player={self.player_id}, "
            f"size={self.width}x{self.height}, snakes={len(self.snakes)}, food={len(self.food)}>"
        )

