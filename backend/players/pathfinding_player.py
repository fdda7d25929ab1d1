"""
Pathfinding player - the per-tick decision policy.

Priority order each tick:
  1. no legal move           -> fixed fallback direction
  2. close, safe food        -> first step towards it
  3. tile next to an enemy   -> first step towards it (trap)
  4. otherwise               -> random legal move
"""

import logging
import random
import time
from typing import List, Optional, Tuple

from domain.events import GameEndedEvent, GameStartingEvent, SnakeDeadEvent
from domain.game_map import GameMap
from settings import EngineSettings
from strategy.lookahead import path_survives
from strategy.search import PathResult
from strategy.selectors import paths_to_nearest_food, paths_to_trap_enemy
from .base import Player


logger = logging.getLogger(__name__)


class PathfindingPlayer(Player):
    """
    Moves towards the safest reachable food, falls back to trapping an enemy.

    Args:
        snake_id: id of the controlled snake
        settings: decision thresholds; defaults to EngineSettings()
        rng: random source for the last-resort move, injectable for tests
    """

    def __init__(
        self,
        snake_id: str,
        settings: Optional[EngineSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(snake_id)
        self.settings = settings or EngineSettings()
        self.rng = rng or random.Random()
        self.last_decision: Optional[str] = None
        self._reset()

    def _reset(self, game_id: Optional[str] = None, player_count: int = 0) -> None:
        self.game_id = game_id
        self.turns_played = 0
        self.opponents_remaining = max(player_count - 1, 0)

    # ------------------------------------------------------------------
    # Decision
    # ------------------------------------------------------------------

    def get_move(self, game_map: GameMap) -> str:
        if game_map.player_id != self.snake_id:
            game_map = game_map.for_player(self.snake_id)

        started = time.perf_counter()
        direction, reason = self.decide(game_map)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        self.turns_played += 1
        self.last_decision = reason
        logger.debug(
            f"Snake {self.snake_id} round {game_map.round_number}: {direction} ({reason}, {elapsed_ms:.1f}ms)"
        )
        if elapsed_ms > self.settings.move_timeout_ms:
            logger.warning(
                f"Snake {self.snake_id} took {elapsed_ms:.1f}ms to decide, "
                f"budget is {self.settings.move_timeout_ms}ms"
            )
        return direction

    def decide(self, game_map: GameMap) -> Tuple[str, str]:
        """Return (direction, reason) where reason names the branch taken."""
        possible_moves = game_map.legal_directions()
        if not possible_moves:
            return self.settings.fallback_direction, "no_legal_move"

        head = game_map.player_snake.head
        min_safety = self.settings.min_path_safety

        food = self._first_surviving(game_map, paths_to_nearest_food(game_map, min_safety))
        if food is not None and food.cost < self.settings.max_food_distance:
            return head.direction_to(food.next_step), "food"

        trap = self._first_surviving(game_map, paths_to_trap_enemy(game_map, min_safety))
        if trap is not None:
            return head.direction_to(trap.next_step), "trap"

        return self.rng.choice(possible_moves), "random"

    def _first_surviving(self, game_map: GameMap, paths: List[PathResult]) -> Optional[PathResult]:
        """
        Pick the best-ranked path that survives the lookahead.

        A path that reaches its target in one step is always kept: the step
        itself eats the food or lands next to the enemy. When nothing survives
        the best-ranked path is returned anyway.
        """
        if not paths:
            return None
        depth = self.settings.lookahead_depth
        if depth < 0:
            return paths[0]
        min_safety = self.settings.min_path_safety
        for path in paths:
            if path.next_step == path.destination or path_survives(game_map, path, depth, min_safety):
                return path
        return paths[0]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def on_game_starting(self, event: GameStartingEvent) -> None:
        logger.info(
            f"Game {event.game_id} starting: {event.player_count} players on {event.width}x{event.height}"
        )
        self._reset(event.game_id, event.player_count)

    def on_snake_dead(self, event: SnakeDeadEvent) -> None:
        # Strategy does not change yet; only the opponent count is tracked.
        if event.snake_id != self.snake_id:
            self.opponents_remaining = max(self.opponents_remaining - 1, 0)
        logger.info(
            f"Snake {event.snake_id} died ({event.death_reason}) in round {event.round_number}, "
            f"{self.opponents_remaining} opponents remaining"
        )

    def on_game_ended(self, event: GameEndedEvent) -> None:
        outcome = "won" if event.winner_id == self.snake_id else f"winner {event.winner_id}"
        logger.info(f"Game {event.game_id} ended after {event.round_number} rounds: {outcome}")
