"""
Random player implementation - picks random safe moves.
"""

import random
from typing import Optional

from domain.constants import DIRECTIONS
from domain.game_map import GameMap
from .base import Player


class RandomPlayer(Player):
    """
    A random AI that picks a direction that avoids walls, obstacles and bodies.
    """

    def __init__(self, snake_id: str, rng: Optional[random.Random] = None):
        super().__init__(snake_id)
        self.rng = rng or random.Random()

    def get_move(self, game_map: GameMap) -> str:
        valid_moves = game_map.legal_directions(self.snake_id)

        # If no valid moves, just return a random move (we'll die anyway)
        if not valid_moves:
            return self.rng.choice(DIRECTIONS)

        return self.rng.choice(valid_moves)
