"""
Base player interface for the game engine.
"""

from domain.events import GameEndedEvent, GameStartingEvent, SnakeDeadEvent
from domain.game_map import GameMap


class Player:
    """
    Base class/interface for player logic.

    Each player is responsible for returning a move for its snake_id
    given the current board snapshot. Lifecycle hooks are optional.
    """

    def __init__(self, snake_id: str):
        self.snake_id = snake_id

    def get_move(self, game_map: GameMap) -> str:
        """
        Return a move direction given the current board.

        Args:
            game_map: Snapshot of the board, seen from this player's snake

        Returns:
            One of: "UP", "DOWN", "LEFT", "RIGHT"
        """
        raise NotImplementedError

    def on_game_starting(self, event: GameStartingEvent) -> None:
        pass

    def on_snake_dead(self, event: SnakeDeadEvent) -> None:
        pass

    def on_game_ended(self, event: GameEndedEvent) -> None:
        pass
