"""
Domain entities for the snakepit engine.

This module contains the board and snake types that are independent of
transport concerns (HTTP, local game loop, etc.).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES, DIRECTIONS,
    EMPTY, FOOD, OBSTACLE, SNAKE, OUT_OF_BOUNDS,
)
from .geometry import Coordinate
from .snake import Snake, SnakeState
from .game_map import GameMap
from .events import GameStartingEvent, SnakeDeadEvent, GameEndedEvent

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES', 'DIRECTIONS',
    'EMPTY', 'FOOD', 'OBSTACLE', 'SNAKE', 'OUT_OF_BOUNDS',
    'Coordinate',
    'Snake',
    'SnakeState',
    'GameMap',
    'GameStartingEvent',
    'SnakeDeadEvent',
    'GameEndedEvent',
]
