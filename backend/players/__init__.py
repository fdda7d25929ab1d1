"""
Player implementations for the snakepit engine.

This module contains the player abstraction and the implementations
that control snake movement decisions.
"""

from .base import Player
from .random_player import RandomPlayer
from .pathfinding_player import PathfindingPlayer
from .variant_registry import get_player_class, list_variants, AVAILABLE_VARIANTS

__all__ = [
    'Player',
    'RandomPlayer',
    'PathfindingPlayer',
    'get_player_class',
    'list_variants',
    'AVAILABLE_VARIANTS',
]
