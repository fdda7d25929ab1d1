"""
Move-selection strategy: path search, destination selectors and lookahead.
"""

from .search import PathResult, UNREACHABLE_COST, shortest_path, normalize_safety
from .selectors import paths_to_nearest_food, paths_to_trap_enemy
from .lookahead import path_survives, iter_surviving_paths, reduce_paths_by_lookahead

__all__ = [
    'PathResult',
    'UNREACHABLE_COST',
    'shortest_path',
    'normalize_safety',
    'paths_to_nearest_food',
    'paths_to_trap_enemy',
    'path_survives',
    'iter_surviving_paths',
    'reduce_paths_by_lookahead',
]
