"""
Depth-limited lookahead: drop candidate paths whose first step strands us.

Cost grows with (candidates per level) ** (depth + 1), so depth stays small;
the default of 0 simulates a single tick.
"""

from typing import Iterable, Iterator, List

from domain.constants import MIN_PATH_SAFETY
from domain.game_map import GameMap

from .search import PathResult
from .selectors import paths_to_nearest_food, paths_to_trap_enemy


def path_survives(
    game_map: GameMap,
    path: PathResult,
    depth: int,
    min_safety: float = MIN_PATH_SAFETY,
) -> bool:
    """
    Whether taking the first step of `path` leaves any follow-up target.

    At depth 0 the step survives if food or a trap target is still reachable.
    At deeper levels both the food and the trap candidates of the next
    position must keep a survivor one level down.
    """
    if path.next_step is None:
        return False

    next_map = game_map.with_player_step(path.next_step)
    food_paths = paths_to_nearest_food(next_map, min_safety)

    if depth > 0:
        if not any(iter_surviving_paths(next_map, food_paths, depth - 1, min_safety)):
            return False
        trap_paths = paths_to_trap_enemy(next_map, min_safety)
        return any(iter_surviving_paths(next_map, trap_paths, depth - 1, min_safety))

    if food_paths:
        return True
    return bool(paths_to_trap_enemy(next_map, min_safety))


def iter_surviving_paths(
    game_map: GameMap,
    paths: Iterable[PathResult],
    depth: int,
    min_safety: float = MIN_PATH_SAFETY,
) -> Iterator[PathResult]:
    """Yield the paths that survive lookahead, lazily and in their original order."""
    for path in paths:
        if path_survives(game_map, path, depth, min_safety):
            yield path


def reduce_paths_by_lookahead(
    game_map: GameMap,
    paths: Iterable[PathResult],
    depth: int,
    min_safety: float = MIN_PATH_SAFETY,
) -> List[PathResult]:
    return list(iter_surviving_paths(game_map, paths, depth, min_safety))
