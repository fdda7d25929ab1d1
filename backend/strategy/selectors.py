"""
Destination selectors: candidate food and trap targets, ranked by path safety.
"""

from typing import Iterable, List

from domain.constants import MIN_PATH_SAFETY
from domain.game_map import GameMap
from domain.geometry import Coordinate

from .search import PathResult, free_neighbors, shortest_path


def all_food_coordinates(game_map: GameMap) -> List[Coordinate]:
    """Food tiles in board scan order (row by row, left to right)."""
    return sorted(game_map.food, key=lambda c: (c.y, c.x))


def sort_coordinates_by_distance(
    origin: Coordinate,
    coordinates: Iterable[Coordinate],
    descending: bool = False,
) -> List[Coordinate]:
    """Stable sort by Manhattan distance from `origin`."""
    return sorted(coordinates, key=origin.manhattan_distance_to, reverse=descending)


def paths_to_destinations(
    game_map: GameMap,
    destinations: Iterable[Coordinate],
    min_safety: float = MIN_PATH_SAFETY,
) -> List[PathResult]:
    """
    Search from the player's head to each destination, in the given order.

    Keeps non-degenerate paths whose safety exceeds `min_safety` and returns
    them safest first; equally safe paths keep the destination order.
    """
    player = game_map.player_snake
    if player is None:
        return []

    paths = []
    for destination in destinations:
        result = shortest_path(game_map, player.head, destination)
        if len(result.path) > 1 and result.safety > min_safety:
            paths.append(result)

    return sorted(paths, key=lambda p: p.safety, reverse=True)


def paths_to_nearest_food(game_map: GameMap, min_safety: float = MIN_PATH_SAFETY) -> List[PathResult]:
    player = game_map.player_snake
    if player is None:
        return []
    food = sort_coordinates_by_distance(player.head, all_food_coordinates(game_map))
    return paths_to_destinations(game_map, food, min_safety)


def trap_destinations(game_map: GameMap) -> List[Coordinate]:
    """
    Free tiles next to opponent heads, farthest from the player first.

    Farthest-first is a tunable heuristic, not a correctness requirement.
    """
    player = game_map.player_snake
    if player is None:
        return []

    candidates = []
    for snake in game_map.opponents:
        candidates.extend(free_neighbors(game_map, snake.head))
    return sort_coordinates_by_distance(player.head, candidates, descending=True)


def paths_to_trap_enemy(game_map: GameMap, min_safety: float = MIN_PATH_SAFETY) -> List[PathResult]:
    return paths_to_destinations(game_map, trap_destinations(game_map), min_safety)
