"""
Breadth-first shortest path search with a path safety score.

The safety score is a ranking heuristic, not a probability. For every cell of
a path we count the free neighbors perpendicular to the direction of travel
(room to dodge while following the path) and normalise the sum with
`normalize_safety`:

    path length <= 2:   0 free -> 0.0, 1 -> 0.5, 2 -> 0.9, 3+ -> 1.0
    path length  > 2:   length * 4 / free, or 0.0 when nothing is free

Long paths therefore score above 1; callers only compare scores with each
other and with a minimum threshold.
"""

from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from domain.constants import DIRECTIONS, LEFT, RIGHT, UP, DOWN
from domain.game_map import GameMap
from domain.geometry import Coordinate

UNREACHABLE_COST = -1


@dataclass(frozen=True)
class PathResult:
    """
    Outcome of a shortest path search.

    Attributes:
        path: coordinates from start to destination, both inclusive; empty if unreachable
        cost: number of hops, or UNREACHABLE_COST
        safety: normalised count of free neighbors along the path
    """

    path: Tuple[Coordinate, ...]
    cost: int
    safety: float

    @property
    def reachable(self) -> bool:
        return self.cost != UNREACHABLE_COST

    @property
    def destination(self) -> Optional[Coordinate]:
        return self.path[-1] if self.path else None

    @property
    def next_step(self) -> Optional[Coordinate]:
        """First cell after the start, or None for degenerate paths."""
        return self.path[1] if len(self.path) > 1 else None


UNREACHABLE = PathResult((), UNREACHABLE_COST, 0.0)


def normalize_safety(path_length: int, free_neighbors: int) -> float:
    if path_length <= 2:
        if free_neighbors <= 0:
            return 0.0
        if free_neighbors == 1:
            return 0.5
        if free_neighbors == 2:
            return 0.9
        return 1.0

    if free_neighbors <= 0:
        return 0.0
    return (path_length * 4) / free_neighbors


def free_neighbors(game_map: GameMap, coord: Coordinate) -> List[Coordinate]:
    """Free orthogonal neighbors of `coord`, in direction order."""
    return [n for n in Coordinate(*coord).neighbors() if game_map.is_tile_free(n)]


def count_free_neighbors_along_path(game_map: GameMap, path: Tuple[Coordinate, ...]) -> int:
    """
    Sum the free neighbors perpendicular to travel over every path cell.

    Each cell uses the direction of the step that enters it; the start cell
    uses the direction of the first step.
    """
    if len(path) < 2:
        return 0

    total = 0
    for i, cell in enumerate(path):
        step_from, step_to = (path[0], path[1]) if i == 0 else (path[i - 1], cell)
        direction = step_from.direction_to(step_to)
        sideways = (UP, DOWN) if direction in (LEFT, RIGHT) else (LEFT, RIGHT)
        total += sum(1 for d in sideways if game_map.is_tile_free(cell.translate(d)))
    return total


def _next_to_opponent_head(coord: Coordinate, opponent_heads: List[Coordinate]) -> bool:
    return any(coord.manhattan_distance_to(head) <= 1 for head in opponent_heads)


def _backtrack(parents: Dict[Coordinate, Optional[Coordinate]], end: Coordinate) -> Tuple[Coordinate, ...]:
    path = []
    node: Optional[Coordinate] = end
    while node is not None:
        path.append(node)
        node = parents[node]
    path.reverse()
    return tuple(path)


def shortest_path(game_map: GameMap, start: Tuple[int, int], destination: Tuple[int, int]) -> PathResult:
    """
    Find a minimum-hop path from `start` to `destination`.

    Neighbors are expanded in DIRECTIONS order, so the first discovered path
    wins ties. From the start cell only, neighbors within one step of an
    opponent's head are skipped to avoid head-on collisions.

    Returns:
        PathResult; UNREACHABLE when the destination cannot be reached.
    """
    start = Coordinate(*start)
    destination = Coordinate(*destination)

    if start == destination:
        return PathResult((start,), 0, normalize_safety(1, 0))
    if not game_map.is_tile_free(destination):
        return UNREACHABLE

    opponent_heads = [snake.head for snake in game_map.opponents]
    parents: Dict[Coordinate, Optional[Coordinate]] = {start: None}
    queue = deque([start])

    while queue:
        current = queue.popleft()

        if current == destination:
            path = _backtrack(parents, destination)
            free = count_free_neighbors_along_path(game_map, path)
            return PathResult(path, len(path) - 1, normalize_safety(len(path), free))

        for direction in DIRECTIONS:
            adjacent = current.translate(direction)
            if adjacent in parents:
                continue
            if current == start and _next_to_opponent_head(adjacent, opponent_heads):
                continue
            if not game_map.is_tile_free(adjacent):
                continue
            parents[adjacent] = current
            queue.append(adjacent)

    return UNREACHABLE
