"""
Grid geometry: coordinates, direction vectors and the distance metric.
"""

from typing import List, NamedTuple

from .constants import DIRECTIONS, DIRECTION_VECTORS


class Coordinate(NamedTuple):
    """An (x, y) cell on the board."""

    x: int
    y: int

    def translate(self, direction: str) -> "Coordinate":
        dx, dy = DIRECTION_VECTORS[direction]
        return Coordinate(self.x + dx, self.y + dy)

    def manhattan_distance_to(self, other: "Coordinate") -> int:
        return abs(self.x - other[0]) + abs(self.y - other[1])

    def is_out_of_bounds(self, width: int, height: int) -> bool:
        return self.x < 0 or self.x >= width or self.y < 0 or self.y >= height

    def direction_to(self, adjacent: "Coordinate") -> str:
        """
        Return the direction that moves this coordinate onto `adjacent`.

        Raises:
            ValueError: If `adjacent` is not one of the four orthogonal neighbors.
        """
        delta = (adjacent[0] - self.x, adjacent[1] - self.y)
        for direction in DIRECTIONS:
            if DIRECTION_VECTORS[direction] == delta:
                return direction
        raise ValueError(f"{tuple(adjacent)} is not adjacent to {tuple(self)}")

    def neighbors(self) -> List["Coordinate"]:
        """The four orthogonal neighbors, in direction order."""
        return [self.translate(direction) for direction in DIRECTIONS]


def translate(coord: Coordinate, direction: str) -> Coordinate:
    return Coordinate(*coord).translate(direction)


def manhattan_distance(a: Coordinate, b: Coordinate) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def is_out_of_bounds(coord: Coordinate, width: int, height: int) -> bool:
    return Coordinate(*coord).is_out_of_bounds(width, height)


def direction_to(a: Coordinate, b: Coordinate) -> str:
    return Coordinate(*a).direction_to(b)
