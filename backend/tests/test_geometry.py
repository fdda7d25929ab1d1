"""
Tests for grid geometry primitives.
"""

import os
import sys

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain.constants import UP, DOWN, LEFT, RIGHT, DIRECTIONS
from domain.geometry import (
    Coordinate,
    direction_to,
    is_out_of_bounds,
    manhattan_distance,
    translate,
)


class TestCoordinate:
    """Tests for the Coordinate value type."""

    def test_translate_moves_one_cell(self):
        """translate() follows the (0,0) bottom-left convention."""
        c = Coordinate(2, 2)
        assert c.translate(UP) == (2, 3)
        assert c.translate(DOWN) == (2, 1)
        assert c.translate(LEFT) == (1, 2)
        assert c.translate(RIGHT) == (3, 2)

    def test_translate_returns_new_coordinate(self):
        """Coordinates are immutable values."""
        c = Coordinate(0, 0)
        moved = c.translate(RIGHT)
        assert c == (0, 0)
        assert isinstance(moved, Coordinate)

    def test_manhattan_distance(self):
        """Manhattan distance sums the axis differences."""
        assert Coordinate(0, 0).manhattan_distance_to(Coordinate(3, 4)) == 7
        assert Coordinate(5, 5).manhattan_distance_to(Coordinate(5, 5)) == 0
        assert Coordinate(1, 4).manhattan_distance_to((4, 1)) == 6

    def test_out_of_bounds(self):
        """Cells outside [0, width) x [0, height) are out of bounds."""
        assert Coordinate(-1, 0).is_out_of_bounds(5, 5)
        assert Coordinate(0, 5).is_out_of_bounds(5, 5)
        assert Coordinate(5, 0).is_out_of_bounds(5, 5)
        assert not Coordinate(4, 4).is_out_of_bounds(5, 5)
        assert not Coordinate(0, 0).is_out_of_bounds(5, 5)

    def test_direction_to_neighbors(self):
        """direction_to() names the step between adjacent cells."""
        c = Coordinate(3, 3)
        for direction in DIRECTIONS:
            assert c.direction_to(c.translate(direction)) == direction

    def test_direction_to_non_adjacent_raises(self):
        """direction_to() rejects cells that are not orthogonal neighbors."""
        with pytest.raises(ValueError):
            Coordinate(0, 0).direction_to(Coordinate(1, 1))
        with pytest.raises(ValueError):
            Coordinate(0, 0).direction_to(Coordinate(0, 2))
        with pytest.raises(ValueError):
            Coordinate(0, 0).direction_to(Coordinate(0, 0))

    def test_neighbors_follow_direction_order(self):
        """neighbors() lists cells in the fixed direction order."""
        assert Coordinate(1, 1).neighbors() == [(1, 2), (1, 0), (0, 1), (2, 1)]


class TestModuleFunctions:
    """The function forms accept plain tuples."""

    def test_translate_tuple(self):
        assert translate((0, 0), UP) == Coordinate(0, 1)

    def test_manhattan_distance_tuples(self):
        assert manhattan_distance((1, 1), (4, 5)) == 7

    def test_is_out_of_bounds_tuple(self):
        assert is_out_of_bounds((3, 0), 3, 3)
        assert not is_out_of_bounds((2, 2), 3, 3)

    def test_direction_to_tuple(self):
        assert direction_to((2, 2), (2, 1)) == DOWN
