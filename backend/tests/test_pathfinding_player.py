"""
Tests for the pathfinding decision policy.
"""

import logging
import os
import random
import sys
from unittest.mock import Mock, patch

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain.constants import UP, DOWN, LEFT, RIGHT, DIRECTIONS
from domain.events import GameEndedEvent, GameStartingEvent, SnakeDeadEvent
from domain.game_map import GameMap
from domain.geometry import Coordinate
from domain.snake import SnakeState
from players.pathfinding_player import PathfindingPlayer
from settings import EngineSettings
from strategy.selectors import paths_to_nearest_food, trap_destinations


def make_map(width, height, snakes, food=(), obstacles=(), player_id="me"):
    return GameMap(
        width=width,
        height=height,
        snakes=[SnakeState.from_positions(sid, body) for sid, body in snakes.items()],
        player_id=player_id,
        food=food,
        obstacles=obstacles,
    )


class TestDecisionPolicy:
    """Tests for PathfindingPlayer.decide() and get_move()."""

    def test_moves_towards_close_food(self):
        """Straight-line food three tiles away is approached directly."""
        game_map = make_map(5, 5, {"me": [(0, 2)]}, food=[(3, 2)])
        player = PathfindingPlayer("me")

        assert player.get_move(game_map) == RIGHT
        assert player.last_decision == "food"

    def test_boxed_in_returns_fallback(self):
        """With every neighbor blocked the fixed fallback is returned."""
        walls = [(2, 3), (2, 1), (1, 2), (3, 2)]
        game_map = make_map(5, 5, {"me": [(2, 2)]}, food=[(0, 0)], obstacles=walls)

        assert PathfindingPlayer("me").get_move(game_map) == DOWN

        player = PathfindingPlayer("me", settings=EngineSettings(fallback_direction=LEFT))
        assert player.get_move(game_map) == LEFT
        assert player.last_decision == "no_legal_move"

    def test_heads_for_enemy_when_no_food(self):
        """Without food the player advances towards a tile next to the enemy head."""
        game_map = make_map(9, 5, {"me": [(0, 2)], "other": [(4, 2), (5, 2)]})
        player = PathfindingPlayer("me")

        move = player.get_move(game_map)
        new_head = Coordinate(0, 2).translate(move)

        assert player.last_decision == "trap"
        assert game_map.is_tile_free(new_head)
        assert any(
            new_head.manhattan_distance_to(t) == Coordinate(0, 2).manhattan_distance_to(t) - 1
            for t in trap_destinations(game_map)
        )

    def test_distant_food_loses_to_trap(self):
        """Food at or beyond the distance limit is skipped in favour of a trap."""
        game_map = make_map(
            26, 10,
            {"me": [(0, 0)], "other": [(0, 7), (0, 8)]},
            food=[(25, 0)],
        )
        food_paths = paths_to_nearest_food(game_map)
        assert food_paths[0].cost == 25

        player = PathfindingPlayer("me")
        assert player.get_move(game_map) == UP
        assert player.last_decision == "trap"

    def test_raising_food_limit_takes_distant_food(self):
        game_map = make_map(
            26, 10,
            {"me": [(0, 0)], "other": [(0, 7), (0, 8)]},
            food=[(25, 0)],
        )
        player = PathfindingPlayer("me", settings=EngineSettings(max_food_distance=30))
        assert player.get_move(game_map) == RIGHT
        assert player.last_decision == "food"

    def test_random_move_when_no_target(self):
        """With no food and no enemy a legal move is drawn from the rng."""
        game_map = make_map(3, 3, {"me": [(1, 1)]})
        rng = Mock()
        rng.choice.side_effect = lambda moves: moves[-1]
        player = PathfindingPlayer("me", rng=rng)

        assert player.get_move(game_map) == RIGHT
        assert player.last_decision == "random"
        rng.choice.assert_called_once_with([UP, DOWN, LEFT, RIGHT])

    def test_random_move_is_reproducible_with_seed(self):
        game_map = make_map(7, 7, {"me": [(3, 3), (3, 2), (3, 1)]})
        first = PathfindingPlayer("me", rng=random.Random(42))
        second = PathfindingPlayer("me", rng=random.Random(42))

        moves_a = [first.get_move(game_map) for _ in range(10)]
        moves_b = [second.get_move(game_map) for _ in range(10)]
        assert moves_a == moves_b
        assert set(moves_a) <= {UP, LEFT, RIGHT}

    def test_decision_is_always_legal_or_fallback(self):
        """Whatever branch is taken, the move does not hit a wall or body."""
        game_map = make_map(
            8, 8,
            {"me": [(3, 3), (3, 2), (3, 1)], "other": [(6, 6), (6, 5), (5, 5)]},
            food=[(0, 7), (7, 0)],
            obstacles=[(2, 3), (4, 4)],
        )
        move = PathfindingPlayer("me", rng=random.Random(1)).get_move(game_map)
        assert move in game_map.legal_directions()

    def test_decides_for_own_snake(self):
        """A map built for another snake is re-evaluated from our viewpoint."""
        game_map = make_map(
            5, 5, {"me": [(0, 2)], "other": [(4, 4)]}, food=[(3, 2)], player_id="other"
        )
        assert PathfindingPlayer("me").get_move(game_map) == RIGHT

    def test_disabled_lookahead_takes_first_path(self):
        """A negative depth skips the survival check."""
        game_map = make_map(5, 5, {"me": [(0, 2)]}, food=[(3, 2)])
        player = PathfindingPlayer("me", settings=EngineSettings(lookahead_depth=-1))

        with patch("players.pathfinding_player.path_survives") as survives:
            assert player.get_move(game_map) == RIGHT
        survives.assert_not_called()

    def test_eats_food_one_step_away(self):
        """Adjacent food is taken even though no target is left after eating it."""
        game_map = make_map(5, 5, {"me": [(2, 2)]}, food=[(3, 2)])
        player = PathfindingPlayer("me")

        assert player.get_move(game_map) == RIGHT
        assert player.last_decision == "food"

    def test_no_surviving_path_falls_back_to_best_ranked(self):
        """When the lookahead rejects every path the top-ranked one is still followed."""
        game_map = make_map(5, 5, {"me": [(0, 2)]}, food=[(3, 2)])
        player = PathfindingPlayer("me")

        with patch("players.pathfinding_player.path_survives", return_value=False) as survives:
            assert player.get_move(game_map) == RIGHT
        assert player.last_decision == "food"
        survives.assert_called_once()

    def test_surviving_path_preferred_over_best_ranked(self):
        """The first path that survives wins over better-ranked ones that do not."""
        game_map = make_map(7, 7, {"me": [(3, 3)]}, food=[(0, 3), (6, 3)])
        paths = paths_to_nearest_food(game_map)
        assert [p.destination for p in paths] == [(0, 3), (6, 3)]
        player = PathfindingPlayer("me")

        with patch(
            "players.pathfinding_player.path_survives",
            side_effect=lambda gm, path, depth, min_safety: path.destination == (6, 3),
        ):
            assert player.get_move(game_map) == RIGHT
        assert player.last_decision == "food"

    def test_slow_decision_is_logged(self, caplog):
        """Going over the move budget produces a warning."""
        game_map = make_map(5, 5, {"me": [(0, 2)]}, food=[(3, 2)])
        player = PathfindingPlayer("me", settings=EngineSettings(move_timeout_ms=100))

        with patch("players.pathfinding_player.time") as clock:
            clock.perf_counter.side_effect = [0.0, 0.5]
            with caplog.at_level(logging.WARNING, logger="players.pathfinding_player"):
                player.get_move(game_map)

        assert "took 500.0ms" in caplog.text


class TestLifecycle:
    """Tests for the game lifecycle hooks."""

    def test_game_starting_resets_counters(self):
        game_map = make_map(5, 5, {"me": [(0, 2)]}, food=[(3, 2)])
        player = PathfindingPlayer("me")
        player.get_move(game_map)
        assert player.turns_played == 1

        player.on_game_starting(GameStartingEvent("g1", player_count=4, width=5, height=5))
        assert player.game_id == "g1"
        assert player.turns_played == 0
        assert player.opponents_remaining == 3

    def test_snake_dead_tracks_opponents(self):
        player = PathfindingPlayer("me")
        player.on_game_starting(GameStartingEvent("g1", player_count=3, width=5, height=5))

        player.on_snake_dead(SnakeDeadEvent("g1", "other", "wall", Coordinate(0, 0), 4))
        assert player.opponents_remaining == 1
        player.on_snake_dead(SnakeDeadEvent("g1", "me", "body_collision", None, 5))
        assert player.opponents_remaining == 1

    def test_game_ended_is_logged(self, caplog):
        player = PathfindingPlayer("me")
        with caplog.at_level(logging.INFO, logger="players.pathfinding_player"):
            player.on_game_ended(GameEndedEvent("g1", "me", 42))
        assert "won" in caplog.text

    @pytest.mark.parametrize("direction", DIRECTIONS)
    def test_fallback_direction_setting(self, direction):
        walls = [(2, 3), (2, 1), (1, 2), (3, 2)]
        game_map = make_map(5, 5, {"me": [(2, 2)]}, obstacles=walls)
        player = PathfindingPlayer("me", settings=EngineSettings(fallback_direction=direction))
        assert player.get_move(game_map) == direction
