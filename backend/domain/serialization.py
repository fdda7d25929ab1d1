"""
JSON payload codec for board snapshots and lifecycle events.

Payload shape for a board:

    {
        "game_id": "...", "round": 3, "width": 11, "height": 11,
        "player_id": "0",
        "snakes": [{"id": "0", "body": [[x, y], ...]}, ...],
        "food": [[x, y], ...],
        "obstacles": [[x, y], ...]
    }

Snake bodies are listed head first. Malformed payloads raise ValueError.
"""

from typing import Any, Dict, List, Mapping, Optional

from .events import GameEndedEvent, GameStartingEvent, SnakeDeadEvent
from .game_map import GameMap
from .geometry import Coordinate
from .snake import SnakeState


def _require(payload: Mapping[str, Any], key: str) -> Any:
    if not isinstance(payload, Mapping):
        raise ValueError("Payload must be a JSON object")
    if key not in payload:
        raise ValueError(f"Missing field '{key}'")
    return payload[key]


def _int_field(payload: Mapping[str, Any], key: str, default: Optional[int] = None) -> int:
    value = payload.get(key, default) if default is not None else _require(payload, key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Field '{key}' must be an integer, got {value!r}")
    return value


def _coordinate(value: Any) -> Coordinate:
    if isinstance(value, Mapping):
        value = (value.get("x"), value.get("y"))
    if (
        not isinstance(value, (list, tuple))
        or len(value) != 2
        or not all(isinstance(v, int) and not isinstance(v, bool) for v in value)
    ):
        raise ValueError(f"Invalid coordinate {value!r}")
    return Coordinate(value[0], value[1])


def _coordinates(values: Any, field: str) -> List[Coordinate]:
    if not isinstance(values, list):
        raise ValueError(f"Field '{field}' must be a list")
    return [_coordinate(v) for v in values]


def game_map_from_payload(payload: Mapping[str, Any]) -> GameMap:
    """Decode a board payload into a GameMap."""
    width = _int_field(payload, "width")
    height = _int_field(payload, "height")
    player_id = str(_require(payload, "player_id"))

    raw_snakes = _require(payload, "snakes")
    if not isinstance(raw_snakes, list):
        raise ValueError("Field 'snakes' must be a list")

    snakes = []
    for raw in raw_snakes:
        snake_id = str(_require(raw, "id"))
        body = _coordinates(_require(raw, "body"), f"snakes[{snake_id}].body")
        if not body:
            # Dead snakes are sent with an empty body
            continue
        snakes.append(SnakeState(snake_id, tuple(body)))

    return GameMap(
        width=width,
        height=height,
        snakes=snakes,
        player_id=player_id,
        food=_coordinates(payload.get("food", []), "food"),
        obstacles=_coordinates(payload.get("obstacles", []), "obstacles"),
        round_number=_int_field(payload, "round", default=0),
        game_id=payload.get("game_id"),
    )


def _sorted_cells(cells) -> List[List[int]]:
    return [[c.x, c.y] for c in sorted(cells, key=lambda c: (c.y, c.x))]


def game_map_to_payload(game_map: GameMap) -> Dict[str, Any]:
    """Encode a GameMap; inverse of game_map_from_payload."""
    return {
        "game_id": game_map.game_id,
        "round": game_map.round_number,
        "width": game_map.width,
        "height": game_map.height,
        "player_id": game_map.player_id,
        "snakes": [
            {"id": snake.snake_id, "body": [[c.x, c.y] for c in snake.body]}
            for snake in game_map.snakes.values()
        ],
        "food": _sorted_cells(game_map.food),
        "obstacles": _sorted_cells(game_map.obstacles),
    }


def game_starting_from_payload(payload: Mapping[str, Any]) -> GameStartingEvent:
    return GameStartingEvent(
        game_id=str(_require(payload, "game_id")),
        player_count=_int_field(payload, "player_count"),
        width=_int_field(payload, "width"),
        height=_int_field(payload, "height"),
    )


def snake_dead_from_payload(payload: Mapping[str, Any]) -> SnakeDeadEvent:
    game_id = str(_require(payload, "game_id"))
    position = payload.get("position")
    return SnakeDeadEvent(
        game_id=game_id,
        snake_id=str(_require(payload, "snake_id")),
        death_reason=str(_require(payload, "death_reason")),
        position=_coordinate(position) if position is not None else None,
        round_number=_int_field(payload, "round", default=0),
    )


def game_ended_from_payload(payload: Mapping[str, Any]) -> GameEndedEvent:
    game_id = str(_require(payload, "game_id"))
    winner = payload.get("winner_id")
    return GameEndedEvent(
        game_id=game_id,
        winner_id=str(winner) if winner is not None else None,
        round_number=_int_field(payload, "round", default=0),
    )
