import logging
import os
from typing import Callable, Dict, Optional

from flask import Flask, jsonify, request

from domain.serialization import (
    game_ended_from_payload,
    game_map_from_payload,
    game_starting_from_payload,
    snake_dead_from_payload,
)
from players.base import Player
from players.pathfinding_player import PathfindingPlayer
from settings import EngineSettings, load_settings


logger = logging.getLogger(__name__)

PlayerFactory = Callable[[str], Player]


def create_app(
    settings: Optional[EngineSettings] = None,
    player_factory: Optional[PlayerFactory] = None,
) -> Flask:
    """
    Build the HTTP adapter around the move engine.

    One player is kept per player_id seen in /move requests. Lifecycle
    events are forwarded to every known player.
    """
    settings = settings or load_settings()
    if player_factory is None:
        def player_factory(player_id: str) -> Player:
            return PathfindingPlayer(player_id, settings=settings)

    app = Flask(__name__)
    players: Dict[str, Player] = {}
    app.config["SNAKE_SETTINGS"] = settings
    app.config["SNAKE_PLAYERS"] = players

    def player_for(player_id: str) -> Player:
        if player_id not in players:
            players[player_id] = player_factory(player_id)
        return players[player_id]

    def notify(hook: str, event) -> None:
        for player_id, player in players.items():
            try:
                getattr(player, hook)(event)
            except Exception as error:  # noqa: BLE001
                logger.error(f"Player {player_id} failed handling {hook}: {error}")

    def read_payload():
        payload = request.get_json(silent=True)
        if payload is None:
            raise ValueError("Request body must be JSON")
        return payload

    @app.route("/", methods=["GET"])
    def info():
        return jsonify({
            "apiversion": "1",
            "name": "snakepit",
            "move_timeout_ms": settings.move_timeout_ms,
            "lookahead_depth": settings.lookahead_depth,
        })

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "healthy"})

    @app.route("/start", methods=["POST"])
    def start():
        try:
            event = game_starting_from_payload(read_payload())
        except ValueError as error:
            return jsonify({"error": str(error)}), 400
        notify("on_game_starting", event)
        return jsonify({"status": "ok"})

    @app.route("/move", methods=["POST"])
    def move():
        try:
            game_map = game_map_from_payload(read_payload())
        except ValueError as error:
            logger.warning(f"Rejected move request: {error}")
            return jsonify({"error": str(error)}), 400

        player = player_for(game_map.player_id)
        try:
            direction = player.get_move(game_map)
        except Exception as error:  # noqa: BLE001
            logger.error(f"Move computation failed for {game_map.player_id}: {error}")
            direction = settings.fallback_direction
        return jsonify({"move": direction})

    @app.route("/snake-dead", methods=["POST"])
    def snake_dead():
        try:
            event = snake_dead_from_payload(read_payload())
        except ValueError as error:
            return jsonify({"error": str(error)}), 400
        notify("on_snake_dead", event)
        return jsonify({"status": "ok"})

    @app.route("/end", methods=["POST"])
    def end():
        try:
            event = game_ended_from_payload(read_payload())
        except ValueError as error:
            return jsonify({"error": str(error)}), 400
        notify("on_game_ended", event)
        return jsonify({"status": "ok"})

    return app


if __name__ == "__main__":
    engine_settings = load_settings()
    logging.basicConfig(
        level=engine_settings.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    port = int(os.getenv("PORT", "8080"))
    create_app(engine_settings).run(host="0.0.0.0", port=port)
