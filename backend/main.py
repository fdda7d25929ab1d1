import argparse
import json
import logging
import os
import random
import time
import uuid
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Tuple

from domain.constants import DIRECTIONS, DIRECTION_VECTORS, VALID_MOVES
from domain.events import GameEndedEvent, GameStartingEvent, SnakeDeadEvent
from domain.game_map import GameMap
from domain.geometry import Coordinate
from domain.serialization import game_map_to_payload
from domain.snake import Snake
from players.base import Player
from players.pathfinding_player import PathfindingPlayer
from players.variant_registry import AVAILABLE_VARIANTS, DEFAULT_VARIANT, get_player_class
from settings import EngineSettings, load_settings


logger = logging.getLogger(__name__)


class SnakeGame:
    """
    Local game used to pit players against each other.

    Manages:
      - Board (width, height, obstacles)
      - Snakes and their players
      - Multiple apples
      - Scores
      - Rounds
      - History for replay
    """

    def __init__(
        self,
        width: int,
        height: int,
        max_rounds: int = 150,
        num_apples: int = 5,
        num_obstacles: int = 0,
        game_id: Optional[str] = None,
        move_timeout: Optional[float] = None,
        round_delay: float = 0.0,
        rng: Optional[random.Random] = None,
    ):
        self.width = width
        self.height = height
        self.snakes: Dict[str, Snake] = {}
        self.players: Dict[str, Player] = {}
        self.scores: Dict[str, int] = {}
        self.round_number = 0
        self.max_rounds = max_rounds
        self.game_over = False
        self.started = False
        self.start_time = time.time()
        self.game_result: Optional[Dict[str, str]] = None
        self.move_timeout = move_timeout
        self.round_delay = round_delay
        self.rng = rng or random.Random()
        self.game_id = game_id or str(uuid.uuid4())
        logger.info(f"Game ID: {self.game_id}")

        # Store how many apples we want to keep on the board at all times
        self.num_apples = num_apples
        self.obstacles: Set[Coordinate] = set()
        self.apples: List[Coordinate] = []

        # One dict per round mapping snake_id -> move, and the board before each round
        self.move_history: List[Dict[str, str]] = []
        self.history: List[GameMap] = []

        # Worker pool shared by every round, and calls that outlived their round
        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending_moves: Dict[str, Future] = {}

        for _ in range(num_obstacles):
            self.obstacles.add(self._random_free_cell())
        for _ in range(self.num_apples):
            self.apples.append(self._random_free_cell())

    def add_snake(self, snake_id: str, player: Player, positions: Optional[List[Tuple[int, int]]] = None):
        if snake_id in self.snakes:
            raise ValueError(f"Snake with id {snake_id} already exists.")

        if positions is None:
            positions = [self._random_free_cell()]

        self.snakes[snake_id] = Snake(positions)
        self.players[snake_id] = player
        self.scores[snake_id] = 0

        player_name = getattr(player, 'name', None) or player.__class__.__name__
        logger.info(f"Added snake '{snake_id}' ({player_name}) at {positions}.")

    def set_apples(self, apple_positions: List[Tuple[int, int]]):
        """
        Replace the apples on the board with the given positions.
        """
        for (ax, ay) in apple_positions:
            if not (0 <= ax < self.width and 0 <= ay < self.height):
                raise ValueError(f"Apple out of bounds at {(ax, ay)}.")
        self.apples = [Coordinate(*a) for a in apple_positions]

    def set_obstacles(self, obstacle_positions: List[Tuple[int, int]]):
        for (ox, oy) in obstacle_positions:
            if not (0 <= ox < self.width and 0 <= oy < self.height):
                raise ValueError(f"Obstacle out of bounds at {(ox, oy)}.")
        self.obstacles = {Coordinate(*o) for o in obstacle_positions}

    def _random_free_cell(self) -> Coordinate:
        """
        Return a random cell not occupied by any snake, apple or obstacle.
        """
        occupied = set(self.apples) | self.obstacles
        for snake in self.snakes.values():
            occupied.update(snake.positions)
        free = [
            Coordinate(x, y)
            for x in range(self.width)
            for y in range(self.height)
            if (x, y) not in occupied
        ]
        if not free:
            raise ValueError("No free cell left on the board.")
        return self.rng.choice(free)

    def get_current_state(self, player_id: Optional[str] = None) -> GameMap:
        """
        Return a snapshot of the current board. Dead snakes are left out.
        """
        alive_snakes = [
            snake.snapshot(sid) for sid, snake in self.snakes.items() if snake.alive
        ]
        if player_id is None:
            player_id = next(iter(self.snakes), "")

        return GameMap(
            width=self.width,
            height=self.height,
            snakes=alive_snakes,
            player_id=player_id,
            food=self.apples,
            obstacles=self.obstacles,
            round_number=self.round_number,
            game_id=self.game_id,
        )

    # ------------------------------------------------------------------
    # Lifecycle events
    # ------------------------------------------------------------------

    def _notify(self, hook: str, event) -> None:
        for sid, player in self.players.items():
            try:
                getattr(player, hook)(event)
            except Exception as e:  # noqa: BLE001
                logger.warning(f"Player {sid} failed handling {hook}: {e}")

    def start(self):
        if self.started:
            return
        self.started = True
        self._notify("on_game_starting", GameStartingEvent(
            game_id=self.game_id,
            player_count=len(self.snakes),
            width=self.width,
            height=self.height,
        ))

    # ------------------------------------------------------------------
    # Rounds
    # ------------------------------------------------------------------

    def _fallback_move(self, state: GameMap, snake_id: str) -> str:
        legal = state.legal_directions(snake_id)
        return self.rng.choice(legal or list(DIRECTIONS))

    def gather_moves_in_parallel(self) -> Dict[str, str]:
        """
        Ask every alive snake for its move in parallel threads.

        All players read the same snapshot. Players that raise, time out or
        answer with an invalid direction get a random legal move instead.
        The worker pool lives for the whole game and each player has at most
        one call in flight: a player still busy with an earlier round is not
        asked again until that call returns.
        """
        round_moves: Dict[str, str] = {}
        state_snapshot = self.get_current_state()

        alive_snakes = [sid for sid, s in self.snakes.items() if s.alive]
        if not alive_snakes:
            return round_moves

        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=len(self.snakes),
                thread_name_prefix=f"snake-{self.game_id[:8]}",
            )

        futures: Dict[Future, str] = {}
        for snake_id in alive_snakes:
            previous = self._pending_moves.pop(snake_id, None)
            if previous is not None and not previous.done():
                logger.warning(f"Player {snake_id} is still busy with an earlier move. Choosing a random move.")
                self._pending_moves[snake_id] = previous
                round_moves[snake_id] = self._fallback_move(state_snapshot, snake_id)
                continue
            future = self._executor.submit(self.players[snake_id].get_move, state_snapshot.for_player(snake_id))
            futures[future] = snake_id

        done, _ = wait(futures, timeout=self.move_timeout)

        for future, snake_id in futures.items():
            if future not in done:
                logger.warning(f"Player {snake_id} timed out. Choosing a random move.")
                self._pending_moves[snake_id] = future
                move = self._fallback_move(state_snapshot, snake_id)
            elif future.exception() is not None:
                logger.warning(f"Player {snake_id} failed: {future.exception()}. Choosing a random move.")
                move = self._fallback_move(state_snapshot, snake_id)
            else:
                move = future.result()
                if move not in VALID_MOVES:
                    logger.warning(f"Player {snake_id} returned invalid direction {move!r}. Choosing a random move.")
                    move = self._fallback_move(state_snapshot, snake_id)
            round_moves[snake_id] = move
            logger.debug(f"Player {snake_id} chose move: {move}")

        return round_moves

    def _shutdown_executor(self):
        if self._executor is not None:
            # Calls that never returned are left running; they cannot be interrupted.
            self._executor.shutdown(wait=False)
            self._executor = None
        self._pending_moves.clear()

    def run_round(self):
        """
        Execute one round:
          1) If game is over, do nothing
          2) Ask each alive snake for their move
          3) Apply moves simultaneously
          4) Handle apple-eating (grow + score)
          5) Check collisions
          6) Possibly end game if round limit reached or 1 snake left, etc.
        """
        if self.game_over:
            logger.info("Game is already over. No more rounds.")
            return

        self.start()
        logger.debug("\n" + self.get_current_state().print_board())

        round_moves = self.gather_moves_in_parallel()
        self.record_history()
        self.move_history.append(round_moves)

        # Intended new head for every snake
        new_heads: Dict[str, Coordinate] = {}
        for sid, move in round_moves.items():
            dx, dy = DIRECTION_VECTORS[move]
            hx, hy = self.snakes[sid].head
            new_heads[sid] = Coordinate(hx + dx, hy + dy)

        # Proposed board after every snake moves
        eats_apple: Dict[str, bool] = {}
        proposed_bodies: Dict[str, List[Coordinate]] = {}
        for sid, snake in self.snakes.items():
            head = new_heads.get(sid)
            if not snake.alive or head is None:
                proposed_bodies[sid] = list(snake.positions)
                eats_apple[sid] = False
                continue

            eats_apple[sid] = head in self.apples
            original_body = list(snake.positions)
            if eats_apple[sid]:
                # grow: keep the tail
                proposed_bodies[sid] = [head] + original_body
            else:
                proposed_bodies[sid] = [head] + original_body[:-1]

        # a) wall and obstacle collisions
        for sid, head in new_heads.items():
            snake = self.snakes[sid]
            if head.is_out_of_bounds(self.width, self.height):
                self._kill(snake, "wall")
            elif head in self.obstacles:
                self._kill(snake, "obstacle")

        # b) head-to-head collisions
        head_counts: Dict[Coordinate, List[str]] = {}
        for sid, head in new_heads.items():
            if self.snakes[sid].alive:
                head_counts.setdefault(head, []).append(sid)
        for same_cell_snakes in head_counts.values():
            if len(same_cell_snakes) > 1:
                for sid in same_cell_snakes:
                    self._kill(self.snakes[sid], "head_collision")

        # c) head-into-body collisions
        body_cells: Set[Coordinate] = set()
        for sid, body in proposed_bodies.items():
            if self.snakes[sid].alive:
                body_cells.update(body[1:])
        for sid, head in new_heads.items():
            snake = self.snakes[sid]
            if snake.alive and head in body_cells:
                self._kill(snake, "body_collision")

        # Commit the moves & handle apples for the survivors
        for sid, snake in self.snakes.items():
            if not snake.alive or sid not in new_heads:
                continue
            snake.positions = deque(proposed_bodies[sid])
            if eats_apple[sid]:
                self.scores[sid] += 1
                self.apples.remove(new_heads[sid])

        # keep apple count constant while there is room
        while len(self.apples) < self.num_apples:
            try:
                self.apples.append(self._random_free_cell())
            except ValueError:
                break

        for sid, snake in self.snakes.items():
            if not snake.alive and snake.death_round == self.round_number:
                self._notify("on_snake_dead", SnakeDeadEvent(
                    game_id=self.game_id,
                    snake_id=sid,
                    death_reason=snake.death_reason,
                    position=new_heads.get(sid),
                    round_number=self.round_number,
                ))

        # End-of-round bookkeeping (round limit / last snake)
        self.round_number += 1
        alive_snakes = [sid for sid, s in self.snakes.items() if s.alive]

        if len(alive_snakes) < len(self.snakes) and len(alive_snakes) <= 1:
            self.end_game("All but one snake are dead.")
        elif self.round_number >= self.max_rounds:
            self.end_game("Reached max rounds.")

        logger.info(f"Finished round {self.round_number}. Alive: {alive_snakes}, Scores: {self.scores}")

        if self.round_delay:
            time.sleep(self.round_delay)

    def _kill(self, snake: Snake, reason: str):
        if not snake.alive:
            return
        snake.alive = False
        snake.death_reason = reason
        snake.death_round = self.round_number

    def end_game(self, reason: str):
        self.game_over = True
        self._shutdown_executor()
        logger.info(f"Game Over: {reason}")

        survivors = [sid for sid, s in self.snakes.items() if s.alive]
        self.game_result = {}
        if len(survivors) == 1 and len(self.snakes) > 1:
            winners = survivors
        else:
            # Decide winner by highest score
            top_score = max(self.scores.values()) if self.scores else 0
            winners = [sid for sid, sc in self.scores.items() if sc == top_score]

        for sid in self.scores:
            if sid in winners:
                self.game_result[sid] = "tied" if len(winners) > 1 else "won"
            else:
                self.game_result[sid] = "lost"

        winner_id = winners[0] if len(winners) == 1 else None
        if winner_id is not None:
            logger.info(f"The winner is {winner_id} with score {self.scores[winner_id]}.")
        else:
            logger.info(f"Tie! Winners: {winners}.")

        self._notify("on_game_ended", GameEndedEvent(
            game_id=self.game_id,
            winner_id=winner_id,
            round_number=self.round_number,
        ))

    def record_history(self):
        self.history.append(self.get_current_state())

    # ------------------------------------------------------------------
    # Replay
    # ------------------------------------------------------------------

    def serialize_history(self) -> List[Dict]:
        """
        Convert the recorded boards and moves to a JSON-serializable list of dicts.
        """
        output = []
        for state, moves in zip(self.history, self.move_history):
            state_dict = game_map_to_payload(state)
            del state_dict["player_id"]
            state_dict["moves"] = moves
            output.append(state_dict)
        return output

    def save_history_to_json(self, directory: str = "completed_games", filename: Optional[str] = None) -> str:
        if filename is None:
            filename = f"snake_game_{self.game_id}.json"

        metadata = {
            "game_id": self.game_id,
            "start_time": datetime.fromtimestamp(self.start_time, tz=timezone.utc).isoformat(),
            "end_time": datetime.now(tz=timezone.utc).isoformat(),
            "players": {sid: player.__class__.__name__ for sid, player in self.players.items()},
            "game_result": self.game_result,
            "final_scores": self.scores,
            "death_info": {
                sid: {"reason": snake.death_reason, "round": snake.death_round}
                for sid, snake in self.snakes.items()
                if not snake.alive
            },
            "max_rounds": self.max_rounds,
            "actual_rounds": self.round_number,
        }

        data = {
            "metadata": metadata,
            "rounds": self.serialize_history(),
        }

        os.makedirs(directory, exist_ok=True)
        path = os.path.join(directory, filename)
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        logger.info(f"Saved replay to {path}")
        return path


# -------------------------------
# Simulation Function
# -------------------------------

def build_player(variant_key: str, snake_id: str, settings: EngineSettings, rng: random.Random) -> Player:
    player_cls = get_player_class(variant_key)
    if issubclass(player_cls, PathfindingPlayer):
        return player_cls(snake_id, settings=settings, rng=rng)
    return player_cls(snake_id, rng=rng)


def run_simulation(
    player_keys: List[str],
    game_params: argparse.Namespace,
    settings: Optional[EngineSettings] = None,
) -> Dict:
    """
    Runs a single local game between the given player variants.

    Args:
        player_keys: Variant keys, one per snake (e.g. ['pathfinder', 'random']).
        game_params: An object (like argparse.Namespace) containing game settings
                     (width, height, max_rounds, num_apples, optional num_obstacles,
                     seed, save_replay).
        settings: Engine settings for pathfinding players.

    Returns:
        A dictionary summarizing the game results (game_id, final_scores, game_result).
    """
    if len(player_keys) < 1:
        raise ValueError("At least one player is required.")
    settings = settings or EngineSettings()

    seed = getattr(game_params, 'seed', None)
    rng = random.Random(seed)

    game = SnakeGame(
        width=game_params.width,
        height=game_params.height,
        max_rounds=game_params.max_rounds,
        num_apples=game_params.num_apples,
        num_obstacles=getattr(game_params, 'num_obstacles', 0),
        game_id=getattr(game_params, 'game_id', None),
        move_timeout=settings.move_timeout_seconds,
        rng=rng,
    )

    for i, key in enumerate(player_keys):
        player_rng = random.Random(None if seed is None else seed + i + 1)
        game.add_snake(snake_id=str(i), player=build_player(key, str(i), settings, player_rng))

    while not game.game_over:
        game.run_round()

    if getattr(game_params, 'save_replay', False):
        game.save_history_to_json()

    return {
        "game_id": game.game_id,
        "final_scores": game.scores,
        "game_result": game.game_result,
        "rounds": game.round_number,
        "death_info": {
            sid: {"reason": snake.death_reason, "round": snake.death_round}
            for sid, snake in game.snakes.items()
            if not snake.alive
        },
    }


# -------------------------------
# Example Usage (Main Entry Point)
# -------------------------------
def main():
    parser = argparse.ArgumentParser(
        description="Run a local Snake game between player variants."
    )
    parser.add_argument("--players", type=str, nargs='+', default=[DEFAULT_VARIANT, "random"],
                        choices=AVAILABLE_VARIANTS,
                        help="Player variant for each snake (e.g. 'pathfinder random')")
    parser.add_argument("--width", type=int, required=False, default=10,
                        help="Width of the board from 0 to N")
    parser.add_argument("--height", type=int, required=False, default=10,
                        help="Height of the board from 0 to N")
    parser.add_argument("--max_rounds", type=int, required=False, default=100,
                        help="Maximum number of rounds")
    parser.add_argument("--num_apples", type=int, required=False, default=5,
                        help="Number of apples on the board")
    parser.add_argument("--num_obstacles", type=int, required=False, default=0,
                        help="Number of obstacle tiles on the board")
    parser.add_argument("--seed", type=int, required=False, default=None,
                        help="Random seed for a reproducible game")
    parser.add_argument("--save_replay", action="store_true",
                        help="Write the game history to completed_games/")

    args = parser.parse_args()

    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    result = run_simulation(args.players, args, settings)

    print("\nSimulation Result Summary:")
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
