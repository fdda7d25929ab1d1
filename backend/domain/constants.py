"""
Game constants for the snakepit engine.
"""

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

# Fixed enumeration order, used for tie-breaking in every search
DIRECTIONS = (UP, DOWN, LEFT, RIGHT)

# (dx, dy) per direction; (0, 0) is the bottom-left corner
DIRECTION_VECTORS = {
    UP: (0, 1),
    DOWN: (0, -1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

# Tile classification
EMPTY = "EMPTY"
FOOD = "FOOD"
OBSTACLE = "OBSTACLE"
SNAKE = "SNAKE"
OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
TILE_TYPES = {EMPTY, FOOD, OBSTACLE, SNAKE, OUT_OF_BOUNDS}

# Decision defaults
MOVE_TIMEOUT_MS = 250
MAX_FOOD_DISTANCE = 20
LOOKAHEAD_DEPTH = 0
MIN_PATH_SAFETY = 0.8
FALLBACK_DIRECTION = DOWN
