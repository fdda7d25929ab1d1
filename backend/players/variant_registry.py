"""
Registry for player variants.

Maps variant keys (e.g., 'pathfinder', 'random') to player classes.
To add a variant, create a module with its Player subclass, add a loader
here and an entry to PLAYER_VARIANT_LOADERS.
"""

from typing import Callable, Dict, List, Optional, Type

from .base import Player


# Lazy imports so a broken variant does not break the registry
def _get_pathfinding_player() -> Type[Player]:
    from .pathfinding_player import PathfindingPlayer
    return PathfindingPlayer


def _get_random_player() -> Type[Player]:
    from .random_player import RandomPlayer
    return RandomPlayer


DEFAULT_VARIANT = "pathfinder"

# Registry: maps variant key -> callable that returns the player class
PLAYER_VARIANT_LOADERS: Dict[str, Callable[[], Type[Player]]] = {
    "pathfinder": _get_pathfinding_player,
    "random": _get_random_player,
}

# Canonical list of available variant keys
AVAILABLE_VARIANTS = list(PLAYER_VARIANT_LOADERS.keys())


def get_player_class(variant_key: Optional[str] = None) -> Type[Player]:
    """
    Get the player class for a given variant key.

    Args:
        variant_key: One of AVAILABLE_VARIANTS. If None or empty, returns the default.

    Returns:
        The player class (subclass of Player).

    Raises:
        ValueError: If variant_key is not recognized.
    """
    if not variant_key or variant_key.strip() == "":
        variant_key = DEFAULT_VARIANT

    variant_key = variant_key.strip().lower()

    if variant_key not in PLAYER_VARIANT_LOADERS:
        available = ", ".join(AVAILABLE_VARIANTS)
        raise ValueError(
            f"Unknown player variant '{variant_key}'. Available variants: {available}"
        )

    return PLAYER_VARIANT_LOADERS[variant_key]()


def list_variants() -> List[Dict[str, str]]:
    """
    Return metadata about all available player variants.

    Returns:
        List of dicts with 'key' and 'description' for each variant.
    """
    return [
        {"key": "pathfinder", "description": "BFS towards safe food, traps enemies when no food is close"},
        {"key": "random", "description": "Random legal move every tick"},
    ]
