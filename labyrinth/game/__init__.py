"""Map authority and turn orchestration."""

from .dungeon import DungeonMap, MapError
from .logic import GameLogic, GameResult, GameStatus, Role

__all__ = [
    # Map
    "DungeonMap",
    "MapError",
    # Turn loop
    "GameLogic",
    "GameResult",
    "GameStatus",
    "Role",
]
