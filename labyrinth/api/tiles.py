"""
Tile characters and their classification.

Maps use single characters per cell. Participants reason about a coarser
classification: gold and exits are just walkable floor to the bot.
"""

from enum import Enum
from typing import Optional


class TileType(Enum):
    """Classification of a single window cell."""

    EMPTY = "empty"
    WALL = "wall"
    PLAYER = "player"
    BOT = "bot"
    UNKNOWN = "unknown"  # Never stored, only returned for out-of-window lookups


FLOOR_CHAR = "."
WALL_CHAR = "#"
GOLD_CHAR = "G"
EXIT_CHAR = "E"
PLAYER_CHAR = "P"
BOT_CHAR = "B"
UNKNOWN_CHAR = "?"

MAP_CHARS = frozenset({FLOOR_CHAR, WALL_CHAR, GOLD_CHAR, EXIT_CHAR})
VIEW_CHARS = MAP_CHARS | {PLAYER_CHAR, BOT_CHAR}

_CHAR_TYPES = {
    FLOOR_CHAR: TileType.EMPTY,
    GOLD_CHAR: TileType.EMPTY,
    EXIT_CHAR: TileType.EMPTY,
    WALL_CHAR: TileType.WALL,
    PLAYER_CHAR: TileType.PLAYER,
    BOT_CHAR: TileType.BOT,
}


def classify_char(char: Optional[str]) -> TileType:
    """
    Classify a tile character.

    None (no character, i.e. outside the known area) is UNKNOWN. Characters
    that are not part of the map alphabet are treated as floor, the same way
    the game treats any non-wall cell as passable.
    """
    if char is None:
        return TileType.UNKNOWN
    return _CHAR_TYPES.get(char, TileType.EMPTY)


def is_wall_char(char: Optional[str]) -> bool:
    return char == WALL_CHAR


def is_walkable_char(char: Optional[str]) -> bool:
    """Whether a known map character can be stepped on."""
    return char is not None and char != WALL_CHAR
