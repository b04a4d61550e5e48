"""
Dungeon map storage.

The authoritative map of a game: a rectangular character grid plus its name
and the gold the player needs before the exits open.

Map file format:
    name <map name>
    win <gold required>
    <grid rows, all the same width>
"""

import logging
from pathlib import Path
from typing import Iterator, Optional, Union

import numpy as np

from labyrinth.api.models import Coordinate
from labyrinth.api.tiles import FLOOR_CHAR, GOLD_CHAR, MAP_CHARS, is_walkable_char, is_wall_char

logger = logging.getLogger(__name__)

DEFAULT_MAP_NAME = "Very small Labyrinth of Doom"
DEFAULT_GOLD_REQUIRED = 2
DEFAULT_MAP_ROWS = (
    "####################",
    "#..................#",
    "#......G.........E.#",
    "#..................#",
    "#..E...............#",
    "#...........G......#",
    "#..................#",
    "#..................#",
    "####################",
)


class MapError(Exception):
    """A map file could not be parsed."""


class DungeonMap:
    """
    The full game map.

    Coordinates are (row, col) from the top-left corner. Lookups outside the
    map return None rather than raising.
    """

    def __init__(self, rows: list[str], name: str = DEFAULT_MAP_NAME, gold_required: int = DEFAULT_GOLD_REQUIRED):
        """
        Initialize a map.

        Args:
            rows: Grid rows, all the same length
            name: Display name
            gold_required: Gold needed before an exit ends the game

        Raises:
            MapError: if the grid is empty or not rectangular
        """
        if not rows or not rows[0]:
            raise MapError("Map has no tiles")
        width = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != width:
                raise MapError(f"Map is not rectangular: row {i} has {len(row)} tiles, expected {width}")
        if gold_required < 0:
            raise MapError(f"Gold required cannot be negative: {gold_required}")

        unknown = {char for row in rows for char in row} - MAP_CHARS
        if unknown:
            logger.warning(f"Map {name!r} contains unrecognised tiles {sorted(unknown)}; treating them as floor")

        self.name = name
        self.gold_required = gold_required
        self._grid = np.array([list(row) for row in rows], dtype="<U1")

    @classmethod
    def default(cls) -> "DungeonMap":
        """The built-in map."""
        return cls(list(DEFAULT_MAP_ROWS), DEFAULT_MAP_NAME, DEFAULT_GOLD_REQUIRED)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "DungeonMap":
        """
        Load a map file.

        Args:
            path: Path to the map file

        Returns:
            Loaded map

        Raises:
            MapError: if the headers or grid are malformed
            OSError: if the file cannot be read
        """
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            lines = [line.rstrip("\r\n") for line in f]

        if len(lines) < 2:
            raise MapError(f"{path}: expected 'name' and 'win' header lines")

        name_line, win_line = lines[0], lines[1]
        if not name_line.startswith("name "):
            raise MapError(f"{path}: first line must be 'name <map name>', got {name_line!r}")
        if not win_line.startswith("win "):
            raise MapError(f"{path}: second line must be 'win <gold>', got {win_line!r}")

        name = name_line[len("name "):].strip()
        try:
            gold_required = int(win_line[len("win "):].strip())
        except ValueError:
            raise MapError(f"{path}: gold required is not a number: {win_line!r}") from None

        rows = [line for line in lines[2:] if line]
        logger.info(f"Loaded map {name!r} from {path} ({len(rows)} rows, gold required {gold_required})")
        return cls(rows, name, gold_required)

    @property
    def size(self) -> tuple[int, int]:
        """(height, width)."""
        return (int(self._grid.shape[0]), int(self._grid.shape[1]))

    def in_bounds(self, coord: Coordinate) -> bool:
        height, width = self.size
        return 0 <= coord.row < height and 0 <= coord.col < width

    def char_at(self, coord: Coordinate) -> Optional[str]:
        """Tile character, or None off the map."""
        if not self.in_bounds(coord):
            return None
        return str(self._grid[coord.row, coord.col])

    def is_wall(self, coord: Coordinate) -> bool:
        return is_wall_char(self.char_at(coord))

    def is_walkable(self, coord: Coordinate) -> bool:
        return is_walkable_char(self.char_at(coord))

    def has_gold(self, coord: Coordinate) -> bool:
        return self.char_at(coord) == GOLD_CHAR

    def remove_item(self, coord: Coordinate) -> None:
        """Replace whatever is at a coordinate with floor."""
        if self.in_bounds(coord):
            self._grid[coord.row, coord.col] = FLOOR_CHAR

    def walkable_cells(self) -> Iterator[Coordinate]:
        height, width = self.size
        for row in range(height):
            for col in range(width):
                coord = Coordinate(row, col)
                if self.is_walkable(coord):
                    yield coord

    def copy_grid(self) -> np.ndarray:
        """A copy of the grid that callers may modify freely."""
        return self._grid.copy()

    def rows(self) -> list[str]:
        return ["".join(row) for row in self._grid.tolist()]
