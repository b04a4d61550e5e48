"""
Local views: fixed-size windows of the map handed to participants on LOOK.

A LocalView is a read-only snapshot. It is built from a copy of the caller's
data so that nothing a participant does with its view can reach back into
the map it was cut from.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

import numpy as np

from .models import Coordinate
from .tiles import TileType, classify_char

DEFAULT_WINDOW_SIZE = 5


@dataclass(frozen=True, eq=False)
class LocalView:
    """An immutable square window of tile characters."""

    chars: np.ndarray

    def __post_init__(self):
        chars = np.array(self.chars, dtype="<U1", copy=True)
        if chars.ndim != 2 or chars.shape[0] != chars.shape[1]:
            raise ValueError(f"View must be square, got shape {chars.shape}")
        if chars.shape[0] % 2 == 0 or chars.shape[0] == 0:
            raise ValueError(f"View size must be odd so it has a centre, got {chars.shape[0]}")
        chars.setflags(write=False)
        object.__setattr__(self, "chars", chars)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[str]]) -> "LocalView":
        """
        Build a view from rows of characters.

        Accepts either strings ("..#..") or lists of single characters.

        Raises:
            ValueError: if the rows are ragged, not square or even-sized
        """
        grid = [list(row) for row in rows]
        if not grid:
            raise ValueError("View needs at least one row")
        width = len(grid[0])
        if any(len(row) != width for row in grid):
            raise ValueError("View rows must all have the same length")
        return cls(np.array(grid, dtype="<U1"))

    @property
    def size(self) -> int:
        return int(self.chars.shape[0])

    @property
    def center(self) -> Coordinate:
        """The cell the view was centred on."""
        mid = self.size // 2
        return Coordinate(mid, mid)

    def contains(self, coord: Coordinate) -> bool:
        return 0 <= coord.row < self.size and 0 <= coord.col < self.size

    def char_at(self, coord: Coordinate) -> Optional[str]:
        """Character at a coordinate, or None outside the window."""
        if not self.contains(coord):
            return None
        return str(self.chars[coord.row, coord.col])

    def tile_at(self, coord: Coordinate) -> TileType:
        """Classification at a coordinate; UNKNOWN outside the window."""
        return classify_char(self.char_at(coord))

    def cells(self) -> Iterator[tuple[Coordinate, TileType]]:
        """All cells in row-major order with their classification."""
        for row in range(self.size):
            for col in range(self.size):
                coord = Coordinate(row, col)
                yield coord, self.tile_at(coord)

    def find(self, tile_type: TileType) -> Optional[Coordinate]:
        """First cell (row-major) with the given classification."""
        for coord, tile in self.cells():
            if tile == tile_type:
                return coord
        return None

    def find_all(self, tile_type: TileType) -> list[Coordinate]:
        return [coord for coord, tile in self.cells() if tile == tile_type]

    def rows(self) -> list[str]:
        return ["".join(row) for row in self.chars.tolist()]

    def render(self) -> str:
        """Plain text rendering, one line per row."""
        return "\n".join(self.rows())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocalView):
            return NotImplemented
        return bool(np.array_equal(self.chars, other.chars))

    def __hash__(self) -> int:
        return hash(tuple(self.rows()))

    def __repr__(self) -> str:
        return f"LocalView({self.rows()!r})"
