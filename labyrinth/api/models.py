"""
Data models for the Labyrinth game.

These dataclasses represent headings, window coordinates and the
action/outcome vocabulary exchanged between the game and its participants.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Direction(Enum):
    """Cardinal movement directions."""

    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"

    @property
    def delta(self) -> tuple[int, int]:
        """Get (drow, dcol) for this direction."""
        return _DELTAS[self]

    @property
    def opposite(self) -> "Direction":
        """The direction pointing the other way."""
        return _OPPOSITES[self]

    @classmethod
    def from_delta(cls, drow: int, dcol: int) -> "Direction":
        """Convert a single orthogonal step back to a direction."""
        for direction, delta in _DELTAS.items():
            if delta == (drow, dcol):
                return direction
        raise ValueError(f"({drow}, {dcol}) is not a single orthogonal step")

    @classmethod
    def from_char(cls, char: str) -> "Direction":
        """Parse 'N', 'S', 'E' or 'W' (case-insensitive)."""
        try:
            return cls(char.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown direction: {char!r}") from None


_DELTAS = {
    Direction.NORTH: (-1, 0),
    Direction.SOUTH: (1, 0),
    Direction.EAST: (0, 1),
    Direction.WEST: (0, -1),
}

_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}

# Iteration order used by sampling and graph construction
CARDINAL_DIRECTIONS = (Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST)


@dataclass(frozen=True, order=True)
class Coordinate:
    """A (row, col) position, either in a local window or on the full map."""

    row: int
    col: int

    def step(self, direction: Direction) -> "Coordinate":
        """The adjacent coordinate one step along a direction."""
        drow, dcol = direction.delta
        return Coordinate(self.row + drow, self.col + dcol)

    def offset_to(self, other: "Coordinate") -> tuple[int, int]:
        """(drow, dcol) from this coordinate to another."""
        return (other.row - self.row, other.col - self.col)

    def neighbors(self) -> list["Coordinate"]:
        """Orthogonally adjacent coordinates (may be out of any bounds)."""
        return [self.step(d) for d in CARDINAL_DIRECTIONS]

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


class ActionType(Enum):
    """Actions a participant can request on its turn."""

    OBSERVE = "LOOK"
    MOVE = "MOVE"
    HELLO = "HELLO"
    PICKUP = "PICKUP"
    PASS = "PASS"
    QUIT = "QUIT"


@dataclass(frozen=True)
class Action:
    """An action requested by a participant."""

    type: ActionType
    direction: Optional[Direction] = None

    def __post_init__(self):
        if (self.type == ActionType.MOVE) != (self.direction is not None):
            raise ValueError("MOVE actions need a direction and other actions must not have one")

    @classmethod
    def observe(cls) -> "Action":
        return cls(ActionType.OBSERVE)

    @classmethod
    def move(cls, direction: Direction) -> "Action":
        return cls(ActionType.MOVE, direction)

    @property
    def is_move(self) -> bool:
        return self.type == ActionType.MOVE

    def __str__(self) -> str:
        if self.direction is not None:
            return f"{self.type.value} {self.direction.value}"
        return self.type.value


class MoveOutcome(Enum):
    """Result of a MOVE as reported back to the participant."""

    SUCCESS = "MOVE_SUCCESS"
    FAILURE = "MOVE_FAIL"
    SUCCESS_GAME_END = "MOVE_SUCCESS_ENDGAME"

    @property
    def moved(self) -> bool:
        """Whether the participant actually changed position."""
        return self != MoveOutcome.FAILURE
