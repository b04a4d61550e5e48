"""
Belief state for the bot.

Holds everything the bot remembers between turns: the last window it saw,
where it thinks it is inside that window, where it last saw the player and
its navigation bookkeeping. Only the bot's own state machine writes to it.
"""

from dataclasses import dataclass
from typing import Optional

from labyrinth.api.models import Coordinate, Direction
from labyrinth.api.tiles import TileType
from labyrinth.api.view import DEFAULT_WINDOW_SIZE, LocalView


@dataclass
class BeliefState:
    """
    The bot's possibly-stale model of its surroundings.

    Coordinates are window coordinates of the last observation, not map
    coordinates. Before the first observation there is no window and every
    lookup is UNKNOWN.
    """

    current_heading: Direction
    last_heading: Direction
    window_size: int = DEFAULT_WINDOW_SIZE
    window: Optional[LocalView] = None
    self_position: Optional[Coordinate] = None
    target_position: Optional[Coordinate] = None
    forbidden_heading: Optional[Direction] = None
    # Set when the last pursuit attempt found no usable route to the target
    target_unreachable: bool = False
    needs_observation: bool = True
    turns_since_observation: int = 0

    def __post_init__(self):
        if self.self_position is None:
            self.self_position = self.window_center

    @property
    def window_center(self) -> Coordinate:
        mid = self.window_size // 2
        return Coordinate(mid, mid)

    @property
    def has_target(self) -> bool:
        return self.target_position is not None

    # ==================== Observation ====================

    def remember(self, view: LocalView) -> None:
        """Replace the remembered window and recentre on it."""
        if view.size != self.window_size:
            raise ValueError(f"Expected a {self.window_size}x{self.window_size} view, got {view.size}")
        self.window = view
        self.self_position = view.center
        self.needs_observation = False

    def locate_player(self) -> Optional[Coordinate]:
        """Record where the player marker is in the current window, if anywhere."""
        if self.window is None:
            return None
        found = self.window.find(TileType.PLAYER)
        if found is not None:
            self.target_position = found
        return found

    # ==================== Queries ====================

    def tile_at(self, coord: Coordinate) -> TileType:
        if self.window is None:
            return TileType.UNKNOWN
        return self.window.tile_at(coord)

    def tile_ahead(self, direction: Direction) -> TileType:
        """Classification of the cell one step from self along a direction."""
        return self.tile_at(self.self_position.step(direction))

    # ==================== Movement ====================

    def advance(self, direction: Direction) -> Coordinate:
        """Move self one step within the remembered window."""
        self.self_position = self.self_position.step(direction)
        return self.self_position

    def at_target(self) -> bool:
        return self.target_position is not None and self.self_position == self.target_position

    def clear_target(self) -> None:
        self.target_position = None
        self.target_unreachable = False

    def set_heading(self, heading: Direction) -> None:
        """Adopt a new heading, remembering the one it replaces."""
        self.last_heading = self.current_heading
        self.current_heading = heading

    def summary(self) -> dict:
        """Compact state for logging."""
        return {
            "self": str(self.self_position),
            "target": str(self.target_position) if self.target_position else None,
            "heading": self.current_heading.value,
            "last": self.last_heading.value,
            "forbidden": self.forbidden_heading.value if self.forbidden_heading else None,
            "target_unreachable": self.target_unreachable,
            "needs_observation": self.needs_observation,
            "turns_since_observation": self.turns_since_observation,
        }
