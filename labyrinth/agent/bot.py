"""
The bot participant.

A turn-level state machine that decides between looking and moving, keeps
its belief about the last window it saw up to date from action outcomes, and
heads for the player once it has seen them.

Example usage:
    bot = BotPlayer(rng=random.Random(7))

    action = bot.request_action()        # OBSERVE on the first turn
    bot.deliver_observation(view)

    action = bot.request_action()        # MOVE <heading>
    bot.report_outcome(MoveOutcome.SUCCESS)
"""

import logging
import random
from enum import Enum
from typing import Optional

from labyrinth.api.models import CARDINAL_DIRECTIONS, Action, Coordinate, Direction, MoveOutcome
from labyrinth.api.pathfinding import (
    PathSolver,
    PathStopReason,
    Unreachable,
    build_obstacle_graph,
    plan_next_heading,
    shortest_path,
)
from labyrinth.api.tiles import TileType
from labyrinth.api.view import LocalView
from labyrinth.config import BotConfig
from labyrinth.logging import DecisionLogger
from labyrinth.memory.belief import BeliefState

logger = logging.getLogger(__name__)
decision_logger = DecisionLogger()


class BotMode(Enum):
    """What the bot will do with its next turn."""

    AWAITING_OBSERVATION = "awaiting_observation"
    PURSUING = "pursuing"
    EXPLORING = "exploring"


class BotPlayer:
    """
    Autonomous hunter that only knows what its last LOOK showed it.

    Implements the participant protocol: request_action, deliver_observation
    and report_outcome. All randomness comes from the injected rng so a seeded
    generator gives a reproducible bot.
    """

    def __init__(
        self,
        config: Optional[BotConfig] = None,
        rng: Optional[random.Random] = None,
        solver: PathSolver = shortest_path,
    ):
        """
        Initialize the bot.

        Args:
            config: Bot settings (window size, look interval, search limits)
            rng: Random generator for headings
            solver: Shortest-path primitive used while pursuing
        """
        self.config = config or BotConfig()
        self.rng = rng or random.Random()
        self.solver = solver

        heading = self.rng.choice(CARDINAL_DIRECTIONS)
        self.belief = BeliefState(
            current_heading=heading,
            last_heading=heading,
            window_size=self.config.window_size,
        )

    @property
    def mode(self) -> BotMode:
        belief = self.belief
        if belief.needs_observation or belief.turns_since_observation >= self.config.observe_interval:
            return BotMode.AWAITING_OBSERVATION
        if belief.has_target:
            return BotMode.PURSUING
        return BotMode.EXPLORING

    # ==================== Participant protocol ====================

    def request_action(self) -> Action:
        """Look if the belief is flagged or stale, otherwise move."""
        belief = self.belief

        if self.mode == BotMode.AWAITING_OBSERVATION:
            return self._observe("flagged" if belief.needs_observation else "stale_window")

        mode = self.mode
        heading = self.choose_heading()
        if belief.needs_observation:
            # The chosen heading leaves the remembered window
            return self._observe("window_edge")

        belief.turns_since_observation += 1
        decision_logger.log_decision("MOVE", heading=heading.value, reason=mode.value, belief=belief.summary())
        return Action.move(heading)

    def _observe(self, reason: str) -> Action:
        belief = self.belief
        belief.turns_since_observation = 0
        belief.needs_observation = False
        decision_logger.log_decision("OBSERVE", reason=reason)
        return Action.observe()

    def deliver_observation(self, view: LocalView) -> None:
        """
        Replace the remembered window with a fresh LOOK.

        Recentres the bot, refreshes the player position and drops the
        planned heading if the new window shows it is blocked.
        """
        belief = self.belief
        previous_position = belief.self_position
        previous_target = belief.target_position

        belief.remember(view)

        found = belief.locate_player()
        if found is not None:
            logger.debug(f"Player spotted at {found}")
        elif previous_target is not None:
            belief.target_position = self._reframe(previous_target, previous_position, view)

        if not self.is_feasible(belief.current_heading, backtrack_allowed=True):
            # Avoid-backtracking must be judged against the heading actually walked
            belief.current_heading = belief.last_heading
            self._replan(backtrack_allowed=False)

        belief.forbidden_heading = None

    def report_outcome(self, outcome: MoveOutcome) -> None:
        """Update position and heading after the game resolved a MOVE."""
        belief = self.belief

        if not outcome.moved:
            logger.debug(f"Move {belief.current_heading.value} failed at {belief.self_position}")
            self._replan(backtrack_allowed=False)
            return

        belief.advance(belief.current_heading)

        if belief.at_target():
            logger.debug(f"Reached remembered player position {belief.target_position}")
            belief.clear_target()
            # The player is probably close by
            belief.needs_observation = True
            self._replan(backtrack_allowed=True)
            belief.forbidden_heading = None
        elif belief.tile_ahead(belief.current_heading) == TileType.UNKNOWN and (
            not belief.has_target or belief.target_unreachable
        ):
            self._replan(backtrack_allowed=False)

    # ==================== Heading selection ====================

    def choose_heading(self) -> Direction:
        """
        Heading for the next MOVE.

        Pursues the remembered player position when there is one, falling back
        to exploration if it cannot be reached. Exploration keeps the current
        heading while it stays feasible and asks for a LOOK before walking
        past the edge of the remembered window.
        """
        belief = self.belief

        if belief.has_target:
            try:
                heading = self._pursue()
            except Unreachable as e:
                belief.target_unreachable = True
                decision_logger.log_unreachable(e.reason.value, e.message)
            else:
                belief.target_unreachable = False
                belief.current_heading = heading
                return heading

        if not self.is_feasible(belief.current_heading, backtrack_allowed=True):
            self._replan(backtrack_allowed=False)
        elif belief.tile_ahead(belief.current_heading) == TileType.UNKNOWN:
            belief.needs_observation = True
        return belief.current_heading

    def is_feasible(self, direction: Direction, backtrack_allowed: bool) -> bool:
        """
        Whether a heading may be attempted.

        Unknown cells are optimistically passable; the next LOOK will tell.
        Known walls never are. Anything else is allowed unless it is the
        forbidden heading and backtracking is not allowed.
        """
        tile = self.belief.tile_ahead(direction)
        if tile == TileType.UNKNOWN:
            return True
        if tile == TileType.WALL:
            return False
        return backtrack_allowed or direction != self.belief.forbidden_heading

    def _pursue(self) -> Direction:
        belief = self.belief
        if belief.window is None:
            raise Unreachable(PathStopReason.NO_PATH_EXISTS, "No window to plan in")
        graph = build_obstacle_graph(belief.window, self.config.obstacle_weight)
        return plan_next_heading(
            graph,
            belief.self_position,
            belief.target_position,
            solver=self.solver,
            obstacle_weight=self.config.obstacle_weight,
        )

    def _replan(self, backtrack_allowed: bool) -> None:
        """Pick a new random heading, discouraging a U-turn unless allowed."""
        belief = self.belief
        old_heading = belief.current_heading

        belief.forbidden_heading = old_heading.opposite
        heading, attempts = self._random_heading(backtrack_allowed)

        if belief.tile_ahead(heading) == TileType.UNKNOWN:
            belief.needs_observation = True

        belief.set_heading(heading)
        decision_logger.log_replan(old_heading.value, heading.value, backtrack_allowed, attempts)

    def _random_heading(self, backtrack_allowed: bool) -> tuple[Direction, int]:
        """
        Sample headings until one is feasible.

        After max_random_attempts rejections a sample is also accepted if it is
        only blocked by the backtracking rule, so dead ends always terminate.

        Returns:
            (heading, number of rejected samples)
        """
        belief = self.belief

        if not any(self.is_feasible(d, backtrack_allowed=True) for d in CARDINAL_DIRECTIONS):
            logger.warning(f"Boxed in by walls at {belief.self_position}; keeping heading {belief.current_heading.value}")
            return belief.current_heading, 0

        attempts = 0
        while True:
            direction = self.rng.choice(CARDINAL_DIRECTIONS)
            if self.is_feasible(direction, backtrack_allowed):
                return direction, attempts
            attempts += 1
            if attempts >= self.config.max_random_attempts and self.is_feasible(direction, backtrack_allowed=True):
                return direction, attempts

    @staticmethod
    def _reframe(target: Coordinate, old_position: Coordinate, view: LocalView) -> Optional[Coordinate]:
        """
        Re-express a remembered target in a new window's coordinates.

        The new window is centred where the bot stood when it looked, so the
        target keeps its offset from that spot. Targets that fall outside the
        new window are forgotten.
        """
        drow, dcol = old_position.offset_to(target)
        center = view.center
        moved = Coordinate(center.row + drow, center.col + dcol)
        if not view.contains(moved):
            logger.debug(f"Forgetting target {target}: outside the new window")
            return None
        return moved
