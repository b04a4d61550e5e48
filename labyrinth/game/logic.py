"""
Turn orchestration for a game.

Owns the map and both participants' true positions, resolves every action
against the map and decides when the game is over. Participants only ever
see copies of the map through their look windows.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from labyrinth.agent.base import MessageReceiver, Participant
from labyrinth.api.models import Action, ActionType, Coordinate, Direction, MoveOutcome
from labyrinth.api.tiles import BOT_CHAR, EXIT_CHAR, PLAYER_CHAR, WALL_CHAR
from labyrinth.api.view import DEFAULT_WINDOW_SIZE, LocalView
from labyrinth.logging import GameStateLogger

from .dungeon import DungeonMap, MapError

logger = logging.getLogger(__name__)
game_state_logger = GameStateLogger()

WIN_MESSAGE = "Congratulations! You've exited the dungeon with enough treasure to last you a lifetime!"
LOSE_MESSAGE = "Too bad, you got horribly ripped to death by the bot of terror."
QUIT_MESSAGE = "QUITTING GAME"


class Role(Enum):
    """Which participant is acting."""

    HUMAN = "human"
    BOT = "bot"


class GameStatus(Enum):
    """Lifecycle of a game."""

    RUNNING = "running"
    WON = "won"
    LOST = "lost"
    QUIT = "quit"
    TURN_LIMIT = "turn_limit"


@dataclass
class GameResult:
    """Result of a finished game."""

    status: GameStatus
    turns: int
    gold_owned: int
    gold_required: int

    @property
    def won(self) -> bool:
        return self.status == GameStatus.WON


class GameLogic:
    """
    Runs a game between a human and a bot.

    Example usage:
        game = GameLogic(DungeonMap.default(), HumanPlayer(), BotPlayer(), rng=random.Random(1))
        result = game.run(max_turns=500)
    """

    def __init__(
        self,
        dungeon: DungeonMap,
        human: MessageReceiver,
        bot: Participant,
        rng: Optional[random.Random] = None,
        window_size: int = DEFAULT_WINDOW_SIZE,
    ):
        """
        Initialize a game.

        Args:
            dungeon: Map to play on (mutated as gold is picked up)
            human: Human participant
            bot: Bot participant
            rng: Random generator for spawn positions
            window_size: Side length of look windows
        """
        self.dungeon = dungeon
        self.human = human
        self.bot = bot
        self.rng = rng or random.Random()
        self.window_size = window_size

        self.status = GameStatus.RUNNING
        self.turn = 0
        self.gold_owned = 0
        self.positions: dict[Role, Coordinate] = {}

    # ==================== Setup ====================

    def start(self) -> None:
        """Reset counters and spawn both participants."""
        self.status = GameStatus.RUNNING
        self.turn = 0
        self.gold_owned = 0
        self.positions = {}
        self.positions[Role.HUMAN] = self.spawn_position(Role.HUMAN)
        self.positions[Role.BOT] = self.spawn_position(Role.BOT)
        logger.info(f"Game started on {self.dungeon.name!r}: human at {self.positions[Role.HUMAN]}, "
                    f"bot at {self.positions[Role.BOT]}")

    def spawn_position(self, role: Role) -> Coordinate:
        """
        Random free tile for a participant.

        Never a wall; the human never starts on gold; the bot never starts on
        the human.

        Raises:
            MapError: if the map has nowhere to spawn
        """
        candidates = list(self.dungeon.walkable_cells())
        if role == Role.HUMAN:
            candidates = [c for c in candidates if not self.dungeon.has_gold(c)]
        else:
            candidates = [c for c in candidates if c != self.positions.get(Role.HUMAN)]
        if not candidates:
            raise MapError(f"No free tile to spawn the {role.value} on {self.dungeon.name!r}")
        return self.rng.choice(candidates)

    # ==================== Game actions ====================

    def look_window(self, role: Role) -> LocalView:
        """
        The window centred on a participant.

        Off-map cells read as walls. The human sees itself and the bot; the
        bot sees the human and the map tile under itself.
        """
        center = self.positions[role]
        half = self.window_size // 2
        human = self.positions[Role.HUMAN]
        bot = self.positions[Role.BOT]

        rows = []
        for drow in range(-half, half + 1):
            row = []
            for dcol in range(-half, half + 1):
                coord = Coordinate(center.row + drow, center.col + dcol)
                if coord == human:
                    row.append(PLAYER_CHAR)
                elif coord == bot and role == Role.HUMAN:
                    row.append(BOT_CHAR)
                else:
                    char = self.dungeon.char_at(coord)
                    row.append(WALL_CHAR if char is None else char)
            rows.append(row)
        return LocalView.from_rows(rows)

    def move(self, role: Role, direction: Direction) -> MoveOutcome:
        """
        Try to move a participant one step.

        Returns:
            FAILURE into walls or off the map, and for a move that ends the
            game by catching; SUCCESS_GAME_END when the human leaves through an
            exit with enough gold; SUCCESS otherwise.
        """
        target = self.positions[role].step(direction)
        char = self.dungeon.char_at(target)

        if role == Role.HUMAN and char == EXIT_CHAR and self.gold_owned >= self.dungeon.gold_required:
            self.positions[role] = target
            self._end(GameStatus.WON, WIN_MESSAGE)
            return MoveOutcome.SUCCESS_GAME_END

        if char is None or char == WALL_CHAR:
            return MoveOutcome.FAILURE

        self.positions[role] = target
        if self.positions[Role.HUMAN] == self.positions[Role.BOT]:
            self._end(GameStatus.LOST, LOSE_MESSAGE)
            return MoveOutcome.FAILURE
        return MoveOutcome.SUCCESS

    def hello(self) -> str:
        """How much more gold the human needs."""
        return f"Gold to win: {self.dungeon.gold_required - self.gold_owned}"

    def pickup(self) -> str:
        """Pick up gold on the human's tile."""
        position = self.positions[Role.HUMAN]
        if self.dungeon.has_gold(position):
            self.gold_owned += 1
            self.dungeon.remove_item(position)
            return f"SUCCESS. Gold owned: {self.gold_owned}."
        return f"FAIL. Gold owned: {self.gold_owned}."

    def quit(self) -> None:
        self._end(GameStatus.QUIT, QUIT_MESSAGE)

    # ==================== Turn loop ====================

    def play_turn(self) -> None:
        """One human action followed by one bot action."""
        self.turn += 1
        self._take_turn(Role.HUMAN, self.human)
        if self.status == GameStatus.RUNNING:
            self._take_turn(Role.BOT, self.bot)

        game_state_logger.log_state(
            self.turn,
            _as_tuple(self.positions[Role.HUMAN]),
            _as_tuple(self.positions[Role.BOT]),
            self.gold_owned,
            self.dungeon.gold_required,
        )

    def run(self, max_turns: int = 0) -> GameResult:
        """
        Play until the game ends.

        Args:
            max_turns: Stop after this many turns (0 = no limit)

        Returns:
            GameResult with the final status
        """
        if not self.positions:
            self.start()

        while self.status == GameStatus.RUNNING:
            if max_turns and self.turn >= max_turns:
                self.status = GameStatus.TURN_LIMIT
                logger.info(f"Turn limit {max_turns} reached")
                break
            self.play_turn()

        logger.info(f"Game over after {self.turn} turns: {self.status.value}")
        return GameResult(
            status=self.status,
            turns=self.turn,
            gold_owned=self.gold_owned,
            gold_required=self.dungeon.gold_required,
        )

    def _take_turn(self, role: Role, participant: Participant) -> None:
        action = participant.request_action()

        if action.type == ActionType.OBSERVE:
            view = self.look_window(role)
            game_state_logger.log_action(role.value, str(action))
            game_state_logger.log_view(role.value, view)
            participant.deliver_observation(view)
        elif action.type == ActionType.MOVE:
            outcome = self.move(role, action.direction)
            game_state_logger.log_action(role.value, str(action), outcome.value)
            participant.report_outcome(outcome)
        elif role == Role.HUMAN:
            self._handle_human_command(action)
        else:
            logger.warning(f"Ignoring {action} from {role.value}")

    def _handle_human_command(self, action: Action) -> None:
        game_state_logger.log_action(Role.HUMAN.value, str(action))
        if action.type == ActionType.HELLO:
            self.human.notify(self.hello())
        elif action.type == ActionType.PICKUP:
            self.human.notify(self.pickup())
        elif action.type == ActionType.QUIT:
            self.quit()

    def _end(self, status: GameStatus, message: str) -> None:
        self.status = status
        logger.info(f"Game ended: {status.value}")
        self.human.notify(message)


def _as_tuple(coord: Coordinate) -> tuple[int, int]:
    return (coord.row, coord.col)
