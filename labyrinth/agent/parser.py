"""
Command parser for console input.

Turns raw text typed by the human player into structured commands and
validates them against the game protocol.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from labyrinth.api.models import Action, ActionType, Direction

logger = logging.getLogger(__name__)


class CommandType(Enum):
    """Commands the human player may type."""

    HELLO = "HELLO"
    LOOK = "LOOK"
    MOVE = "MOVE"
    PICKUP = "PICKUP"
    QUIT = "QUIT"
    PASS = "PASS"
    COMMANDS = "COMMANDS"  # List commands; never reaches the game


# Game actions for every command except COMMANDS
_ACTION_TYPES = {
    CommandType.HELLO: ActionType.HELLO,
    CommandType.LOOK: ActionType.OBSERVE,
    CommandType.MOVE: ActionType.MOVE,
    CommandType.PICKUP: ActionType.PICKUP,
    CommandType.QUIT: ActionType.QUIT,
    CommandType.PASS: ActionType.PASS,
}

VALID_COMMANDS = (
    "HELLO",
    "LOOK",
    "MOVE N",
    "MOVE S",
    "MOVE E",
    "MOVE W",
    "PICKUP",
    "QUIT",
    "PASS",
    "COMMANDS",
)


@dataclass(frozen=True)
class Command:
    """A parsed console command."""

    type: CommandType
    direction: Optional[Direction] = None

    @property
    def is_game_action(self) -> bool:
        """Whether this command is sent to the game (COMMANDS is not)."""
        return self.type in _ACTION_TYPES

    def to_action(self) -> Action:
        """
        Convert to a game action.

        Raises:
            ValueError: for commands that are not game actions
        """
        if not self.is_game_action:
            raise ValueError(f"{self.type.value} is not a game action")
        return Action(_ACTION_TYPES[self.type], self.direction)

    def __str__(self) -> str:
        if self.direction is not None:
            return f"{self.type.value} {self.direction.value}"
        return self.type.value


class CommandParser:
    """
    Parses console input into commands.

    Case and surrounding whitespace do not matter; runs of inner whitespace
    collapse to one space.

    Example usage:
        parser = CommandParser()
        command = parser.parse("  move n ")

        if command is not None and command.is_game_action:
            game.submit(command.to_action())
    """

    MOVE_PATTERN = re.compile(r"^MOVE ([NSEW])$")

    def parse(self, text: str) -> Optional[Command]:
        """
        Parse one line of input.

        Args:
            text: Raw input line

        Returns:
            Command, or None if the input is not a valid command
        """
        normalized = self.normalize(text)
        if not normalized:
            return None

        match = self.MOVE_PATTERN.match(normalized)
        if match:
            return Command(CommandType.MOVE, Direction.from_char(match.group(1)))

        try:
            command_type = CommandType(normalized)
        except ValueError:
            logger.debug(f"Invalid command: {text!r}")
            return None

        if command_type == CommandType.MOVE:
            # Bare MOVE without a direction
            return None
        return Command(command_type)

    @staticmethod
    def normalize(text: str) -> str:
        return " ".join(text.split()).upper()


def parse_command(text: str) -> Optional[Command]:
    """Parse one line of input with a default parser."""
    return CommandParser().parse(text)
