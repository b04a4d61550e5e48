"""
The human participant.

Reads commands from the console and renders whatever the game sends back.
"""

import logging
from typing import Callable, Optional

from rich.console import Console
from rich.text import Text

from labyrinth.api.models import Action, ActionType, MoveOutcome
from labyrinth.api.tiles import BOT_CHAR, EXIT_CHAR, GOLD_CHAR, PLAYER_CHAR, WALL_CHAR
from labyrinth.api.view import LocalView

from .parser import VALID_COMMANDS, CommandParser, CommandType

logger = logging.getLogger(__name__)

# Styles for rendering look windows
TILE_STYLES = {
    WALL_CHAR: "bold white on grey23",
    GOLD_CHAR: "bold yellow",
    EXIT_CHAR: "bold green",
    PLAYER_CHAR: "bold cyan",
    BOT_CHAR: "bold red",
}

_OUTCOME_TEXT = {
    MoveOutcome.SUCCESS: "SUCCESS",
    MoveOutcome.FAILURE: "FAIL",
    MoveOutcome.SUCCESS_GAME_END: "SUCCESS",
}


class HumanPlayer:
    """
    Console-driven participant.

    Implements the participant protocol plus notify() for free-text results.
    Input comes from input_fn so tests (and scripted runs) can feed lines.
    """

    def __init__(
        self,
        input_fn: Callable[[], str] = input,
        console: Optional[Console] = None,
    ):
        """
        Initialize the human player.

        Args:
            input_fn: Returns the next input line; raises EOFError at end of input
            console: Console for output
        """
        self._input = input_fn
        self.console = console or Console()
        self.parser = CommandParser()

    def request_action(self) -> Action:
        """Keep reading lines until one is valid. End of input quits."""
        while True:
            line = self.read_line()
            if line is None:
                logger.info("End of input, quitting")
                return Action(ActionType.QUIT)

            command = self.parser.parse(line)
            if command is None:
                self.console.print("Invalid")
                continue

            if command.type == CommandType.COMMANDS:
                # Listing the commands uses up the turn
                self.print_available_commands()
                return Action(ActionType.PASS)

            if command.type == CommandType.PASS:
                self.console.print()

            return command.to_action()

    def read_line(self) -> Optional[str]:
        """Raw input line, or None at end of input."""
        try:
            return self._input()
        except EOFError:
            return None

    def deliver_observation(self, view: LocalView) -> None:
        """Print the look window."""
        self.console.print()
        for row in view.rows():
            line = Text()
            for char in row:
                line.append(char, style=TILE_STYLES.get(char, ""))
            self.console.print(line)
        self.console.print()

    def report_outcome(self, outcome: MoveOutcome) -> None:
        self.console.print(f"\n{_OUTCOME_TEXT[outcome]}\n")

    def notify(self, message: str) -> None:
        """Print a free-text result from the game."""
        self.console.print(f"\n{message}\n", markup=False)

    def print_available_commands(self) -> None:
        self.console.print("\nAvailable commands:")
        for command in VALID_COMMANDS:
            self.console.print(f'"{command}"')
        self.console.print()
