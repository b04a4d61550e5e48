"""
Logging configuration for interactive runs.

Creates timestamped log files for each game so the terminal stays free for
the human player, and provides small loggers for bot decisions and game
state.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from labyrinth.api.view import LocalView

session_logger = logging.getLogger("game.session")


class RunLogger:
    """
    Manages logging for a single game run.

    Creates a timestamped log file and routes all logging to it while the
    game owns the console. The session header records the map and seed so a
    run can be replayed from its log.
    """

    LOG_DIR = Path("./data/logs")

    def __init__(self, log_dir: Optional[Path] = None, level: str = "DEBUG"):
        """
        Initialize the run logger.

        Args:
            log_dir: Directory for log files (defaults to ./data/logs)
            level: Lowest level written to the run file
        """
        self.log_dir = log_dir or self.LOG_DIR
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, level.upper(), logging.DEBUG)

        self.run_id = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        self.log_file = self.log_dir / f"run_{self.run_id}.log"

        self._file_handler: Optional[logging.FileHandler] = None
        self._saved_handlers: list[logging.Handler] = []
        self._saved_level: int = logging.WARNING

    def setup(self) -> Path:
        """
        Set up logging for this run.

        Returns:
            Path to the log file
        """
        self._file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
        self._file_handler.setLevel(self.level)
        self._file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))

        root_logger = logging.getLogger()

        # Console handlers would interleave with the game's own output
        self._saved_handlers = root_logger.handlers.copy()
        self._saved_level = root_logger.level

        root_logger.handlers = [self._file_handler]
        root_logger.setLevel(self.level)

        session_logger.info("=" * 80)
        session_logger.info(f"GAME SESSION STARTED: {self.run_id}")
        session_logger.info(f"Log file: {self.log_file} (level {logging.getLevelName(self.level)})")
        return self.log_file

    def log_game(self, map_name: str, gold_required: int, seed: Optional[int]) -> None:
        """Record what is being played so the run can be reproduced."""
        session_logger.info(f"Map: {map_name!r}, gold required {gold_required}")
        session_logger.info(f"Seed: {seed if seed is not None else 'unseeded'}")
        session_logger.info("=" * 80)

    def teardown(self) -> None:
        """Close the run file and give the console handlers back."""
        session_logger.info("=" * 80)
        session_logger.info(f"GAME SESSION ENDED: {self.run_id}")
        session_logger.info("=" * 80)

        if self._file_handler:
            self._file_handler.close()

        root_logger = logging.getLogger()
        root_logger.handlers = self._saved_handlers
        root_logger.setLevel(self._saved_level)


class DecisionLogger:
    """Logger for bot decisions."""

    def __init__(self):
        self.logger = logging.getLogger("bot.decision")

    def log_decision(
        self,
        decision_type: str,
        heading: Optional[str] = None,
        reason: Optional[str] = None,
        belief: Optional[dict] = None,
    ) -> None:
        """Log a bot decision."""
        parts = [f"DECISION: {decision_type}"]
        if heading:
            parts.append(f"heading={heading}")
        if reason:
            parts.append(f"reason={reason}")
        self.logger.info(" | ".join(parts))

        if belief:
            self.logger.debug(f"  Belief: {json.dumps(belief)}")

    def log_replan(self, old_heading: str, new_heading: str, backtrack_allowed: bool, attempts: int) -> None:
        """Log a heading change from the random search."""
        self.logger.info(
            f"REPLAN: {old_heading} -> {new_heading} "
            f"(backtrack_allowed={backtrack_allowed}, attempts={attempts})"
        )

    def log_unreachable(self, reason: str, message: str) -> None:
        self.logger.info(f"UNREACHABLE: {reason} ({message})")


class GameStateLogger:
    """Logger for game state changes."""

    def __init__(self):
        self.logger = logging.getLogger("game.state")

    def log_state(
        self,
        turn: int,
        human_position: tuple[int, int],
        bot_position: tuple[int, int],
        gold_owned: int,
        gold_required: int,
    ) -> None:
        """Log current game state."""
        self.logger.debug(
            f"Turn {turn}: Human {human_position}, Bot {bot_position}, "
            f"Gold {gold_owned}/{gold_required}"
        )

    def log_action(self, role: str, action: str, result: Optional[str] = None) -> None:
        if result:
            self.logger.info(f"{role} {action} -> {result}")
        else:
            self.logger.info(f"{role} {action}")

    def log_view(self, role: str, view: LocalView) -> None:
        """Log a look window."""
        self.logger.debug(f"{role} view:")
        for line in view.rows():
            self.logger.debug(f"  {line}")


# Run in progress, if any
_current_run: Optional[RunLogger] = None


def setup_run_logging(log_dir: Optional[Path] = None, level: str = "DEBUG") -> Path:
    """
    Set up logging for a new game run, ending any run still open.

    Args:
        log_dir: Optional custom log directory
        level: Lowest level written to the run file

    Returns:
        Path to the log file
    """
    global _current_run

    if _current_run:
        _current_run.teardown()

    _current_run = RunLogger(log_dir, level)
    return _current_run.setup()


def log_game_details(map_name: str, gold_required: int, seed: Optional[int]) -> None:
    """Add the map and seed to the current run's header."""
    if _current_run:
        _current_run.log_game(map_name, gold_required, seed)


def teardown_run_logging() -> None:
    global _current_run

    if _current_run:
        _current_run.teardown()
        _current_run = None


def get_log_file() -> Optional[Path]:
    if _current_run:
        return _current_run.log_file
    return None
