"""Configuration management for the Labyrinth game."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass
class BotConfig:
    """Bot decision settings."""

    # Side length of the square LOOK window (odd)
    window_size: int = 5
    # Force a LOOK after this many moves without one
    observe_interval: int = 5
    # Rejected random headings before backtracking is allowed
    max_random_attempts: int = 100
    # Edge weight for anything touching a believed wall
    obstacle_weight: int = 99999

    def __post_init__(self):
        if self.window_size < 3 or self.window_size % 2 == 0:
            raise ValueError(f"window_size must be an odd number >= 3, got {self.window_size}")
        if self.observe_interval < 1:
            raise ValueError(f"observe_interval must be positive, got {self.observe_interval}")
        if self.max_random_attempts < 1:
            raise ValueError(f"max_random_attempts must be positive, got {self.max_random_attempts}")


@dataclass
class GameConfig:
    """Game settings."""

    # None plays the built-in map
    map_file: Optional[str] = None
    # 0 = no limit
    max_turns: int = 0
    # None = unseeded; a fixed seed makes spawns and the bot deterministic
    seed: Optional[int] = None


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = "./data/labyrinth.log"


@dataclass
class Config:
    """Main configuration container."""

    bot: BotConfig = field(default_factory=BotConfig)
    game: GameConfig = field(default_factory=GameConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. Defaults to config/default.yaml

    Returns:
        Populated Config dataclass
    """
    if config_path is None:
        candidates = [
            Path("config/default.yaml"),
            Path(__file__).parent.parent / "config" / "default.yaml",
        ]
        for candidate in candidates:
            if candidate.exists():
                config_path = str(candidate)
                break

    config = Config()

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            data = yaml.safe_load(f)

        if data:
            if "bot" in data:
                config.bot = BotConfig(**data["bot"])
            if "game" in data:
                config.game = GameConfig(**data["game"])
            if "logging" in data:
                config.logging = LoggingConfig(**data["logging"])

    # Environment variable overrides
    if os.environ.get("LABYRINTH_MAP"):
        config.game.map_file = os.environ["LABYRINTH_MAP"]
    if os.environ.get("LABYRINTH_SEED"):
        config.game.seed = int(os.environ["LABYRINTH_SEED"])
    if os.environ.get("LABYRINTH_MAX_TURNS"):
        config.game.max_turns = int(os.environ["LABYRINTH_MAX_TURNS"])
    if os.environ.get("LABYRINTH_LOG_LEVEL"):
        config.logging.level = os.environ["LABYRINTH_LOG_LEVEL"]

    return config


def setup_logging(config: LoggingConfig) -> None:
    """
    Configure logging based on configuration.

    Args:
        config: Logging configuration
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.file))

    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=handlers,
    )

    logger.info(f"Logging configured at level {config.level}")
