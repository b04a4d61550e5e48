"""
Command-line interface for the Labyrinth game.

Usage:
    python -m labyrinth.cli play                    Play on the built-in map
    python -m labyrinth.cli play --map maps/cave    Play a map file (.txt optional)
    python -m labyrinth.cli check-map maps/cave.txt Validate a map file
"""

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Optional

from labyrinth.config import Config, load_config, setup_logging

logger = logging.getLogger(__name__)


def resolve_map_path(name: str) -> Path:
    """Map names may be given with or without the .txt suffix."""
    path = Path(name)
    if path.suffix != ".txt":
        path = path.with_name(path.name + ".txt")
    return path


def load_map(map_file: Optional[str]):
    """
    Load the requested map, falling back to the built-in one.

    Prints what was loaded the way the game announces it.
    """
    from labyrinth.game import DungeonMap, MapError

    if not map_file:
        dungeon = DungeonMap.default()
        print(f'\nDefault map created: "{dungeon.name}"\nGold required to leave dungeon: {dungeon.gold_required}\n')
        return dungeon

    path = resolve_map_path(map_file)
    try:
        dungeon = DungeonMap.from_file(path)
    except (MapError, OSError) as e:
        logger.warning(f"Could not load map {path}: {e}")
        print(
            "\nSomething went wrong in the initialisation of the map, so the default map has been used."
            "\nPlease check the validity of your chosen map file.",
            file=sys.stderr,
        )
        print(f'Error message: "{e}"\n', file=sys.stderr)
        return DungeonMap.default()

    print(f'\nMap "{path.stem}" created:\n"{dungeon.name}"\nGold required to leave dungeon: {dungeon.gold_required}\n')
    return dungeon


def cmd_play(args: argparse.Namespace, config: Config) -> int:
    """Play an interactive game against the bot."""
    from labyrinth.agent import BotPlayer, HumanPlayer
    from labyrinth.game import GameLogic, GameStatus
    from labyrinth.logging import log_game_details, setup_run_logging, teardown_run_logging

    if args.map:
        config.game.map_file = args.map
    if args.seed is not None:
        config.game.seed = args.seed
    if args.max_turns is not None:
        config.game.max_turns = args.max_turns

    log_file = setup_run_logging(level=config.logging.level)
    try:
        seed = config.game.seed
        dungeon = load_map(config.game.map_file)
        log_game_details(dungeon.name, dungeon.gold_required, seed)
        print('See what commands you can use by typing "COMMANDS".\n')

        human = HumanPlayer()
        bot_seed = None if seed is None else seed + 1
        bot = BotPlayer(config=config.bot, rng=random.Random(bot_seed))
        game = GameLogic(
            dungeon,
            human,
            bot,
            rng=random.Random(seed),
            window_size=config.bot.window_size,
        )
        result = game.run(max_turns=config.game.max_turns)
    except KeyboardInterrupt:
        print("\nQUITTING GAME")
        return 0
    finally:
        teardown_run_logging()

    print(f"Game log: {log_file}")
    return 0 if result.status in (GameStatus.WON, GameStatus.QUIT) else 1


def cmd_check_map(args: argparse.Namespace, config: Config) -> int:
    """Validate a map file."""
    from labyrinth.game import DungeonMap, MapError

    path = resolve_map_path(args.path)
    try:
        dungeon = DungeonMap.from_file(path)
    except (MapError, OSError) as e:
        print(f"Invalid map {path}: {e}", file=sys.stderr)
        return 1

    height, width = dungeon.size
    walkable = sum(1 for _ in dungeon.walkable_cells())
    print(f'"{dungeon.name}": {height}x{width}, {walkable} walkable tiles, '
          f"gold required {dungeon.gold_required}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Labyrinth - find the gold and get out before the bot finds you",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--log-level",
        "-l",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level override",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # play command
    play_parser = subparsers.add_parser("play", help="Play a game against the bot")
    play_parser.add_argument("--map", "-m", type=str, default=None, help="Map file to play (.txt optional)")
    play_parser.add_argument("--seed", "-s", type=int, default=None, help="Seed for a reproducible game")
    play_parser.add_argument("--max-turns", type=int, default=None, help="Stop after this many turns")
    play_parser.set_defaults(func=cmd_play)

    # check-map command
    check_parser = subparsers.add_parser("check-map", help="Validate a map file")
    check_parser.add_argument("path", type=str, help="Map file to check")
    check_parser.set_defaults(func=cmd_check_map)

    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.log_level:
        config.logging.level = args.log_level

    if args.command is None:
        parser.print_help()
        return 1

    # play routes logging to its own run file
    if args.command != "play":
        setup_logging(config.logging)

    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
