"""Game participants - the bot's decision engine and the console player."""

from .base import MessageReceiver, Participant
from .bot import BotMode, BotPlayer
from .human import HumanPlayer
from .parser import Command, CommandParser, CommandType, parse_command

__all__ = [
    # Protocol
    "MessageReceiver",
    "Participant",
    # Bot
    "BotMode",
    "BotPlayer",
    # Human
    "HumanPlayer",
    # Parser
    "Command",
    "CommandParser",
    "CommandType",
    "parse_command",
]
