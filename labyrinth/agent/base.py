"""Participant protocol shared by the bot and the human player."""

from typing import Protocol, runtime_checkable

from labyrinth.api.models import Action, MoveOutcome
from labyrinth.api.view import LocalView


@runtime_checkable
class Participant(Protocol):
    """
    Anything the game can ask for a turn.

    The game calls deliver_observation only in response to an OBSERVE action
    and report_outcome only in response to a MOVE.
    """

    def request_action(self) -> Action:
        ...

    def deliver_observation(self, view: LocalView) -> None:
        ...

    def report_outcome(self, outcome: MoveOutcome) -> None:
        ...


@runtime_checkable
class MessageReceiver(Participant, Protocol):
    """A participant that is also told free-text results (HELLO, PICKUP, game over)."""

    def notify(self, message: str) -> None:
        ...
