"""Tests for turn orchestration and game rules."""

import io
import random
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from labyrinth.agent import BotPlayer, HumanPlayer
from labyrinth.api.models import Action, ActionType, Coordinate, Direction, MoveOutcome
from labyrinth.game import DungeonMap, GameLogic, GameStatus, MapError, Role
from labyrinth.game.logic import LOSE_MESSAGE, QUIT_MESSAGE, WIN_MESSAGE

ROOM = [
    "#######",
    "#.G..E#",
    "#.....#",
    "#######",
]

PASS = Action(ActionType.PASS)


def make_game(rows=ROOM, gold_required=1, human=None, bot=None, seed=0) -> GameLogic:
    dungeon = DungeonMap(list(rows), "Test Room", gold_required)
    return GameLogic(
        dungeon,
        human or MagicMock(),
        bot or MagicMock(),
        rng=random.Random(seed),
    )


def place(game: GameLogic, human: Coordinate, bot: Coordinate) -> None:
    game.positions = {Role.HUMAN: human, Role.BOT: bot}


class TestSpawning:
    """Tests for spawn positions."""

    def test_spawns_on_free_tiles(self):
        """Test spawn rules over many seeds."""
        for seed in range(30):
            game = make_game(seed=seed)
            game.start()
            human = game.positions[Role.HUMAN]
            bot = game.positions[Role.BOT]
            assert game.dungeon.is_walkable(human)
            assert game.dungeon.is_walkable(bot)
            assert not game.dungeon.has_gold(human)
            assert human != bot

    def test_same_seed_same_spawns(self):
        """Test spawns are reproducible."""
        first = make_game(seed=5)
        second = make_game(seed=5)
        first.start()
        second.start()
        assert first.positions == second.positions

    def test_no_room_to_spawn(self):
        """Test a map without free tiles."""
        game = make_game(rows=["###", "#G#", "###"])
        with pytest.raises(MapError):
            game.start()


class TestLookWindow:
    """Tests for look_window()."""

    def setup_method(self):
        """Set up test fixtures."""
        self.game = make_game()
        place(self.game, human=Coordinate(1, 1), bot=Coordinate(2, 3))

    def test_human_view(self):
        """Test the human sees itself, the bot and off-map walls."""
        view = self.game.look_window(Role.HUMAN)
        assert view.rows() == [
            "#####",
            "#####",
            "##PG.",
            "##..B",
            "#####",
        ]

    def test_bot_view(self):
        """Test the bot sees the player and the floor under itself."""
        view = self.game.look_window(Role.BOT)
        assert view.rows() == [
            "#####",
            "PG..E",
            ".....",
            "#####",
            "#####",
        ]

    def test_window_size(self):
        """Test a configured window size."""
        game = GameLogic(DungeonMap(ROOM, "t", 1), MagicMock(), MagicMock(), window_size=3)
        place(game, human=Coordinate(1, 1), bot=Coordinate(2, 3))
        assert game.look_window(Role.HUMAN).size == 3


class TestMove:
    """Tests for move()."""

    def setup_method(self):
        """Set up test fixtures."""
        self.human = MagicMock()
        self.game = make_game(human=self.human)
        place(self.game, human=Coordinate(1, 1), bot=Coordinate(2, 5))

    def test_move_onto_floor(self):
        """Test a normal step."""
        assert self.game.move(Role.HUMAN, Direction.SOUTH) == MoveOutcome.SUCCESS
        assert self.game.positions[Role.HUMAN] == Coordinate(2, 1)

    def test_move_into_wall(self):
        """Test walls stop movement."""
        assert self.game.move(Role.HUMAN, Direction.NORTH) == MoveOutcome.FAILURE
        assert self.game.positions[Role.HUMAN] == Coordinate(1, 1)

    def test_move_off_map(self):
        """Test the map edge stops movement."""
        game = make_game(rows=["..."])
        place(game, human=Coordinate(0, 0), bot=Coordinate(0, 2))
        assert game.move(Role.HUMAN, Direction.WEST) == MoveOutcome.FAILURE

    def test_exit_without_gold(self):
        """Test exits are ordinary floor until the player has enough gold."""
        place(self.game, human=Coordinate(1, 4), bot=Coordinate(2, 1))
        assert self.game.move(Role.HUMAN, Direction.EAST) == MoveOutcome.SUCCESS
        assert self.game.status == GameStatus.RUNNING

    def test_exit_with_gold_wins(self):
        """Test leaving with enough gold ends the game."""
        place(self.game, human=Coordinate(1, 4), bot=Coordinate(2, 1))
        self.game.gold_owned = 1
        assert self.game.move(Role.HUMAN, Direction.EAST) == MoveOutcome.SUCCESS_GAME_END
        assert self.game.status == GameStatus.WON
        self.human.notify.assert_called_once_with(WIN_MESSAGE)

    def test_bot_never_exits(self):
        """Test the bot steps onto an exit like any floor tile."""
        self.game.gold_owned = 1
        place(self.game, human=Coordinate(1, 1), bot=Coordinate(2, 5))
        assert self.game.move(Role.BOT, Direction.NORTH) == MoveOutcome.SUCCESS
        assert self.game.status == GameStatus.RUNNING

    def test_bot_catches_human(self):
        """Test the bot stepping onto the human ends the game."""
        place(self.game, human=Coordinate(1, 4), bot=Coordinate(1, 5))
        assert self.game.move(Role.BOT, Direction.WEST) == MoveOutcome.FAILURE
        assert self.game.status == GameStatus.LOST
        self.human.notify.assert_called_once_with(LOSE_MESSAGE)

    def test_human_walks_into_bot(self):
        """Test the human stepping onto the bot also loses."""
        place(self.game, human=Coordinate(2, 4), bot=Coordinate(2, 5))
        assert self.game.move(Role.HUMAN, Direction.EAST) == MoveOutcome.FAILURE
        assert self.game.status == GameStatus.LOST


class TestHumanCommands:
    """Tests for HELLO and PICKUP."""

    def setup_method(self):
        """Set up test fixtures."""
        self.game = make_game(gold_required=2)
        place(self.game, human=Coordinate(1, 2), bot=Coordinate(2, 5))

    def test_hello(self):
        """Test HELLO reports remaining gold."""
        assert self.game.hello() == "Gold to win: 2"

    def test_pickup(self):
        """Test picking up gold once."""
        assert self.game.pickup() == "SUCCESS. Gold owned: 1."
        assert self.game.hello() == "Gold to win: 1"
        assert self.game.dungeon.char_at(Coordinate(1, 2)) == "."
        assert self.game.pickup() == "FAIL. Gold owned: 1."


class TestRun:
    """Tests for the turn loop."""

    def test_quit(self):
        """Test QUIT ends the game before the bot acts."""
        human = MagicMock()
        human.request_action.return_value = Action(ActionType.QUIT)
        bot = MagicMock()
        game = make_game(human=human, bot=bot)

        result = game.run()

        assert result.status == GameStatus.QUIT
        assert result.turns == 1
        human.notify.assert_called_once_with(QUIT_MESSAGE)
        bot.request_action.assert_not_called()

    def test_turn_limit(self):
        """Test max_turns stops the loop."""
        human = MagicMock()
        human.request_action.return_value = PASS
        bot = MagicMock()
        bot.request_action.return_value = Action.observe()
        game = make_game(human=human, bot=bot)

        result = game.run(max_turns=3)

        assert result.status == GameStatus.TURN_LIMIT
        assert result.turns == 3
        assert bot.deliver_observation.call_count == 3

    def test_listing_commands_gives_bot_a_turn(self):
        """Test typing COMMANDS ends the human's turn and the bot acts."""
        lines = iter(["COMMANDS", "QUIT"])
        human = HumanPlayer(input_fn=lambda: next(lines), console=Console(file=io.StringIO()))
        bot = MagicMock()
        bot.request_action.return_value = Action.observe()
        game = make_game(human=human, bot=bot)

        result = game.run()

        assert result.status == GameStatus.QUIT
        assert result.turns == 2
        assert bot.request_action.call_count == 1

    def test_observation_routed_to_participant(self):
        """Test LOOK results go to the participant that asked."""
        human = MagicMock()
        human.request_action.side_effect = [Action.observe(), Action(ActionType.QUIT)]
        bot = MagicMock()
        bot.request_action.return_value = PASS
        game = make_game(human=human, bot=bot)
        place(game, human=Coordinate(1, 1), bot=Coordinate(2, 3))

        game.run()

        view = human.deliver_observation.call_args[0][0]
        assert view.center == Coordinate(2, 2)
        assert view.char_at(Coordinate(2, 2)) == "P"

    def test_scripted_win(self):
        """Test collecting gold and leaving through the exit."""
        human = MagicMock()
        human.request_action.side_effect = [
            Action.move(Direction.EAST),
            Action(ActionType.PICKUP),
            Action(ActionType.HELLO),
            Action.move(Direction.EAST),
            Action.move(Direction.EAST),
            Action.move(Direction.EAST),
        ]
        bot = MagicMock()
        bot.request_action.return_value = PASS
        game = make_game(human=human, bot=bot)
        place(game, human=Coordinate(1, 1), bot=Coordinate(2, 1))

        result = game.run()

        assert result.won
        assert result.turns == 6
        assert result.gold_owned == 1
        human.report_outcome.assert_called_with(MoveOutcome.SUCCESS_GAME_END)
        human.notify.assert_any_call("SUCCESS. Gold owned: 1.")
        human.notify.assert_any_call("Gold to win: 0")
        human.notify.assert_called_with(WIN_MESSAGE)

    def test_bot_hunts_down_player(self):
        """Test the real bot catches a player standing in a corridor."""
        human = MagicMock()
        human.request_action.return_value = PASS
        bot = BotPlayer(rng=random.Random(1))
        game = make_game(rows=["#######", "#.....#", "#######"], human=human, bot=bot)
        place(game, human=Coordinate(1, 4), bot=Coordinate(1, 2))

        result = game.run(max_turns=20)

        assert result.status == GameStatus.LOST
        assert result.turns == 3
        human.notify.assert_called_with(LOSE_MESSAGE)
