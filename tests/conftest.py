"""Shared test fixtures for the Tycoon engine tests."""

from typing import Iterable, List, Tuple

import pytest

from tycoon.config import GameConfig
from tycoon.dice import Dice, DiceRoll
from tycoon.game import create_game
from tycoon.player import Player
from tycoon.presenter import Presenter


class FixedDice(Dice):
    """Dice that return scripted rolls in order."""

    def __init__(self, rolls: Iterable[Tuple[int, int]] = ()):
        super().__init__()
        self.rolls: List[Tuple[int, int]] = list(rolls)

    def queue(self, *rolls: Tuple[int, int]) -> None:
        self.rolls.extend(rolls)

    def roll(self) -> DiceRoll:
        die1, die2 = self.rolls.pop(0)
        return DiceRoll(die1, die2)


class RecordingPresenter(Presenter):
    """Records every notification and completes callbacks immediately."""

    def __init__(self):
        self.transfers = []
        self.moves = []
        self.cards = []
        self.turns = []
        self.decisions = []
        self.prompts_closed = 0
        self.auctions = []

    def on_transfer(self, transfer):
        self.transfers.append(transfer)

    def on_move(self, player, path):
        self.moves.append((player.player_id, list(path)))

    def on_card(self, player, card):
        self.cards.append((player.player_id, card))

    def on_turn(self, player):
        self.turns.append(player.player_id)

    def show_decision(self, decision):
        self.decisions.append(decision)

    def close_prompt(self, on_complete):
        self.prompts_closed += 1
        on_complete()

    def run_auction(self, auction, on_complete):
        self.auctions.append(auction)
        on_complete()


class DeferredPresenter(RecordingPresenter):
    """Holds completion callbacks until the test fires them, like a UI animation."""

    def __init__(self):
        super().__init__()
        self.pending = []

    def close_prompt(self, on_complete):
        self.prompts_closed += 1
        self.pending.append(on_complete)

    def run_auction(self, auction, on_complete):
        self.auctions.append(auction)
        self.pending.append(on_complete)

    def complete(self):
        """Fire the oldest held callback."""
        self.pending.pop(0)()


@pytest.fixture
def game_config():
    """Default game configuration with fixed seed for reproducibility."""
    return GameConfig(seed=42)


@pytest.fixture
def two_players():
    """Two test players."""
    return [Player(0, "Alice"), Player(1, "Bob")]


@pytest.fixture
def four_players():
    """Four test players."""
    return [
        Player(0, "Alice"),
        Player(1, "Bob"),
        Player(2, "Charlie"),
        Player(3, "Diana"),
    ]


@pytest.fixture
def basic_game(game_config, two_players):
    """Basic game with two players and fixed seed."""
    return create_game(game_config, two_players)


@pytest.fixture
def dice():
    """Scripted dice; queue rolls before calling roll_dice."""
    return FixedDice()


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def scripted_game(game_config, two_players, dice, presenter):
    """Two-player game with scripted dice and a recording presenter."""
    return create_game(game_config, two_players, presenter=presenter, dice=dice)


@pytest.fixture
def make_game(two_players):
    """Factory for games with custom rules, players, dice or presenter."""

    def _make(rolls=(), players=None, presenter=None, layout=None, **config):
        config.setdefault("seed", 42)
        game = create_game(
            GameConfig(**config),
            players if players is not None else two_players,
            layout=layout,
            presenter=presenter if presenter is not None else RecordingPresenter(),
            dice=FixedDice(rolls),
        )
        return game

    return _make


@pytest.fixture
def deferred_presenter():
    """Presenter whose prompt-close and auction callbacks fire only on ``complete()``."""
    return DeferredPresenter()
