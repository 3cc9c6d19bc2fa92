"""
End-to-end scenarios driven through rolls and decisions only.
"""

from tycoon.cards import Card, CardType
from tycoon.game import Choice
from tycoon.money import EventType


def test_scenario_buy_on_first_roll(make_game):
    """
    Player 1 rolls (3,4), lands on The Angel Islington (cost 100) and buys it.

    The pass-Go purchase gate is switched off so the purchase can happen on
    the opening roll.
    """
    game = make_game(rolls=[(3, 4)], require_pass_go_to_buy=False)

    game.roll_dice()
    assert game.players[0].position == 7
    assert game.pending_decision.is_enabled(Choice.BUY)

    game.resolve_decision(Choice.BUY)

    assert game.players[0].cash == 1400
    assert game.players[1].cash == 1500
    assert not game.bank.has_tile(7)
    assert game.board.ownership_of(7).owner_id == 0
    assert 7 in game.players[0].properties
    assert game.get_current_player().player_id == 1
    assert game.advances == 1


def test_scenario_monopoly_rent(make_game):
    """Player 2 owns the whole brown group; player 1 lands on it and pays double."""
    game = make_game(rolls=[(1, 2)])
    game.buy_property(1, 1)
    game.buy_property(1, 3)
    bob_cash = game.players[1].cash

    game.roll_dice()

    # Whitechapel Road rank-0 rent is 4
    assert game.players[0].cash == 1500 - 8
    assert game.players[1].cash == bob_cash + 8
    rent = game.event_log.of_type(EventType.RENT_PAYMENT)[0]
    assert rent.details["amount"] == 8


def test_scenario_go_crossed_backwards_and_forwards(make_game):
    """
    A card moves a player back across Go, then the next roll carries them
    forward across it again: one salary per actual crossing.
    """
    game = make_game(rolls=[(1, 3), (2, 3), (2, 4)])
    game.decks["potluck"].cards = [Card("Go back 3 spaces", CardType.MOVE_SPACES, value=-3, deck="potluck")]
    alice = game.players[0]
    alice.position = 38

    # Cross Go to Potluck, then back 3 across Go onto Mayfair
    game.roll_dice()
    assert alice.position == 39
    assert alice.cash == 1900
    game.resolve_decision(Choice.DECLINE)

    # Bob
    game.roll_dice()

    # Forward across Go again
    game.roll_dice()

    assert alice.position == 5
    assert alice.cash == 2100
    salaries = [t for t in game.ledger.history if t.reason == "go_salary"]
    assert len(salaries) == 3
    assert len(game.event_log.of_type(EventType.PASS_GO)) == 3
    assert alice.has_passed_go
