"""
Tests for rent calculation on rentable tiles and utilities.
"""

from tycoon.dice import DiceRoll
from tycoon.money import EventType


def test_basic_property_rent(basic_game):
    """Unimproved rent comes from the rank-0 entry of the rent table."""
    basic_game.buy_property(0, 1)

    # Old Kent Road base rent is 2
    assert basic_game.calculate_rent(1) == 2


def test_unowned_tile_has_no_rent(basic_game):
    assert basic_game.calculate_rent(1) == 0
    assert basic_game.calculate_rent(4) == 0


def test_monopoly_doubles_rent(basic_game):
    """Owning the whole colour group doubles unimproved rent."""
    basic_game.buy_property(0, 1)
    basic_game.buy_property(0, 3)

    assert basic_game.calculate_rent(1) == 4
    assert basic_game.calculate_rent(3) == 8


def test_no_doubling_once_group_upgraded(basic_game):
    """Any upgrade in the group switches to rank-indexed rent with no doubling."""
    basic_game.buy_property(0, 1)
    basic_game.buy_property(0, 3)
    assert basic_game.upgrade_property(0, 1)

    assert basic_game.calculate_rent(1) == 10
    assert basic_game.calculate_rent(3) == 4


def test_rent_with_upgrades(basic_game):
    basic_game.buy_property(0, 39)
    for _ in range(5):
        assert basic_game.upgrade_property(0, 39)

    assert basic_game.calculate_rent(39) == 2000


def test_mortgaged_property_has_no_rent(basic_game):
    basic_game.buy_property(0, 1)
    basic_game.mortgage_property(0, 1)

    assert basic_game.calculate_rent(1) == 0


def test_utility_rent_one_owned(basic_game):
    """One utility charges the dice total times 4."""
    basic_game.buy_property(0, 12)

    assert basic_game.calculate_rent(12, DiceRoll(3, 4)) == 28


def test_utility_rent_both_owned(basic_game):
    """Both utilities charge the dice total times 10."""
    basic_game.buy_property(0, 12)
    basic_game.buy_property(0, 28)

    assert basic_game.calculate_rent(12, DiceRoll(3, 4)) == 70
    assert basic_game.calculate_rent(28, DiceRoll(6, 5)) == 110


def test_mortgaged_utility_charges_nothing(make_game):
    game = make_game(rolls=[(1, 2)])
    game.buy_property(1, 12)
    game.mortgage_property(1, 12)
    game.players[0].position = 9
    bob_cash = game.players[1].cash

    game.roll_dice()

    assert game.players[0].cash == 1500
    assert game.players[1].cash == bob_cash
    assert game.event_log.of_type(EventType.RENT_PAYMENT) == []


def test_jailed_utility_owner_collects_nothing(basic_game):
    basic_game.buy_property(1, 12)
    basic_game.send_to_jail(1)

    assert basic_game.calculate_rent(12, DiceRoll(3, 4)) == 0


def test_landing_on_utility_pays_owner(make_game):
    game = make_game(rolls=[(1, 2)])
    game.buy_property(1, 12)
    game.players[0].position = 9
    bob_cash = game.players[1].cash

    game.roll_dice()

    assert game.players[0].position == 12
    assert game.players[0].cash == 1500 - 12
    assert game.players[1].cash == bob_cash + 12


def test_landing_on_mortgaged_property_is_free(make_game):
    game = make_game(rolls=[(1, 2)])
    game.buy_property(1, 3)
    game.mortgage_property(1, 3)

    game.roll_dice()

    assert game.players[0].cash == 1500
    assert game.get_current_player().player_id == 1
