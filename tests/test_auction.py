"""
Tests for tile auctions.
"""

import pytest

from tycoon.auction import Auction
from tycoon.exceptions import InvalidActionError
from tycoon.money import EventLog, EventType


def test_auction_creation():
    event_log = EventLog()
    auction = Auction(1, "Old Kent Road", [0, 1, 2], event_log)

    assert auction.property_position == 1
    assert auction.high_bidder is None
    assert auction.current_bid == 0
    assert not auction.is_complete
    assert len(auction.active_bidders) == 3
    assert len(event_log.of_type(EventType.AUCTION_START)) == 1


def test_auction_bidding_mechanics():
    """Each bid must beat the current one."""
    auction = Auction(1, "Old Kent Road", [0, 1], EventLog())

    assert auction.place_bid(0, 1)
    assert auction.place_bid(1, 10)
    assert auction.current_bid == 10
    assert auction.high_bidder == 1

    assert not auction.place_bid(0, 5)
    assert auction.current_bid == 10


def test_auction_completes_when_leader_alone():
    auction = Auction(1, "Old Kent Road", [0, 1, 2], EventLog())
    auction.place_bid(2, 30)

    auction.pass_turn(0)
    assert not auction.is_complete
    auction.pass_turn(1)

    assert auction.is_complete
    assert auction.get_winner() == 2
    assert auction.get_winning_bid() == 30


def test_auction_all_pass_without_bids():
    auction = Auction(1, "Old Kent Road", [0, 1], EventLog())

    auction.pass_turn(0)
    auction.pass_turn(1)

    assert auction.is_complete
    assert auction.get_winner() is None


def test_passed_player_cannot_bid():
    auction = Auction(1, "Old Kent Road", [0, 1, 2], EventLog())
    auction.pass_turn(0)

    assert not auction.place_bid(0, 50)


def test_close_ends_bidding():
    auction = Auction(1, "Old Kent Road", [0, 1], EventLog())
    auction.place_bid(0, 20)

    auction.close()

    assert auction.is_complete
    assert auction.get_winner() == 0
    assert not auction.place_bid(1, 40)


def test_game_auction_includes_all_active_players(basic_game):
    auction = basic_game.start_auction(1)

    assert auction.active_bidders == {0, 1}
    assert basic_game.active_auction is auction


def test_game_bid_limited_by_cash(basic_game):
    basic_game.start_auction(1)
    basic_game.players[1].cash = 30

    assert not basic_game.place_bid(1, 40)
    assert basic_game.place_bid(1, 30)


def test_resolve_auction_transfers_tile(basic_game):
    """Winner pays the bid, not the listed cost."""
    auction = basic_game.start_auction(39)
    basic_game.place_bid(0, 150)
    basic_game.place_bid(1, 160)
    basic_game.pass_auction(0)

    basic_game.resolve_auction(auction)

    assert basic_game.board.ownership_of(39).owner_id == 1
    assert basic_game.players[1].cash == 1340
    assert basic_game.players[0].cash == 1500
    assert not basic_game.bank.has_tile(39)


def test_cannot_auction_owned_tile(basic_game):
    basic_game.buy_property(0, 1)

    with pytest.raises(InvalidActionError):
        basic_game.start_auction(1)
