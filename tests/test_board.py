"""
Tests for the board: tile sequence, walking and ownership queries.
"""

import pytest

from tycoon.board import Board
from tycoon.exceptions import ConfigurationError
from tycoon.tiles import GoTile, RentableTile, TileKind, UtilityTile


def test_default_board_shape():
    board = Board()

    assert len(board) == 40
    assert isinstance(board.tile_at(0), GoTile)
    assert board.jail_tile().position == 10
    assert board.tile_at(30).kind == TileKind.SEND_TO_JAIL
    assert board.tile_at(20).kind == TileKind.FREE_PARKING


def test_tile_at_wraps():
    board = Board()

    assert board.tile_at(40) is board.tile_at(0)
    assert board.tile_at(43) is board.tile_at(3)


def test_path_forward_and_backward():
    board = Board()

    assert board.path(37, 5) == [38, 39, 0, 1, 2]
    assert board.path(2, -3) == [1, 0, 39]
    assert board.path(5, 0) == []


def test_distance_forward():
    board = Board()

    assert board.distance_forward(36, 0) == 4
    assert board.distance_forward(6, 24) == 18
    # Same tile means a full lap
    assert board.distance_forward(7, 7) == 40


def test_color_groups():
    board = Board()

    assert board.color_groups["brown"] == [1, 3]
    assert [t.name for t in board.tiles_by_color_group("dark_blue")] == ["Park Lane", "Mayfair"]


def test_monopoly_owner():
    """Owner id only when every tile in the group has the same owner."""
    board = Board()
    old_kent = board.tile_at(1)

    assert board.monopoly_owner(old_kent) is None

    board.ownership_of(1).owner_id = 0
    assert board.monopoly_owner(old_kent) is None

    board.ownership_of(3).owner_id = 0
    assert board.monopoly_owner(old_kent) == 0

    board.ownership_of(3).owner_id = 1
    assert board.monopoly_owner(old_kent) is None


def test_monopoly_owner_outside_colour_group():
    board = Board()
    assert board.monopoly_owner(board.tile_at(12)) is None


def test_tiles_owned_by_filters_kind():
    board = Board()
    board.ownership_of(1).owner_id = 0
    board.ownership_of(12).owner_id = 0
    board.ownership_of(28).owner_id = 1

    owned = board.tiles_owned_by(0)
    assert [t.position for t in owned] == [1, 12]
    utilities = board.tiles_owned_by(0, TileKind.UTILITY)
    assert len(utilities) == 1
    assert isinstance(utilities[0], UtilityTile)


def test_ownership_only_for_purchasable_tiles():
    board = Board()

    assert board.ownership_of(0) is None
    assert board.ownership_of(4) is None
    assert board.ownership_of(1).upgrades is not None
    assert board.ownership_of(12).upgrades is None
    assert len(board.purchasable_positions()) == 24


def test_group_state_queries():
    board = Board()

    assert not board.group_has_upgrades("brown")
    board.ownership_of(1).upgrades.upgrade()
    assert board.group_has_upgrades("brown")

    assert not board.group_has_mortgages("brown")
    board.ownership_of(3).is_mortgaged = True
    assert board.group_has_mortgages("brown")


def test_singleton_tile_of_kind():
    board = Board()

    assert board.singleton_tile_of_kind(TileKind.GO).position == 0
    with pytest.raises(ConfigurationError):
        board.singleton_tile_of_kind(TileKind.RENTABLE)


def test_rentable_tile_tables():
    board = Board()
    mayfair = board.tile_at(39)

    assert isinstance(mayfair, RentableTile)
    assert mayfair.rent == (50, 200, 600, 1400, 1700, 2000)
    assert mayfair.mortgage_value == 200


def test_ownership_rank_and_clear():
    ownership = Board().ownership_of(1)
    ownership.owner_id = 0
    ownership.is_mortgaged = True
    ownership.upgrades.upgrade()

    assert ownership.rank == 1
    assert ownership.is_upgraded

    ownership.clear()

    assert not ownership.is_owned()
    assert not ownership.is_mortgaged
    assert ownership.rank == 0
    assert Board().ownership_of(12).rank == 0
