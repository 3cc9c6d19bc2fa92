"""
Tests for the upgrade rank of rentable tiles.
"""

import pytest

from tycoon.property import MAX_RANK, Property

COSTS = [50, 50, 50, 50, 50]


def test_new_property_is_unimproved():
    prop = Property(COSTS)

    assert prop.rank == 0
    assert not prop.is_upgraded
    assert prop.name == "Unimproved"
    assert prop.value == 0


def test_upgrade_bounds():
    """Rank never exceeds 5; upgrade at hotel is rejected."""
    prop = Property(COSTS)

    for _ in range(MAX_RANK):
        assert prop.upgrade()

    assert prop.rank == MAX_RANK
    assert prop.has_hotel
    assert prop.name == "Hotel"
    assert not prop.upgrade()
    assert prop.rank == MAX_RANK
    assert prop.upgrade_cost == 0


def test_downgrade_bounds():
    """Rank never drops below 0; downgrade at rank 0 is rejected."""
    prop = Property(COSTS)

    assert not prop.downgrade()
    assert prop.rank == 0
    assert prop.downgrade_value == 0


def test_pricing_follows_rank():
    prop = Property([10, 20, 30, 40, 50])

    assert prop.upgrade_cost == 10
    prop.upgrade()
    prop.upgrade()

    assert prop.rank == 2
    assert prop.upgrade_cost == 30
    # Selling rank 2 refunds half of what it cost
    assert prop.downgrade_value == 10
    assert prop.value == 30


def test_reset():
    prop = Property(COSTS, rank=3)
    prop.reset()
    assert prop.rank == 0


@pytest.mark.parametrize("costs,rank", [([50] * 4, 0), (COSTS, 6), (COSTS, -1)])
def test_invalid_construction(costs, rank):
    with pytest.raises(ValueError):
        Property(costs, rank)
