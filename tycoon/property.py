"""
Upgrade rank of a rentable tile.

Ranks run from 0 (unimproved) through 1-4 (houses) to 5 (hotel).
"""

from typing import Sequence, Tuple

MAX_RANK = 5
RANK_NAMES = ("Unimproved", "1 House", "2 Houses", "3 Houses", "4 Houses", "Hotel")


class Property:
    """Per-tile upgrade state. Changes one rank at a time."""

    def __init__(self, upgrade_costs: Sequence[int], rank: int = 0):
        if len(upgrade_costs) != MAX_RANK:
            raise ValueError(f"Expected {MAX_RANK} upgrade costs, got {len(upgrade_costs)}")
        if not 0 <= rank <= MAX_RANK:
            raise ValueError(f"Rank must be in 0..{MAX_RANK}, got {rank}")
        self.upgrade_costs: Tuple[int, ...] = tuple(upgrade_costs)
        self.rank = rank

    @property
    def is_upgraded(self) -> bool:
        return self.rank > 0

    @property
    def has_hotel(self) -> bool:
        return self.rank == MAX_RANK

    @property
    def can_upgrade(self) -> bool:
        return self.rank < MAX_RANK

    @property
    def can_downgrade(self) -> bool:
        return self.rank > 0

    @property
    def upgrade_cost(self) -> int:
        """Cost of the next rank, 0 at hotel."""
        if not self.can_upgrade:
            return 0
        return self.upgrade_costs[self.rank]

    @property
    def downgrade_value(self) -> int:
        """Refund for selling the current rank: half of what it cost."""
        if not self.can_downgrade:
            return 0
        return self.upgrade_costs[self.rank - 1] // 2

    @property
    def value(self) -> int:
        """Total paid for the ranks currently built."""
        return sum(self.upgrade_costs[: self.rank])

    @property
    def name(self) -> str:
        return RANK_NAMES[self.rank]

    def upgrade(self) -> bool:
        if not self.can_upgrade:
            return False
        self.rank += 1
        return True

    def downgrade(self) -> bool:
        if not self.can_downgrade:
            return False
        self.rank -= 1
        return True

    def reset(self) -> None:
        self.rank = 0

    def __repr__(self) -> str:
        return f"Property(rank={self.rank})"
