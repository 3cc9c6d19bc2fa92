"""
Player state and tile ownership.
"""

from dataclasses import dataclass
from typing import Optional

from tycoon.property import Property


class PlayerState:
    """Represents the complete state of a player in the game."""

    def __init__(self, player_id: int, name: str, starting_cash: int, is_computer: bool = False):
        self.player_id = player_id
        self.name = name
        self.cash = starting_cash
        self.position = 0
        self.has_passed_go = False
        self.in_jail = False
        self.jail_turns = 0
        self.get_out_of_jail_cards: list = []
        self.is_bankrupt = False
        self.is_computer = is_computer
        self.properties: set[int] = set()
        self.consecutive_doubles = 0

    @property
    def account_id(self) -> int:
        return self.player_id

    def deposit(self, amount: int) -> None:
        self.cash += amount

    def withdraw(self, amount: int) -> None:
        self.cash -= amount

    def __repr__(self) -> str:
        return (
            f"PlayerState(id={self.player_id}, name='{self.name}', "
            f"cash={self.cash}, position={self.position}, bankrupt={self.is_bankrupt})"
        )


@dataclass
class PropertyOwnership:
    """Tracks ownership state of a purchasable tile."""

    owner_id: Optional[int] = None
    is_mortgaged: bool = False
    # Only rentable tiles carry an upgrade rank
    upgrades: Optional[Property] = None

    def is_owned(self) -> bool:
        """Check if the tile is owned by any player."""
        return self.owner_id is not None

    @property
    def rank(self) -> int:
        return self.upgrades.rank if self.upgrades is not None else 0

    @property
    def is_upgraded(self) -> bool:
        return self.upgrades is not None and self.upgrades.is_upgraded

    def clear(self) -> None:
        """Back to bank-held: no owner, no mortgage, unimproved."""
        self.owner_id = None
        self.is_mortgaged = False
        if self.upgrades is not None:
            self.upgrades.reset()


class Player:
    """
    Convenience wrapper for player information.
    This is primarily for the external API.
    """

    def __init__(self, player_id: int, name: str, is_computer: bool = False):
        self.player_id = player_id
        self.name = name
        self.is_computer = is_computer

    def __repr__(self) -> str:
        return f"Player(id={self.player_id}, name='{self.name}')"
