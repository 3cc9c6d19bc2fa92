"""
Event logging and the non-player cash holders: the Bank and the Free Parking pot.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Set

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of game events."""

    GAME_START = "game_start"
    TURN_ADVANCE = "turn_advance"
    DICE_ROLL = "dice_roll"
    MOVE = "move"
    PASS_GO = "pass_go"
    LAND = "land"

    PURCHASE = "purchase"
    AUCTION_START = "auction_start"
    AUCTION_BID = "auction_bid"
    AUCTION_END = "auction_end"

    RENT_PAYMENT = "rent_payment"
    TAX_PAYMENT = "tax_payment"
    FREE_PARKING_PAYOUT = "free_parking_payout"

    CARD_DRAW = "card_draw"
    CARD_EFFECT = "card_effect"

    UPGRADE = "upgrade"
    DOWNGRADE = "downgrade"
    MORTGAGE = "mortgage"
    UNMORTGAGE = "unmortgage"

    DECISION_REQUESTED = "decision_requested"
    DECISION_MADE = "decision_made"

    GO_TO_JAIL = "go_to_jail"
    JAIL_ATTEMPT = "jail_attempt"
    JAIL_RELEASE = "jail_release"

    TRANSFER = "transfer"
    LIQUIDATION = "liquidation"
    BANKRUPTCY = "bankruptcy"
    GAME_END = "game_end"


@dataclass
class GameEvent:
    """A logged event in the game."""

    event_type: EventType
    player_id: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        player_str = f"P{self.player_id}" if self.player_id is not None else "System"
        return f"[{player_str}] {self.event_type.value}: {self.details}"


class EventLog:
    """Manages the game event log."""

    def __init__(self):
        self.events: List[GameEvent] = []

    def log(
        self, event_type: EventType, player_id: Optional[int] = None, details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log a game event."""
        event = GameEvent(event_type, player_id, details if details is not None else {})
        self.events.append(event)
        logger.debug("%r", event)

    def get_events(self) -> List[GameEvent]:
        """Get all logged events."""
        return self.events.copy()

    def get_recent_events(self, count: int = 10) -> List[GameEvent]:
        """Get the most recent N events."""
        return self.events[-count:]

    def of_type(self, event_type: EventType) -> List[GameEvent]:
        return [e for e in self.events if e.event_type == event_type]

    def clear(self) -> None:
        """Clear the event log."""
        self.events.clear()


class Bank:
    """
    Counterparty of last resort.

    The bank pays salaries and mortgage advances and collects purchase and
    upgrade costs. Its reserve is allowed to go negative. It also holds the
    inventory of purchasable tiles nobody owns yet.
    """

    account_id = "bank"

    def __init__(self, inventory: Iterable[int] = (), cash: int = 0):
        self.cash = cash
        self.inventory: Set[int] = set(inventory)

    def deposit(self, amount: int) -> None:
        self.cash += amount

    def withdraw(self, amount: int) -> None:
        self.cash -= amount

    def has_tile(self, position: int) -> bool:
        return position in self.inventory

    def release_tile(self, position: int) -> None:
        """Remove a tile from inventory when a player acquires it."""
        self.inventory.discard(position)

    def reclaim_tile(self, position: int) -> None:
        """Return a tile to inventory (bankruptcy to the bank)."""
        self.inventory.add(position)

    def __repr__(self) -> str:
        return f"Bank(cash={self.cash}, inventory={len(self.inventory)})"


class FreeParkingPot:
    """Ownerless accumulator fed by taxes and fees, emptied on Free Parking."""

    account_id = "free_parking"

    def __init__(self, cash: int = 0):
        self.cash = cash

    def deposit(self, amount: int) -> None:
        self.cash += amount

    def withdraw(self, amount: int) -> None:
        self.cash -= amount

    def __repr__(self) -> str:
        return f"FreeParkingPot(cash={self.cash})"
