"""
Auction system for tiles a player chose not to buy outright.
"""

from typing import Dict, List, Optional

from tycoon.money import EventLog, EventType


class Auction:
    """
    Manages an auction for a tile.
    Players bid until all but one have passed. With no bids the tile
    stays with the bank.
    """

    def __init__(
        self,
        property_position: int,
        property_name: str,
        eligible_player_ids: List[int],
        event_log: EventLog,
    ):
        self.property_position = property_position
        self.property_name = property_name
        self.eligible_player_ids = eligible_player_ids.copy()
        self.active_bidders = set(eligible_player_ids)
        self.current_bid = 0
        self.high_bidder: Optional[int] = None
        self.bids: Dict[int, int] = {}
        self.event_log = event_log
        self.is_complete = False

        self.event_log.log(
            EventType.AUCTION_START,
            details={
                "property": property_name,
                "position": property_position,
                "players": eligible_player_ids,
            },
        )

    def place_bid(self, player_id: int, amount: int) -> bool:
        """
        Place a bid for a player.
        Returns True if bid is accepted, False if invalid.
        """
        if self.is_complete:
            return False

        if player_id not in self.active_bidders:
            return False

        if amount <= self.current_bid:
            return False

        self.current_bid = amount
        self.high_bidder = player_id
        self.bids[player_id] = amount

        self.event_log.log(
            EventType.AUCTION_BID,
            player_id=player_id,
            details={"property": self.property_name, "amount": amount},
        )

        return True

    def pass_turn(self, player_id: int) -> None:
        """Player passes on bidding."""
        if player_id in self.active_bidders:
            self.active_bidders.remove(player_id)
            self._check_completion()

    def close(self) -> None:
        """End bidding now; the current high bidder, if any, wins."""
        if not self.is_complete:
            self._finish()

    def _check_completion(self) -> None:
        """Complete once no one is left to outbid the leader."""
        if not self.active_bidders:
            self._finish()
        elif len(self.active_bidders) == 1 and self.high_bidder in self.active_bidders:
            self._finish()

    def _finish(self) -> None:
        self.is_complete = True
        self.event_log.log(
            EventType.AUCTION_END,
            player_id=self.high_bidder,
            details={
                "property": self.property_name,
                "position": self.property_position,
                "winning_bid": self.current_bid,
                "winner": self.high_bidder,
            },
        )

    def get_winner(self) -> Optional[int]:
        """Get the winning player ID, or None if auction incomplete or no bids."""
        if not self.is_complete:
            return None
        return self.high_bidder

    def get_winning_bid(self) -> int:
        """Get the winning bid amount."""
        return self.current_bid
