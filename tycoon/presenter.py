"""
Presentation collaborator interface.

The engine reports transfers, moves and cards to the presenter purely for
display. Two hooks gate the turn: ``close_prompt`` and ``run_auction`` hand
the presenter a completion callback, and the turn advances only when the
presenter calls it (for example once a closing animation finishes).

The base class completes everything immediately, which is what a headless
game or a test wants.
"""

from typing import TYPE_CHECKING, Callable, List

if TYPE_CHECKING:
    from tycoon.auction import Auction
    from tycoon.cards import Card
    from tycoon.game import PendingDecision
    from tycoon.ledger import Transfer
    from tycoon.player import PlayerState

Callback = Callable[[], None]


class Presenter:
    """No-op presenter. Subclass and override what the UI needs."""

    def on_transfer(self, transfer: "Transfer") -> None:
        """Cash moved; play a deposit/withdraw effect."""

    def on_move(self, player: "PlayerState", path: List[int]) -> None:
        """Token moved through ``path`` (last entry is where it stopped)."""

    def on_card(self, player: "PlayerState", card: "Card") -> None:
        """A card was drawn and is about to be applied."""

    def on_turn(self, player: "PlayerState") -> None:
        """Control passed to ``player``; request a roll."""

    def show_decision(self, decision: "PendingDecision") -> None:
        """Show the choices; the UI answers via ``GameState.resolve_decision``."""

    def close_prompt(self, on_complete: Callback) -> None:
        """Close the decision prompt, then call ``on_complete`` exactly once."""
        on_complete()

    def run_auction(self, auction: "Auction", on_complete: Callback) -> None:
        """
        Collect bids for ``auction``, then call ``on_complete`` exactly once.

        Bids may be placed directly on the auction or through
        ``GameState.place_bid``/``pass_auction``; calling ``on_complete``
        closes any bidding still open.
        """
        on_complete()
