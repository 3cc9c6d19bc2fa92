"""
Opportunity and Potluck card system.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from tycoon.layout import CardConfig


class CardType(Enum):
    """Types of card effects."""

    COLLECT = "collect"
    PAY = "pay"
    PAY_PER_UPGRADE = "pay_per_upgrade"
    COLLECT_FROM_PLAYERS = "collect_from_players"
    PAY_TO_PLAYERS = "pay_to_players"
    MOVE_TO = "move_to"
    MOVE_SPACES = "move_spaces"
    GO_TO_JAIL = "go_to_jail"
    GET_OUT_OF_JAIL = "get_out_of_jail"


@dataclass(eq=False)
class Card:
    """An opportunity or potluck card. Identity matters: decks hold each card once."""

    description: str
    card_type: CardType
    value: int = 0
    # Hotel charge for PAY_PER_UPGRADE
    value2: int = 0
    target_position: Optional[int] = None
    collect_go: bool = True
    deck: str = "opportunity"

    @classmethod
    def from_config(cls, config: CardConfig, deck: str) -> "Card":
        return cls(
            description=config.description,
            card_type=CardType(config.action),
            value=config.value,
            value2=config.value2,
            target_position=config.target_position,
            collect_go=config.collect_go,
            deck=deck,
        )

    def __repr__(self) -> str:
        return f"Card('{self.description}')"


class Deck:
    """
    A shuffled deck drawn without replacement.

    Drawn cards go to the discard pile; the discard pile is reshuffled back in
    only once the deck is exhausted, so no card repeats within a cycle.
    """

    def __init__(self, name: str, cards: Sequence[Card], rng: random.Random):
        self.name = name
        self.cards: List[Card] = list(cards)
        self.rng = rng
        self.discard_pile: List[Card] = []
        self.held_cards: List[Card] = []
        self.shuffle()

    def shuffle(self) -> None:
        """Shuffle the deck."""
        self.rng.shuffle(self.cards)

    def draw(self) -> Optional[Card]:
        """
        Draw the top card.

        Returns None only when every card is held by players.
        """
        if not self.cards:
            if not self.discard_pile:
                return None
            self.cards = self.discard_pile
            self.discard_pile = []
            self.shuffle()

        return self.cards.pop(0)

    def discard(self, card: Card) -> None:
        """Put a resolved card on the discard pile."""
        self.discard_pile.append(card)

    def hold_card(self, card: Card) -> None:
        """Mark a card as being held by a player (Get Out of Jail Free)."""
        self.held_cards.append(card)

    def return_held_card(self, card: Card) -> None:
        """Return a held card to the discard pile."""
        if card in self.held_cards:
            self.held_cards.remove(card)
        self.discard(card)

    def __len__(self) -> int:
        return len(self.cards)


def create_deck(name: str, configs: Sequence[CardConfig], rng: random.Random) -> Deck:
    """Build and shuffle a deck from card configuration."""
    return Deck(name, [Card.from_config(c, name) for c in configs], rng)
