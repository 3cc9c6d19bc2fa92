"""
Main game engine and turn state machine.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from tycoon.auction import Auction
from tycoon.board import Board
from tycoon.cards import Card, CardType, Deck, create_deck
from tycoon.config import GameConfig
from tycoon.dice import Dice, DiceRoll
from tycoon.exceptions import ConfigurationError, InvalidActionError
from tycoon.layout import BoardLayout, default_layout
from tycoon.ledger import Ledger
from tycoon.money import Bank, EventLog, EventType, FreeParkingPot
from tycoon.player import Player, PlayerState
from tycoon.presenter import Presenter
from tycoon.tiles import (
    ADVANCE,
    AwaitDecision,
    DecisionKind,
    Directive,
    PurchasableTile,
    RentableTile,
    TileContext,
)

logger = logging.getLogger(__name__)

MAX_PLAYERS = 8


class TurnPhase(Enum):
    """Where the turn state machine is waiting."""

    AWAITING_ROLL = "awaiting_roll"
    MOVING = "moving"
    RESOLVING = "resolving"
    AWAITING_DECISION = "awaiting_decision"
    AWAITING_ANIMATION = "awaiting_animation"
    GAME_OVER = "game_over"


class Choice(Enum):
    """Answers a decision prompt can give."""

    BUY = "buy"
    AUCTION = "auction"
    UPGRADE = "upgrade"
    DOWNGRADE = "downgrade"
    MORTGAGE = "mortgage"
    UNMORTGAGE = "unmortgage"
    DECLINE = "decline"


@dataclass
class PendingDecision:
    """An open prompt: which player, which tile, and which choices are enabled."""

    player_id: int
    position: int
    kind: DecisionKind
    options: Dict[Choice, bool] = field(default_factory=dict)

    def is_enabled(self, choice: Choice) -> bool:
        return self.options.get(choice, False)

    def enabled_choices(self) -> List[Choice]:
        return [choice for choice, enabled in self.options.items() if enabled]


class GameState:
    """
    Represents the complete state of a Tycoon game.

    This is the turn coordinator: it rolls, moves tokens, dispatches tile
    landings, holds the game while a decision or animation is pending and
    advances the turn through :meth:`advance_turn` only.
    """

    def __init__(
        self,
        config: GameConfig,
        players: Sequence[Player],
        layout: Optional[BoardLayout] = None,
        presenter: Optional[Presenter] = None,
        dice: Optional[Dice] = None,
    ):
        self.config = config
        self.layout = layout if layout is not None else default_layout()
        self.board = Board(self.layout)
        self.event_log = EventLog()
        self.ledger = Ledger(self.event_log)
        self.bank = Bank(self.board.purchasable_positions())
        self.free_parking = FreeParkingPot()
        self.presenter = presenter if presenter is not None else Presenter()
        self.ledger.subscribe(self.presenter.on_transfer)

        self.rng = random.Random(config.seed)
        self.dice = dice if dice is not None else Dice(self.rng)

        self.players: Dict[int, PlayerState] = {}
        for player in players:
            self.players[player.player_id] = PlayerState(
                player.player_id, player.name, config.starting_cash, player.is_computer
            )
        self.turn_order: List[int] = sorted(self.players)

        self.decks: Dict[str, Deck] = {
            "opportunity": create_deck("opportunity", self.layout.opportunity, self.rng),
            "potluck": create_deck("potluck", self.layout.potluck, self.rng),
        }

        self.current_player_index = 0
        self.turn_number = 0
        self.advances = 0
        self.phase = TurnPhase.AWAITING_ROLL
        self.pending_decision: Optional[PendingDecision] = None
        self.active_auction: Optional[Auction] = None
        self.last_roll: Optional[DiceRoll] = None
        self.game_over = False
        self.winner: Optional[int] = None
        self._completion_serial = 0

        self.event_log.log(
            EventType.GAME_START,
            details={
                "players": [p.name for p in players],
                "starting_cash": config.starting_cash,
                "seed": config.seed,
            },
        )
        logger.info(f"Game started with {len(self.players)} players (seed={config.seed})")

    # === QUERIES ===

    def get_current_player(self) -> PlayerState:
        """Get the current active player."""
        return self.players[self.turn_order[self.current_player_index % len(self.turn_order)]]

    def get_active_players(self) -> List[PlayerState]:
        """Get all non-bankrupt players."""
        return [self.players[pid] for pid in self.turn_order if not self.players[pid].is_bankrupt]

    def _context(self) -> TileContext:
        return TileContext(
            board=self.board,
            ledger=self.ledger,
            bank=self.bank,
            pot=self.free_parking,
            config=self.config,
            event_log=self.event_log,
            players=self.players,
            roll=self.last_roll,
            draw_card=self._draw_card_for,
            send_to_jail=lambda player: self.send_to_jail(player.player_id),
        )

    def _require_phase(self, *phases: TurnPhase) -> None:
        if self.phase not in phases:
            expected = ", ".join(p.value for p in phases)
            raise InvalidActionError(f"Game is {self.phase.value}, expected {expected}")

    def calculate_rent(self, position: int, roll: Optional[DiceRoll] = None) -> int:
        """
        Rent a non-owner would pay for landing on ``position`` right now.

        Args:
            position: Tile position
            roll: Dice roll for utilities (defaults to the last roll)

        Returns:
            Rent amount; 0 for unowned, mortgaged or non-purchasable tiles
        """
        tile = self.board.tile_at(position)
        ownership = self.board.ownership_of(position)
        if not isinstance(tile, PurchasableTile) or not ownership.is_owned() or ownership.is_mortgaged:
            return 0
        ctx = self._context()
        if roll is not None:
            ctx.roll = roll
        return tile.rent_due(self.players[ownership.owner_id], ctx)

    # === TURN FLOW ===

    def roll_dice(self) -> DiceRoll:
        """
        Roll for the current player and resolve the move.

        A jailed player's roll is a release attempt. Doubles earn another
        roll after the landing resolves; too many in a row send the player
        to jail.
        """
        self._require_phase(TurnPhase.AWAITING_ROLL)
        player = self.get_current_player()

        roll = self.dice.roll()
        self.last_roll = roll
        self.event_log.log(
            EventType.DICE_ROLL,
            player_id=player.player_id,
            details={"die1": roll.die1, "die2": roll.die2, "total": roll.total, "doubles": roll.is_doubles},
        )

        if player.in_jail:
            self._jail_roll(player, roll)
            return roll

        if roll.is_doubles:
            player.consecutive_doubles += 1
            if player.consecutive_doubles >= self.config.max_consecutive_doubles:
                self.phase = TurnPhase.RESOLVING
                self.send_to_jail(player.player_id)
                self.advance_turn()
                return roll
        else:
            player.consecutive_doubles = 0

        self._move_and_resolve(player, roll.total)
        return roll

    def _jail_roll(self, player: PlayerState, roll: DiceRoll) -> None:
        player.jail_turns += 1
        self.event_log.log(
            EventType.JAIL_ATTEMPT,
            player_id=player.player_id,
            details={"attempt": player.jail_turns, "doubles": roll.is_doubles},
        )

        if roll.is_doubles:
            self._release_from_jail(player, "doubles")
        elif player.jail_turns >= self.config.max_jail_turns:
            self.ledger.transfer(player, self._fee_account(), self.config.jail_fine, "jail_fine")
            self._release_from_jail(player, "forced_fine")
        else:
            self.phase = TurnPhase.RESOLVING
            self.advance_turn()
            return

        # Leaving jail never earns an extra roll
        player.consecutive_doubles = 0
        self._move_and_resolve(player, roll.total)

    def _move_and_resolve(self, player: PlayerState, steps: int) -> None:
        directive = self._walk(player, steps)
        self._handle_directive(player, directive)

    def move_player(self, player_id: int, steps: int) -> Directive:
        """
        Walk a player ``steps`` tiles (negative walks backwards).

        Every tile crossed gets ``on_passed``; the destination gets
        ``on_landed``. Returns the landing directive without acting on it.
        """
        return self._walk(self.players[player_id], steps)

    def move_player_to(self, player_id: int, position: int, collect_go: bool = True) -> Directive:
        """Walk forwards to ``position``, or jump there when ``collect_go`` is off."""
        player = self.players[player_id]
        if not collect_go:
            old_position = player.position
            player.position = position % len(self.board)
            self._log_move(player, old_position, [player.position], direct=True)
            return self._land(player)
        return self._walk(player, self.board.distance_forward(player.position, position))

    def _walk(self, player: PlayerState, steps: int) -> Directive:
        self.phase = TurnPhase.MOVING
        old_position = player.position
        path = self.board.path(player.position, steps)
        ctx = self._context()
        for position in path[:-1]:
            player.position = position
            self.board.tile_at(position).on_passed(player, ctx)
        if path:
            player.position = path[-1]
        self._log_move(player, old_position, path, direct=False)
        return self._land(player)

    def _log_move(self, player: PlayerState, old_position: int, path: List[int], direct: bool) -> None:
        self.event_log.log(
            EventType.MOVE,
            player_id=player.player_id,
            details={"from": old_position, "to": player.position, "spaces": len(path), "direct": direct},
        )
        self.presenter.on_move(player, path)

    def _land(self, player: PlayerState) -> Directive:
        self.phase = TurnPhase.RESOLVING
        tile = self.board.tile_at(player.position)
        self.event_log.log(
            EventType.LAND,
            player_id=player.player_id,
            details={"position": tile.position, "space": tile.name, "kind": tile.kind.value},
        )
        return tile.on_landed(player, self._context())

    def _handle_directive(self, player: PlayerState, directive: Directive) -> None:
        if isinstance(directive, AwaitDecision):
            self._open_decision(directive)
        else:
            self._finish_landing()

    def _finish_landing(self) -> None:
        self._settle_debts()
        if not self.game_over:
            self.advance_turn()

    def advance_turn(self) -> None:
        """
        Hand control to whoever rolls next.

        The player keeps the dice after doubles (unless jailed or bankrupt);
        otherwise the next non-bankrupt player in seat order is up.

        Raises:
            InvalidActionError: if no landing is being resolved.
        """
        self._require_phase(TurnPhase.RESOLVING, TurnPhase.AWAITING_ANIMATION)
        player = self.get_current_player()
        extra_roll = (
            self.last_roll is not None
            and self.last_roll.is_doubles
            and player.consecutive_doubles > 0
            and not player.in_jail
            and not player.is_bankrupt
        )

        self.advances += 1
        self.pending_decision = None
        self.active_auction = None
        self.last_roll = None
        self.phase = TurnPhase.AWAITING_ROLL

        if not extra_roll:
            player.consecutive_doubles = 0
            for _ in range(len(self.turn_order)):
                self.current_player_index = (self.current_player_index + 1) % len(self.turn_order)
                if not self.get_current_player().is_bankrupt:
                    break
            self.turn_number += 1

        next_player = self.get_current_player()
        self.event_log.log(
            EventType.TURN_ADVANCE,
            player_id=next_player.player_id,
            details={"turn": self.turn_number, "extra_roll": extra_roll},
        )

        if self.config.time_limit_turns and self.turn_number >= self.config.time_limit_turns:
            self.end_by_time_limit()
            return

        self.presenter.on_turn(next_player)

    # === DECISIONS ===

    def _open_decision(self, directive: AwaitDecision) -> None:
        options = self._decision_options(directive.player_id, directive.position, directive.kind)
        self.pending_decision = PendingDecision(directive.player_id, directive.position, directive.kind, options)
        self.phase = TurnPhase.AWAITING_DECISION
        self.event_log.log(
            EventType.DECISION_REQUESTED,
            player_id=directive.player_id,
            details={
                "position": directive.position,
                "kind": directive.kind.value,
                "choices": [c.value for c in self.pending_decision.enabled_choices()],
            },
        )
        self.presenter.show_decision(self.pending_decision)

    def _decision_options(self, player_id: int, position: int, kind: DecisionKind) -> Dict[Choice, bool]:
        if kind == DecisionKind.PURCHASE:
            return {
                Choice.BUY: self.can_buy(player_id, position),
                Choice.AUCTION: True,
                Choice.DECLINE: True,
            }
        return {
            Choice.UPGRADE: self.can_upgrade(player_id, position),
            Choice.DOWNGRADE: self.can_downgrade(player_id, position),
            Choice.MORTGAGE: self.can_mortgage(player_id, position),
            Choice.UNMORTGAGE: self.can_unmortgage(player_id, position),
            Choice.DECLINE: True,
        }

    def resolve_decision(self, choice: Choice, player_id: Optional[int] = None) -> bool:
        """
        Answer the open decision prompt.

        A disabled choice, or an answer from the wrong player, is rejected
        with no state change and the prompt stays open.

        Returns:
            True if the choice was accepted
        """
        self._require_phase(TurnPhase.AWAITING_DECISION)
        decision = self.pending_decision
        if player_id is not None and player_id != decision.player_id:
            return False
        if not decision.is_enabled(choice):
            return False

        self.event_log.log(
            EventType.DECISION_MADE,
            player_id=decision.player_id,
            details={"position": decision.position, "choice": choice.value},
        )

        if choice == Choice.AUCTION:
            self.phase = TurnPhase.AWAITING_ANIMATION
            self.presenter.close_prompt(
                self._completion(lambda: self._start_auction_flow(decision.position))
            )
            return True

        actions: Dict[Choice, Callable[[int, int], bool]] = {
            Choice.BUY: self.buy_property,
            Choice.UPGRADE: self.upgrade_property,
            Choice.DOWNGRADE: self.downgrade_property,
            Choice.MORTGAGE: self.mortgage_property,
            Choice.UNMORTGAGE: self.unmortgage_property,
        }
        if choice in actions:
            actions[choice](decision.player_id, decision.position)

        self.phase = TurnPhase.AWAITING_ANIMATION
        self.presenter.close_prompt(self._completion(self._finish_landing))
        return True

    def _completion(self, then: Callable[[], None]) -> Callable[[], None]:
        """Wrap a presenter callback so it only runs once, and only while current."""
        self._completion_serial += 1
        serial = self._completion_serial

        def on_complete() -> None:
            if serial != self._completion_serial or self.phase != TurnPhase.AWAITING_ANIMATION:
                raise InvalidActionError("Stale or repeated completion callback")
            self._completion_serial += 1
            then()

        return on_complete

    # === AUCTIONS ===

    def start_auction(self, position: int) -> Auction:
        """Start an auction for a bank-held tile among all active players."""
        tile = self.board.tile_at(position)
        if not isinstance(tile, PurchasableTile) or not self.bank.has_tile(position):
            raise InvalidActionError(f"{tile.name} is not for sale")
        eligible = [p.player_id for p in self.get_active_players()]
        auction = Auction(position, tile.name, eligible, self.event_log)
        self.active_auction = auction
        return auction

    def _start_auction_flow(self, position: int) -> None:
        auction = self.start_auction(position)
        self.phase = TurnPhase.AWAITING_ANIMATION
        self.presenter.run_auction(auction, self._completion(lambda: self._auction_complete(auction)))

    def _auction_complete(self, auction: Auction) -> None:
        auction.close()
        self.resolve_auction(auction)
        self._finish_landing()

    def place_bid(self, player_id: int, amount: int) -> bool:
        """Bid in the running auction; bids above the bidder's cash are refused."""
        auction = self.active_auction
        if auction is None or auction.is_complete:
            return False
        if amount > self.players[player_id].cash:
            return False
        return auction.place_bid(player_id, amount)

    def pass_auction(self, player_id: int) -> bool:
        auction = self.active_auction
        if auction is None or auction.is_complete:
            return False
        auction.pass_turn(player_id)
        return True

    def resolve_auction(self, auction: Auction) -> None:
        """
        Finalize an auction by transferring the tile and the winning bid.
        Winner pays the bid amount (not the board price).
        """
        if not auction.is_complete:
            return

        winner_id = auction.get_winner()
        if winner_id is None:
            # No bids - tile remains with the bank
            return

        self._acquire(self.players[winner_id], auction.property_position, auction.get_winning_bid(), "auction")

    # === PROPERTY ECONOMICS ===

    def _fee_account(self):
        return self.free_parking if self.config.free_parking_fees else self.bank

    def _owned_by(self, player_id: int, position: int) -> bool:
        ownership = self.board.ownership_of(position)
        return ownership is not None and ownership.owner_id == player_id

    def can_buy(self, player_id: int, position: int) -> bool:
        tile = self.board.tile_at(position)
        if not isinstance(tile, PurchasableTile):
            return False
        ownership = self.board.ownership_of(position)
        if ownership.is_owned() or not self.bank.has_tile(position):
            return False
        return self.players[player_id].cash >= tile.cost

    def buy_property(self, player_id: int, position: int) -> bool:
        """
        Player buys a tile from the bank at its listed cost.
        Returns True if successful, False otherwise.
        """
        if not self.can_buy(player_id, position):
            return False
        tile = self.board.tile_at(position)
        self._acquire(self.players[player_id], position, tile.cost, "purchase")
        return True

    def _acquire(self, player: PlayerState, position: int, price: int, reason: str) -> None:
        tile = self.board.tile_at(position)
        self.ledger.transfer(player, self.bank, price, f"{reason}:{tile.name}")
        self.bank.release_tile(position)
        self.board.ownership_of(position).owner_id = player.player_id
        player.properties.add(position)

        self.event_log.log(
            EventType.PURCHASE,
            player_id=player.player_id,
            details={
                "property": tile.name,
                "position": position,
                "price": price,
                "via": reason,
                "new_balance": player.cash,
            },
        )

    def _owned_group_ranks(self, player_id: int, color: str) -> List[int]:
        """Ranks of the group's tiles held by ``player_id``; even building compares only these."""
        return [
            self.board.ownership_of(pos).rank
            for pos in self.board.color_groups[color]
            if self._owned_by(player_id, pos)
        ]

    def can_upgrade(self, player_id: int, position: int) -> bool:
        """
        Check if a player can add a rank to a rentable tile.

        Requirements:
        - Player owns the tile and it is below hotel
        - Tile is not mortgaged
        - Player can afford the next rank
        - With ``upgrade_requires_monopoly``: owns the whole group, none mortgaged
        - With ``even_building``: tile is not ahead of the player's other tiles in the group
        """
        tile = self.board.tile_at(position)
        if not isinstance(tile, RentableTile) or not self._owned_by(player_id, position):
            return False

        ownership = self.board.ownership_of(position)
        prop = ownership.upgrades
        if ownership.is_mortgaged or not prop.can_upgrade:
            return False

        if self.config.upgrade_requires_monopoly:
            if self.board.monopoly_owner(tile) != player_id or self.board.group_has_mortgages(tile.color):
                return False

        if self.config.even_building:
            if prop.rank > min(self._owned_group_ranks(player_id, tile.color)):
                return False

        return self.players[player_id].cash >= prop.upgrade_cost

    def upgrade_property(self, player_id: int, position: int) -> bool:
        """
        Add one rank (house, or hotel on top of four houses).
        Returns True if successful, False otherwise.
        """
        if not self.can_upgrade(player_id, position):
            return False

        tile = self.board.tile_at(position)
        prop = self.board.ownership_of(position).upgrades
        player = self.players[player_id]
        cost = prop.upgrade_cost

        self.ledger.transfer(player, self.bank, cost, f"upgrade:{tile.name}")
        prop.upgrade()

        self.event_log.log(
            EventType.UPGRADE,
            player_id=player_id,
            details={
                "property": tile.name,
                "position": position,
                "cost": cost,
                "rank": prop.rank,
                "new_balance": player.cash,
            },
        )
        return True

    def can_downgrade(self, player_id: int, position: int) -> bool:
        tile = self.board.tile_at(position)
        if not isinstance(tile, RentableTile) or not self._owned_by(player_id, position):
            return False
        prop = self.board.ownership_of(position).upgrades
        if not prop.can_downgrade:
            return False
        if self.config.even_building:
            if prop.rank < max(self._owned_group_ranks(player_id, tile.color)):
                return False
        return True

    def downgrade_property(self, player_id: int, position: int) -> bool:
        """
        Sell one rank back to the bank for half its cost.
        Returns True if successful, False otherwise.
        """
        if not self.can_downgrade(player_id, position):
            return False

        tile = self.board.tile_at(position)
        prop = self.board.ownership_of(position).upgrades
        player = self.players[player_id]
        refund = prop.downgrade_value

        prop.downgrade()
        self.ledger.transfer(self.bank, player, refund, f"downgrade:{tile.name}")

        self.event_log.log(
            EventType.DOWNGRADE,
            player_id=player_id,
            details={
                "property": tile.name,
                "position": position,
                "refund": refund,
                "rank": prop.rank,
                "new_balance": player.cash,
            },
        )
        return True

    def mortgage_value(self, position: int) -> int:
        """Half the purchase cost; 0 while the tile carries upgrades."""
        tile = self.board.tile_at(position)
        ownership = self.board.ownership_of(position)
        if not isinstance(tile, PurchasableTile) or ownership.is_upgraded:
            return 0
        return tile.mortgage_value

    def can_mortgage(self, player_id: int, position: int) -> bool:
        if not self._owned_by(player_id, position):
            return False
        ownership = self.board.ownership_of(position)
        return not ownership.is_mortgaged and not ownership.is_upgraded

    def mortgage_property(self, player_id: int, position: int) -> bool:
        """
        Mortgage an unimproved tile to raise funds.
        Returns True if successful, False otherwise.
        """
        if not self.can_mortgage(player_id, position):
            return False

        tile = self.board.tile_at(position)
        value = self.mortgage_value(position)
        player = self.players[player_id]

        self.board.ownership_of(position).is_mortgaged = True
        self.ledger.transfer(self.bank, player, value, f"mortgage:{tile.name}")

        self.event_log.log(
            EventType.MORTGAGE,
            player_id=player_id,
            details={"property": tile.name, "position": position, "value": value, "new_balance": player.cash},
        )
        return True

    def unmortgage_cost(self, position: int) -> int:
        tile = self.board.tile_at(position)
        if not isinstance(tile, PurchasableTile):
            return 0
        return self.config.unmortgage_cost(tile.mortgage_value)

    def can_unmortgage(self, player_id: int, position: int) -> bool:
        if not self._owned_by(player_id, position):
            return False
        if not self.board.ownership_of(position).is_mortgaged:
            return False
        return self.players[player_id].cash >= self.unmortgage_cost(position)

    def unmortgage_property(self, player_id: int, position: int) -> bool:
        """
        Lift a mortgage by paying the mortgage value plus interest.
        Returns True if successful, False otherwise.
        """
        if not self.can_unmortgage(player_id, position):
            return False

        tile = self.board.tile_at(position)
        cost = self.unmortgage_cost(position)
        player = self.players[player_id]

        self.ledger.transfer(player, self.bank, cost, f"unmortgage:{tile.name}")
        self.board.ownership_of(position).is_mortgaged = False

        self.event_log.log(
            EventType.UNMORTGAGE,
            player_id=player_id,
            details={"property": tile.name, "position": position, "cost": cost, "new_balance": player.cash},
        )
        return True

    def tile_value(self, position: int) -> int:
        """Purchase cost plus upgrades, halved while mortgaged."""
        tile = self.board.tile_at(position)
        if not isinstance(tile, PurchasableTile):
            return 0
        ownership = self.board.ownership_of(position)
        value = tile.cost
        if ownership.upgrades is not None:
            value += ownership.upgrades.value
        if ownership.is_mortgaged:
            return value // 2
        return value

    def net_worth(self, player_id: int) -> int:
        """Cash plus the value of every owned tile."""
        player = self.players[player_id]
        return player.cash + sum(self.tile_value(pos) for pos in player.properties)

    # === CARDS ===

    def _draw_card_for(self, player: PlayerState, deck_name: str) -> Directive:
        return self.draw_card(deck_name, player.player_id)

    def draw_card(self, deck_name: str, player_id: Optional[int] = None) -> Directive:
        """Draw from ``opportunity`` or ``potluck`` and apply the card."""
        if deck_name not in self.decks:
            raise ConfigurationError(f"Unknown deck: {deck_name}")
        deck = self.decks[deck_name]
        player = self.players[player_id] if player_id is not None else self.get_current_player()

        card = deck.draw()
        if card is None:
            logger.warning(f"Deck {deck_name} has no cards to draw; all are held")
            return ADVANCE

        self.event_log.log(
            EventType.CARD_DRAW,
            player_id=player.player_id,
            details={"deck": deck_name, "card": card.description},
        )
        self.presenter.on_card(player, card)

        if card.card_type == CardType.GET_OUT_OF_JAIL:
            deck.hold_card(card)
        else:
            deck.discard(card)

        return self.execute_card(card, player.player_id)

    def execute_card(self, card: Card, player_id: int) -> Directive:
        """
        Apply a card to a player.

        Relocation cards resolve the destination's landing and return its
        directive, so a card can end in a purchase prompt.
        """
        player = self.players[player_id]

        self.event_log.log(
            EventType.CARD_EFFECT,
            player_id=player_id,
            details={"card": card.description, "type": card.card_type.value},
        )

        if card.card_type == CardType.MOVE_TO:
            return self.move_player_to(player_id, card.target_position, card.collect_go)

        if card.card_type == CardType.MOVE_SPACES:
            return self.move_player(player_id, card.value)

        if card.card_type == CardType.GO_TO_JAIL:
            self.send_to_jail(player_id)

        elif card.card_type == CardType.GET_OUT_OF_JAIL:
            player.get_out_of_jail_cards.append(card)

        elif card.card_type == CardType.COLLECT:
            self.ledger.transfer(self.bank, player, card.value, "card")

        elif card.card_type == CardType.PAY:
            self.ledger.transfer(player, self._fee_account(), card.value, "card")

        elif card.card_type == CardType.PAY_PER_UPGRADE:
            total = 0
            for pos in player.properties:
                ownership = self.board.ownership_of(pos)
                if ownership.upgrades is None:
                    continue
                if ownership.upgrades.has_hotel:
                    total += card.value2
                else:
                    total += card.value * ownership.rank
            self.ledger.transfer(player, self._fee_account(), total, "card")

        elif card.card_type == CardType.COLLECT_FROM_PLAYERS:
            for other in self.get_active_players():
                if other.player_id != player_id:
                    self.ledger.transfer(other, player, card.value, "card")

        elif card.card_type == CardType.PAY_TO_PLAYERS:
            for other in self.get_active_players():
                if other.player_id != player_id:
                    self.ledger.transfer(player, other, card.value, "card")

        return ADVANCE

    # === JAIL ===

    def send_to_jail(self, player_id: int) -> None:
        """Move a player straight to jail, without passing Go."""
        player = self.players[player_id]
        jail = self.board.jail_tile()
        old_position = player.position
        player.position = jail.position
        player.in_jail = True
        player.jail_turns = 0
        player.consecutive_doubles = 0

        self.event_log.log(EventType.GO_TO_JAIL, player_id=player_id)
        self._log_move(player, old_position, [jail.position], direct=True)

    def pay_jail_fine(self, player_id: int) -> bool:
        """
        Player pays the fine before rolling to leave jail.
        Returns True if successful, False otherwise.
        """
        self._require_phase(TurnPhase.AWAITING_ROLL)
        player = self.players[player_id]
        if player is not self.get_current_player() or not player.in_jail:
            return False
        if player.cash < self.config.jail_fine:
            return False

        self.ledger.transfer(player, self._fee_account(), self.config.jail_fine, "jail_fine")
        self._release_from_jail(player, "fine")
        return True

    def use_jail_card(self, player_id: int) -> bool:
        """
        Use a held Get Out of Jail Free card; it goes back to its deck.
        Returns True if successful, False if player has no card.
        """
        self._require_phase(TurnPhase.AWAITING_ROLL)
        player = self.players[player_id]
        if player is not self.get_current_player() or not player.in_jail:
            return False
        if not player.get_out_of_jail_cards:
            return False

        card = player.get_out_of_jail_cards.pop()
        self.decks[card.deck].return_held_card(card)
        self._release_from_jail(player, "card")
        return True

    def _release_from_jail(self, player: PlayerState, method: str) -> None:
        player.in_jail = False
        player.jail_turns = 0
        self.event_log.log(EventType.JAIL_RELEASE, player_id=player.player_id, details={"method": method})

    # === DEBT AND BANKRUPTCY ===

    def _settle_debts(self) -> None:
        for player in self.get_active_players():
            if player.cash < 0:
                self._liquidate(player)
            if player.cash < 0:
                self.declare_bankruptcy(player.player_id, self._creditor_of(player))
            if self.game_over:
                return

    def _creditor_of(self, player: PlayerState) -> Optional[int]:
        """The player owed by the most recent transfer that overdrew ``player``."""
        for record in reversed(self.ledger.history):
            if record.source is player and record.overdrawn:
                if isinstance(record.target, PlayerState) and not record.target.is_bankrupt:
                    return record.target.player_id
                return None
        return None

    def _liquidate(self, player: PlayerState) -> None:
        """Sell upgrades, then mortgage tiles, until cash is non-negative or nothing is left."""
        starting_cash = player.cash

        self._sell_upgrades(player, stop_when_solvent=True)

        while player.cash < 0:
            mortgageable = [pos for pos in player.properties if self.can_mortgage(player.player_id, pos)]
            if not mortgageable:
                break
            best = max(mortgageable, key=self.mortgage_value)
            self.mortgage_property(player.player_id, best)

        if player.cash != starting_cash:
            self.event_log.log(
                EventType.LIQUIDATION,
                player_id=player.player_id,
                details={"raised": player.cash - starting_cash, "new_balance": player.cash},
            )

    def _sell_upgrades(self, player: PlayerState, stop_when_solvent: bool) -> None:
        """Downgrade the most valuable sellable rank one at a time."""
        while not (stop_when_solvent and player.cash >= 0):
            sellable = [pos for pos in player.properties if self.can_downgrade(player.player_id, pos)]
            if not sellable:
                break
            best = max(sellable, key=lambda pos: self.board.ownership_of(pos).upgrades.downgrade_value)
            self.downgrade_property(player.player_id, best)

    def declare_bankruptcy(self, player_id: int, creditor_id: Optional[int] = None) -> None:
        """
        Remove a player who cannot cover a debt.

        Upgrades are sold to the bank at half cost. Tiles go to the creditor
        as they stand, or back to the bank unimproved and unmortgaged. Any
        remaining cash goes to the creditor; a shortfall is written off by
        the bank. Held jail cards return to their decks.
        """
        player = self.players[player_id]
        properties = sorted(player.properties)

        self._sell_upgrades(player, stop_when_solvent=False)

        creditor = self.players[creditor_id] if creditor_id is not None else None
        for pos in properties:
            ownership = self.board.ownership_of(pos)
            player.properties.discard(pos)
            if creditor is not None:
                ownership.owner_id = creditor.player_id
                creditor.properties.add(pos)
            else:
                ownership.clear()
                self.bank.reclaim_tile(pos)

        if player.cash > 0:
            self.ledger.transfer(player, creditor if creditor is not None else self.bank, player.cash, "bankruptcy")
        elif player.cash < 0:
            self.ledger.transfer(self.bank, player, -player.cash, "debt_written_off")

        for card in player.get_out_of_jail_cards:
            self.decks[card.deck].return_held_card(card)
        player.get_out_of_jail_cards = []
        player.in_jail = False
        player.is_bankrupt = True

        self.event_log.log(
            EventType.BANKRUPTCY,
            player_id=player_id,
            details={"creditor": creditor_id, "properties": properties},
        )
        logger.info(f"Player {player.name} is bankrupt (creditor={creditor_id})")

        active_players = self.get_active_players()
        if len(active_players) == 1:
            self._end_game(active_players[0].player_id, "last_player_standing")
        elif not active_players:
            self._end_game(None, "all_bankrupt")

    # === GAME END ===

    def end_by_time_limit(self) -> None:
        """Match timer expired: the richest active player by net worth wins."""
        active = self.get_active_players()
        winner = max(active, key=lambda p: self.net_worth(p.player_id))
        self._end_game(winner.player_id, "time_limit")

    def _end_game(self, winner_id: Optional[int], reason: str) -> None:
        self.game_over = True
        self.winner = winner_id
        self.phase = TurnPhase.GAME_OVER
        self.pending_decision = None
        winner_name = self.players[winner_id].name if winner_id is not None else None
        self.event_log.log(
            EventType.GAME_END,
            player_id=winner_id,
            details={"winner": winner_name, "reason": reason},
        )
        logger.info(f"Game over: winner={winner_name} ({reason})")


def create_game(
    config: GameConfig,
    players: Sequence[Player],
    layout: Optional[BoardLayout] = None,
    presenter: Optional[Presenter] = None,
    dice: Optional[Dice] = None,
) -> GameState:
    """
    Create a new game with the specified configuration and players.

    Args:
        config: Game configuration
        players: 1-8 players with unique ids
        layout: Board and decks (defaults to the standard board)
        presenter: Presentation collaborator (defaults to a no-op one)
        dice: Dice to roll (defaults to dice seeded from ``config.seed``)

    Returns:
        Initialized GameState
    """
    if not 1 <= len(players) <= MAX_PLAYERS:
        raise ConfigurationError(f"Game requires 1-{MAX_PLAYERS} players, got {len(players)}")
    if len({p.player_id for p in players}) != len(players):
        raise ConfigurationError("Player ids must be unique")

    return GameState(config, players, layout, presenter, dice)
