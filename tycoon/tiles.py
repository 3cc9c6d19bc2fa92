"""
Board tile definitions and their passing/landing behaviour.

Each tile kind implements ``on_passed`` (token crosses without stopping) and
``on_landed`` (token stops here). Cash moves through the ledger in the
context; ``on_landed`` returns a directive telling the turn coordinator
whether to advance the turn or wait for a player decision.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple, Union

from tycoon.layout import (
    ChanceConfig,
    FreeParkingConfig,
    GoConfig,
    PlainConfig,
    RentableConfig,
    SendToJailConfig,
    TaxConfig,
    UtilityConfig,
)
from tycoon.money import EventType

if TYPE_CHECKING:
    from tycoon.board import Board
    from tycoon.config import GameConfig
    from tycoon.dice import DiceRoll
    from tycoon.ledger import Ledger
    from tycoon.money import Bank, EventLog, FreeParkingPot
    from tycoon.player import PlayerState


class TileKind(Enum):
    """Closed set of tile kinds."""

    GO = "go"
    RENTABLE = "rentable"
    UTILITY = "utility"
    TAX = "tax"
    SEND_TO_JAIL = "send_to_jail"
    FREE_PARKING = "free_parking"
    CHANCE = "chance"
    PLAIN = "plain"


class DecisionKind(Enum):
    PURCHASE = "purchase"
    MANAGE = "manage"


@dataclass(frozen=True)
class Advance:
    """Landing is resolved; the turn may advance."""


@dataclass(frozen=True)
class AwaitDecision:
    """Landing needs a choice from the player before the turn advances."""

    player_id: int
    position: int
    kind: DecisionKind


ADVANCE = Advance()
Directive = Union[Advance, AwaitDecision]


@dataclass
class TileContext:
    """Collaborators a tile may use while resolving. Built per landing."""

    board: "Board"
    ledger: "Ledger"
    bank: "Bank"
    pot: "FreeParkingPot"
    config: "GameConfig"
    event_log: "EventLog"
    players: Dict[int, "PlayerState"]
    roll: Optional["DiceRoll"]
    draw_card: Callable[["PlayerState", str], Directive]
    send_to_jail: Callable[["PlayerState"], None]

    @property
    def fee_account(self):
        """Where taxes and fees go: the Free Parking pot or the bank."""
        return self.pot if self.config.free_parking_fees else self.bank


class Tile:
    """Base tile: passing and landing do nothing."""

    kind: TileKind = TileKind.PLAIN
    purchasable = False

    def __init__(self, name: str, position: int):
        self.name = name
        self.position = position

    def on_passed(self, player: "PlayerState", ctx: TileContext) -> None:
        return None

    def on_landed(self, player: "PlayerState", ctx: TileContext) -> Directive:
        return ADVANCE

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', position={self.position})"


class GoTile(Tile):
    """Pays the salary to anyone crossing or landing on it."""

    kind = TileKind.GO

    def on_passed(self, player, ctx):
        self._pay_salary(player, ctx, landed=False)

    def on_landed(self, player, ctx):
        self._pay_salary(player, ctx, landed=True)
        return ADVANCE

    def _pay_salary(self, player, ctx, landed):
        player.has_passed_go = True
        ctx.ledger.transfer(ctx.bank, player, ctx.config.go_salary, "go_salary")
        ctx.event_log.log(
            EventType.PASS_GO,
            player_id=player.player_id,
            details={"amount": ctx.config.go_salary, "landed": landed, "new_balance": player.cash},
        )


class PurchasableTile(Tile):
    """A tile the bank sells and players own, rent and mortgage."""

    purchasable = True

    def __init__(self, name: str, position: int, cost: int):
        super().__init__(name, position)
        self.cost = cost

    @property
    def mortgage_value(self) -> int:
        return self.cost // 2

    def rent_due(self, owner: "PlayerState", ctx: TileContext) -> int:
        raise NotImplementedError

    def on_landed(self, player, ctx):
        ownership = ctx.board.ownership_of(self.position)

        if not ownership.is_owned():
            if player.has_passed_go or not ctx.config.require_pass_go_to_buy:
                return AwaitDecision(player.player_id, self.position, DecisionKind.PURCHASE)
            return ADVANCE

        if ownership.owner_id == player.player_id:
            return AwaitDecision(player.player_id, self.position, DecisionKind.MANAGE)

        if ownership.is_mortgaged:
            return ADVANCE

        owner = ctx.players[ownership.owner_id]
        rent = self.rent_due(owner, ctx)
        if rent > 0:
            ctx.ledger.transfer(player, owner, rent, f"rent:{self.name}")
            ctx.event_log.log(
                EventType.RENT_PAYMENT,
                player_id=player.player_id,
                details={
                    "owner": owner.player_id,
                    "property": self.name,
                    "position": self.position,
                    "amount": rent,
                    "payer_balance": player.cash,
                    "owner_balance": owner.cash,
                },
            )
        return ADVANCE


class RentableTile(PurchasableTile):
    """Colour-group property; rent depends on upgrade rank and monopoly."""

    kind = TileKind.RENTABLE

    def __init__(
        self,
        name: str,
        position: int,
        cost: int,
        color: str,
        rent: Tuple[int, ...],
        upgrade_costs: Tuple[int, ...],
    ):
        super().__init__(name, position, cost)
        self.color = color
        self.rent = tuple(rent)
        self.upgrade_costs = tuple(upgrade_costs)

    def get_rent(self, rank: int, doubled: bool) -> int:
        """
        Rent for this tile.

        Args:
            rank: Upgrade rank 0-5
            doubled: Whether the unimproved-monopoly bonus applies

        Returns:
            Rent amount
        """
        rent = self.rent[rank]
        if rank == 0 and doubled:
            return rent * 2
        return rent

    def rent_due(self, owner, ctx):
        ownership = ctx.board.ownership_of(self.position)
        doubled = (
            ctx.board.monopoly_owner(self) == owner.player_id
            and not ctx.board.group_has_upgrades(self.color)
        )
        return self.get_rent(ownership.rank, doubled)


class UtilityTile(PurchasableTile):
    """Rent is the dice total times a multiplier set by utilities owned."""

    kind = TileKind.UTILITY

    def rent_due(self, owner, ctx):
        # A jailed owner collects nothing
        if owner.in_jail:
            return 0
        owned = len(ctx.board.tiles_owned_by(owner.player_id, TileKind.UTILITY))
        if owned == 0:
            return 0
        single, both = ctx.config.utility_multipliers
        multiplier = single if owned == 1 else both
        total = ctx.roll.total if ctx.roll is not None else 0
        return total * multiplier


class TaxTile(Tile):
    kind = TileKind.TAX

    def __init__(self, name: str, position: int, amount: int):
        super().__init__(name, position)
        self.amount = amount

    def on_landed(self, player, ctx):
        ctx.ledger.transfer(player, ctx.fee_account, self.amount, f"tax:{self.name}")
        ctx.event_log.log(
            EventType.TAX_PAYMENT,
            player_id=player.player_id,
            details={"tax": self.name, "amount": self.amount, "new_balance": player.cash},
        )
        return ADVANCE


class SendToJailTile(Tile):
    kind = TileKind.SEND_TO_JAIL

    def on_landed(self, player, ctx):
        ctx.send_to_jail(player)
        return ADVANCE


class FreeParkingTile(Tile):
    """Pays out the whole pot."""

    kind = TileKind.FREE_PARKING

    def on_landed(self, player, ctx):
        payout = ctx.pot.cash
        if payout > 0:
            ctx.ledger.transfer(ctx.pot, player, payout, "free_parking")
            ctx.event_log.log(
                EventType.FREE_PARKING_PAYOUT,
                player_id=player.player_id,
                details={"amount": payout, "new_balance": player.cash},
            )
        return ADVANCE


class ChanceTile(Tile):
    kind = TileKind.CHANCE

    def __init__(self, name: str, position: int, deck: str):
        super().__init__(name, position)
        self.deck = deck

    def on_landed(self, player, ctx):
        return ctx.draw_card(player, self.deck)


class PlainTile(Tile):
    kind = TileKind.PLAIN

    def __init__(self, name: str, position: int, is_jail: bool = False):
        super().__init__(name, position)
        self.is_jail = is_jail


def tile_from_config(config, position: int) -> Tile:
    """Build the runtime tile for a validated layout entry."""
    if isinstance(config, GoConfig):
        return GoTile(config.name, position)
    if isinstance(config, RentableConfig):
        return RentableTile(
            config.name,
            position,
            config.cost,
            config.color,
            tuple(config.rent),
            tuple(config.upgrade),
        )
    if isinstance(config, UtilityConfig):
        return UtilityTile(config.name, position, config.cost)
    if isinstance(config, TaxConfig):
        return TaxTile(config.name, position, config.amount)
    if isinstance(config, SendToJailConfig):
        return SendToJailTile(config.name, position)
    if isinstance(config, FreeParkingConfig):
        return FreeParkingTile(config.name, position)
    if isinstance(config, ChanceConfig):
        return ChanceTile(config.name, position, config.deck)
    if isinstance(config, PlainConfig):
        return PlainTile(config.name, position, config.is_jail)
    raise TypeError(f"Unknown tile config: {config!r}")
