"""
Board and card-deck configuration.

Layouts are validated with pydantic when a game is set up, so a malformed
board (missing rent entries, a lone colour-group tile, Go in the wrong place)
fails before the first roll instead of mid-turn.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from tycoon.exceptions import ConfigurationError
from tycoon.property import MAX_RANK

DECK_NAMES = ("opportunity", "potluck")
RENT_TABLE_SIZE = MAX_RANK + 1


class _TileConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)


class GoConfig(_TileConfig):
    kind: Literal["go"] = "go"
    name: str = "Go"


class RentableConfig(_TileConfig):
    """A colour-group property with a rent table indexed by upgrade rank."""

    kind: Literal["rentable"] = "rentable"
    cost: int = Field(gt=0)
    color: str = Field(min_length=1)
    rent: List[int]
    upgrade: List[int] = Field(description="Cost of each of the five upgrade ranks.")

    @field_validator("rent")
    @classmethod
    def check_rent_table(cls, value: List[int]) -> List[int]:
        if len(value) != RENT_TABLE_SIZE:
            raise ValueError(f"rent table needs {RENT_TABLE_SIZE} entries, got {len(value)}")
        if any(r < 0 for r in value):
            raise ValueError("rent entries must be non-negative")
        return value

    @field_validator("upgrade", mode="before")
    @classmethod
    def expand_upgrade_cost(cls, value: Any) -> Any:
        """A single number means the same cost for every rank."""
        if isinstance(value, int):
            return [value] * MAX_RANK
        return value

    @field_validator("upgrade")
    @classmethod
    def check_upgrade_costs(cls, value: List[int]) -> List[int]:
        if len(value) != MAX_RANK:
            raise ValueError(f"upgrade needs {MAX_RANK} costs, got {len(value)}")
        if any(c <= 0 for c in value):
            raise ValueError("upgrade costs must be positive")
        return value


class UtilityConfig(_TileConfig):
    kind: Literal["utility"] = "utility"
    cost: int = Field(gt=0)


class TaxConfig(_TileConfig):
    kind: Literal["tax"] = "tax"
    amount: int = Field(ge=0)


class SendToJailConfig(_TileConfig):
    kind: Literal["send_to_jail"] = "send_to_jail"
    name: str = "Go To Jail"


class FreeParkingConfig(_TileConfig):
    kind: Literal["free_parking"] = "free_parking"
    name: str = "Free Parking"


class ChanceConfig(_TileConfig):
    kind: Literal["chance"] = "chance"
    deck: Literal["opportunity", "potluck"]


class PlainConfig(_TileConfig):
    kind: Literal["plain"] = "plain"
    is_jail: bool = False


TileConfig = Annotated[
    Union[
        GoConfig,
        RentableConfig,
        UtilityConfig,
        TaxConfig,
        SendToJailConfig,
        FreeParkingConfig,
        ChanceConfig,
        PlainConfig,
    ],
    Field(discriminator="kind"),
]


class CardConfig(BaseModel):
    """One opportunity or potluck card."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    description: str = Field(min_length=1)
    action: Literal[
        "collect",
        "pay",
        "pay_per_upgrade",
        "collect_from_players",
        "pay_to_players",
        "move_to",
        "move_spaces",
        "go_to_jail",
        "get_out_of_jail",
    ]
    value: int = 0
    # Per-hotel charge for pay_per_upgrade
    value2: int = 0
    target_position: Optional[int] = None
    collect_go: bool = True

    @model_validator(mode="after")
    def check_fields(self) -> "CardConfig":
        if self.action == "move_to" and self.target_position is None:
            raise ValueError(f"card {self.description!r}: move_to requires target_position")
        if self.action == "move_spaces" and self.value == 0:
            raise ValueError(f"card {self.description!r}: move_spaces requires a non-zero value")
        if self.action not in ("move_spaces",) and self.value < 0:
            raise ValueError(f"card {self.description!r}: value must be non-negative")
        return self


class BoardLayout(BaseModel):
    """Ordered tiles plus the two card decks. Immutable once loaded."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    tiles: List[TileConfig] = Field(min_length=2)
    opportunity: List[CardConfig] = Field(default_factory=list)
    potluck: List[CardConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_board(self) -> "BoardLayout":
        kinds = [t.kind for t in self.tiles]

        if kinds[0] != "go" or kinds.count("go") != 1:
            raise ValueError("board needs exactly one go tile, at index 0")
        if kinds.count("free_parking") > 1:
            raise ValueError("board may have at most one free_parking tile")

        jails = [t for t in self.tiles if isinstance(t, PlainConfig) and t.is_jail]
        if len(jails) > 1:
            raise ValueError("board may have at most one jail tile")
        if "send_to_jail" in kinds and not jails:
            raise ValueError("send_to_jail tile requires a plain tile with is_jail set")

        groups: Dict[str, int] = {}
        for tile in self.tiles:
            if isinstance(tile, RentableConfig):
                groups[tile.color] = groups.get(tile.color, 0) + 1
        lone = sorted(color for color, count in groups.items() if count < 2)
        if lone:
            raise ValueError(f"colour groups need at least two tiles: {', '.join(lone)}")

        for tile in self.tiles:
            if isinstance(tile, ChanceConfig) and not getattr(self, tile.deck):
                raise ValueError(f"tile {tile.name!r} draws from empty deck {tile.deck!r}")

        for card in list(self.opportunity) + list(self.potluck):
            if card.target_position is not None and not 0 <= card.target_position < len(self.tiles):
                raise ValueError(f"card {card.description!r} targets a position off the board")
            if card.action == "go_to_jail" and not jails:
                raise ValueError(f"card {card.description!r} needs a jail tile")

        return self


def load_layout(data: Dict[str, Any]) -> BoardLayout:
    """Validate raw layout data.

    Raises:
        ConfigurationError: if the layout is malformed.
    """
    try:
        return BoardLayout.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid board layout: {exc}") from exc


def load_layout_file(path: Union[str, Path]) -> BoardLayout:
    """Load and validate a JSON layout file."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read board layout {path}: {exc}") from exc
    return load_layout(raw)


def _rentable(name: str, cost: int, color: str, rent: List[int], upgrade: int) -> Dict[str, Any]:
    return {"kind": "rentable", "name": name, "cost": cost, "color": color, "rent": rent, "upgrade": upgrade}


DEFAULT_TILES: List[Dict[str, Any]] = [
    {"kind": "go"},
    _rentable("Old Kent Road", 60, "brown", [2, 10, 30, 90, 160, 250], 50),
    {"kind": "chance", "name": "Potluck", "deck": "potluck"},
    _rentable("Whitechapel Road", 60, "brown", [4, 20, 60, 180, 320, 450], 50),
    {"kind": "tax", "name": "Income Tax", "amount": 200},
    {"kind": "plain", "name": "Kings Cross Station"},
    {"kind": "chance", "name": "Opportunity", "deck": "opportunity"},
    _rentable("The Angel Islington", 100, "light_blue", [6, 30, 90, 270, 400, 550], 50),
    _rentable("Euston Road", 100, "light_blue", [6, 30, 90, 270, 400, 550], 50),
    _rentable("Pentonville Road", 120, "light_blue", [8, 40, 100, 300, 450, 600], 50),
    {"kind": "plain", "name": "Jail", "is_jail": True},
    _rentable("Pall Mall", 140, "pink", [10, 50, 150, 450, 625, 750], 100),
    {"kind": "utility", "name": "Electric Company", "cost": 150},
    _rentable("Whitehall", 140, "pink", [10, 50, 150, 450, 625, 750], 100),
    _rentable("Northumberland Avenue", 160, "pink", [12, 60, 180, 500, 700, 900], 100),
    {"kind": "plain", "name": "Marylebone Station"},
    _rentable("Bow Street", 180, "orange", [14, 70, 200, 550, 750, 950], 100),
    {"kind": "chance", "name": "Potluck", "deck": "potluck"},
    _rentable("Marlborough Street", 180, "orange", [14, 70, 200, 550, 750, 950], 100),
    _rentable("Vine Street", 200, "orange", [16, 80, 220, 600, 800, 1000], 100),
    {"kind": "free_parking"},
    _rentable("Strand", 220, "red", [18, 90, 250, 700, 875, 1050], 150),
    {"kind": "chance", "name": "Opportunity", "deck": "opportunity"},
    _rentable("Fleet Street", 220, "red", [18, 90, 250, 700, 875, 1050], 150),
    _rentable("Trafalgar Square", 240, "red", [20, 100, 300, 750, 925, 1100], 150),
    {"kind": "plain", "name": "Fenchurch St Station"},
    _rentable("Leicester Square", 260, "yellow", [22, 110, 330, 800, 975, 1150], 150),
    _rentable("Coventry Street", 260, "yellow", [22, 110, 330, 800, 975, 1150], 150),
    {"kind": "utility", "name": "Water Works", "cost": 150},
    _rentable("Piccadilly", 280, "yellow", [24, 120, 360, 850, 1025, 1200], 150),
    {"kind": "send_to_jail"},
    _rentable("Regent Street", 300, "green", [26, 130, 390, 900, 1100, 1275], 200),
    _rentable("Oxford Street", 300, "green", [26, 130, 390, 900, 1100, 1275], 200),
    {"kind": "chance", "name": "Potluck", "deck": "potluck"},
    _rentable("Bond Street", 320, "green", [28, 150, 450, 1000, 1200, 1400], 200),
    {"kind": "plain", "name": "Liverpool St Station"},
    {"kind": "chance", "name": "Opportunity", "deck": "opportunity"},
    _rentable("Park Lane", 350, "dark_blue", [35, 175, 500, 1100, 1300, 1500], 200),
    {"kind": "tax", "name": "Super Tax", "amount": 100},
    _rentable("Mayfair", 400, "dark_blue", [50, 200, 600, 1400, 1700, 2000], 200),
]

DEFAULT_OPPORTUNITY: List[Dict[str, Any]] = [
    {"description": "Advance to Go (Collect £200)", "action": "move_to", "target_position": 0},
    {"description": "Advance to Trafalgar Square", "action": "move_to", "target_position": 24},
    {"description": "Advance to Pall Mall", "action": "move_to", "target_position": 11},
    {"description": "Advance to Mayfair", "action": "move_to", "target_position": 39},
    {"description": "Bank pays you dividend of £50", "action": "collect", "value": 50},
    {"description": "Get Out of Jail Free", "action": "get_out_of_jail"},
    {"description": "Go back 3 spaces", "action": "move_spaces", "value": -3},
    {"description": "Go to Jail. Do not pass Go", "action": "go_to_jail"},
    {
        "description": "Make general repairs on all your property: £25 per house, £100 per hotel",
        "action": "pay_per_upgrade",
        "value": 25,
        "value2": 100,
    },
    {"description": "Speeding fine £15", "action": "pay", "value": 15},
    {"description": "You have been elected Chairman of the Board. Pay each player £50", "action": "pay_to_players", "value": 50},
    {"description": "Your building loan matures. Collect £150", "action": "collect", "value": 150},
]

DEFAULT_POTLUCK: List[Dict[str, Any]] = [
    {"description": "Advance to Go (Collect £200)", "action": "move_to", "target_position": 0},
    {"description": "Bank error in your favour. Collect £200", "action": "collect", "value": 200},
    {"description": "Doctor's fee. Pay £50", "action": "pay", "value": 50},
    {"description": "From sale of stock you get £50", "action": "collect", "value": 50},
    {"description": "Get Out of Jail Free", "action": "get_out_of_jail"},
    {"description": "Go to Jail. Do not pass Go", "action": "go_to_jail"},
    {"description": "It is your birthday. Collect £10 from every player", "action": "collect_from_players", "value": 10},
    {"description": "Holiday fund matures. Receive £100", "action": "collect", "value": 100},
    {"description": "Income tax refund. Collect £20", "action": "collect", "value": 20},
    {"description": "Life insurance matures. Collect £100", "action": "collect", "value": 100},
    {"description": "Hospital fees. Pay £100", "action": "pay", "value": 100},
    {"description": "School fees. Pay £50", "action": "pay", "value": 50},
    {
        "description": "You are assessed for street repairs: £40 per house, £115 per hotel",
        "action": "pay_per_upgrade",
        "value": 40,
        "value2": 115,
    },
    {"description": "You have won second prize in a beauty contest. Collect £10", "action": "collect", "value": 10},
    {"description": "You inherit £100", "action": "collect", "value": 100},
]


@lru_cache
def default_layout() -> BoardLayout:
    """The standard 40-tile board with both default decks."""
    return load_layout(
        {"tiles": DEFAULT_TILES, "opportunity": DEFAULT_OPPORTUNITY, "potluck": DEFAULT_POTLUCK}
    )
