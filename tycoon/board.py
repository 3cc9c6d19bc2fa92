from typing import Dict, List, Optional, Tuple

from tycoon.exceptions import ConfigurationError
from tycoon.layout import BoardLayout, default_layout
from tycoon.player import PropertyOwnership
from tycoon.property import Property
from tycoon.tiles import PlainTile, PurchasableTile, RentableTile, Tile, TileKind, tile_from_config


class Board:
    """The ordered, cyclic tile sequence and per-tile ownership."""

    def __init__(self, layout: Optional[BoardLayout] = None):
        layout = layout if layout is not None else default_layout()
        self.tiles: Tuple[Tile, ...] = tuple(
            tile_from_config(config, position) for position, config in enumerate(layout.tiles)
        )
        self.ownership: Dict[int, PropertyOwnership] = self._build_ownership()
        self.color_groups: Dict[str, List[int]] = self._build_color_groups()

    def _build_ownership(self) -> Dict[int, PropertyOwnership]:
        ownership: Dict[int, PropertyOwnership] = {}
        for tile in self.tiles:
            if isinstance(tile, RentableTile):
                ownership[tile.position] = PropertyOwnership(upgrades=Property(tile.upgrade_costs))
            elif isinstance(tile, PurchasableTile):
                ownership[tile.position] = PropertyOwnership()
        return ownership

    def _build_color_groups(self) -> Dict[str, List[int]]:
        """Build a mapping of color groups to tile positions."""
        groups: Dict[str, List[int]] = {}
        for tile in self.tiles:
            if isinstance(tile, RentableTile):
                groups.setdefault(tile.color, []).append(tile.position)
        return groups

    def __len__(self) -> int:
        return len(self.tiles)

    def tile_at(self, index: int) -> Tile:
        """Get the tile at the given index, wrapping around the board."""
        return self.tiles[index % len(self.tiles)]

    def ownership_of(self, position: int) -> Optional[PropertyOwnership]:
        """Ownership record for a purchasable tile, or None for any other tile."""
        return self.ownership.get(position % len(self.tiles))

    def purchasable_positions(self) -> List[int]:
        return sorted(self.ownership)

    def tiles_owned_by(self, player_id: int, kind: Optional[TileKind] = None) -> List[Tile]:
        """Tiles owned by a player, optionally restricted to one kind."""
        return [
            self.tiles[pos]
            for pos, ownership in sorted(self.ownership.items())
            if ownership.owner_id == player_id and (kind is None or self.tiles[pos].kind == kind)
        ]

    def tiles_by_color_group(self, color: str) -> List[RentableTile]:
        return [self.tiles[pos] for pos in self.color_groups.get(color, [])]

    def monopoly_owner(self, tile: Tile) -> Optional[int]:
        """
        The player owning every tile of this tile's colour group, if any.

        Returns None for tiles outside a colour group.
        """
        if not isinstance(tile, RentableTile):
            return None
        owners = {self.ownership[pos].owner_id for pos in self.color_groups[tile.color]}
        if len(owners) == 1:
            return owners.pop()
        return None

    def group_has_upgrades(self, color: str) -> bool:
        return any(self.ownership[pos].is_upgraded for pos in self.color_groups.get(color, []))

    def group_has_mortgages(self, color: str) -> bool:
        return any(self.ownership[pos].is_mortgaged for pos in self.color_groups.get(color, []))

    def singleton_tile_of_kind(self, kind: TileKind) -> Tile:
        """
        The unique tile of a kind (Go, Free Parking, ...).

        Raises:
            ConfigurationError: if the board has zero or several such tiles.
        """
        matches = [t for t in self.tiles if t.kind == kind]
        if len(matches) != 1:
            raise ConfigurationError(f"Expected exactly one {kind.value} tile, found {len(matches)}")
        return matches[0]

    def jail_tile(self) -> PlainTile:
        for tile in self.tiles:
            if isinstance(tile, PlainTile) and tile.is_jail:
                return tile
        raise ConfigurationError("Board has no jail tile")

    def path(self, start: int, steps: int) -> List[int]:
        """
        Positions visited moving ``steps`` from ``start``, in order.

        Excludes the start and ends with the destination. Negative steps
        walk backwards.
        """
        direction = 1 if steps >= 0 else -1
        size = len(self.tiles)
        return [(start + direction * i) % size for i in range(1, abs(steps) + 1)]

    def distance_forward(self, start: int, target: int) -> int:
        """Steps needed to reach ``target`` moving forwards; a full lap if equal."""
        distance = (target - start) % len(self.tiles)
        return distance if distance else len(self.tiles)
