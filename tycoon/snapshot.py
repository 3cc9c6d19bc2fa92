"""
Public snapshot serialization of GameState.

Produces a sanitized, HUD-friendly view of the current game without
exposing hidden information (e.g., deck order).
"""

from __future__ import annotations

from typing import Any, Dict, List

from tycoon.game import GameState
from tycoon.tiles import RentableTile


def serialize_snapshot(game: GameState) -> Dict[str, Any]:
    """Serialize a GameState into a public, stable JSON dict.

    The snapshot includes:
    - turn_number, phase and current_player_id
    - players with public info (cash, position, jail, properties with status)
    - bank cash and unsold inventory, Free Parking pot
    - pending decision and active auction (if any)
    - deck counts (remaining / discard / held) only
    """
    players: List[Dict[str, Any]] = []
    for pid, pstate in sorted(game.players.items()):
        props: List[Dict[str, Any]] = []
        for pos in sorted(pstate.properties):
            tile = game.board.tile_at(pos)
            ownership = game.board.ownership_of(pos)
            entry: Dict[str, Any] = {
                "position": pos,
                "name": tile.name,
                "kind": tile.kind.value,
                "rank": ownership.rank,
                "mortgaged": ownership.is_mortgaged,
                "value": game.tile_value(pos),
            }
            if isinstance(tile, RentableTile):
                entry["color_group"] = tile.color
            props.append(entry)

        players.append(
            {
                "player_id": pid,
                "name": pstate.name,
                "cash": pstate.cash,
                "position": pstate.position,
                "has_passed_go": pstate.has_passed_go,
                "in_jail": pstate.in_jail,
                "jail_turns": pstate.jail_turns,
                "jail_cards": len(pstate.get_out_of_jail_cards),
                "is_bankrupt": pstate.is_bankrupt,
                "is_computer": pstate.is_computer,
                "net_worth": game.net_worth(pid),
                "properties": props,
            }
        )

    decision = None
    if game.pending_decision is not None:
        d = game.pending_decision
        decision = {
            "player_id": d.player_id,
            "position": d.position,
            "kind": d.kind.value,
            "options": {choice.value: enabled for choice, enabled in d.options.items()},
        }

    auction = None
    if game.active_auction is not None:
        a = game.active_auction
        auction = {
            "property_position": a.property_position,
            "property_name": a.property_name,
            "current_bid": a.current_bid,
            "high_bidder": a.high_bidder,
            "active_bidders": sorted(list(a.active_bidders)),
            "is_complete": a.is_complete,
        }

    snapshot: Dict[str, Any] = {
        "turn_number": game.turn_number,
        "phase": game.phase.value,
        "current_player_id": game.get_current_player().player_id,
        "winner": game.winner,
        "players": players,
        "bank": {
            "cash": game.bank.cash,
            "inventory": sorted(game.bank.inventory),
        },
        "free_parking": game.free_parking.cash,
        "decision": decision,
        "auction": auction,
        "decks": {
            name: {
                "cards_remaining": len(deck.cards),
                "discard_count": len(deck.discard_pile),
                "held_count": len(deck.held_cards),
            }
            for name, deck in sorted(game.decks.items())
        },
    }

    return snapshot
