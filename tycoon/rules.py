"""
High-level rules API for controlling game flow.
This module provides the public interface for game actions and legal move detection.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from tycoon.game import Choice, GameState, TurnPhase


class ActionType(Enum):
    """Types of actions a player can take."""

    ROLL_DICE = "roll_dice"
    PAY_JAIL_FINE = "pay_jail_fine"
    USE_JAIL_CARD = "use_jail_card"
    BUY_PROPERTY = "buy_property"
    AUCTION = "auction"
    DECLINE = "decline"
    UPGRADE = "upgrade"
    DOWNGRADE = "downgrade"
    MORTGAGE = "mortgage"
    UNMORTGAGE = "unmortgage"
    BID = "bid"
    PASS_AUCTION = "pass_auction"


class Action:
    """Represents a game action that can be taken."""

    def __init__(self, action_type: ActionType, **params: Any):
        self.action_type = action_type
        self.params = params

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Action):
            return NotImplemented
        return self.action_type == other.action_type and self.params == other.params

    def __repr__(self) -> str:
        return f"Action({self.action_type.value}, {self.params})"


# Decision prompt answers, keyed by the action that selects them
_DECISION_CHOICES: Dict[ActionType, Choice] = {
    ActionType.BUY_PROPERTY: Choice.BUY,
    ActionType.AUCTION: Choice.AUCTION,
    ActionType.DECLINE: Choice.DECLINE,
    ActionType.UPGRADE: Choice.UPGRADE,
    ActionType.DOWNGRADE: Choice.DOWNGRADE,
    ActionType.MORTGAGE: Choice.MORTGAGE,
    ActionType.UNMORTGAGE: Choice.UNMORTGAGE,
}
_CHOICE_ACTIONS = {choice: action_type for action_type, choice in _DECISION_CHOICES.items()}


def get_legal_actions(game_state: GameState, player_id: int) -> List[Action]:
    """
    Get all legal actions available to a player.

    This is the main interface for controllers to determine valid moves.

    Args:
        game_state: Current game state
        player_id: Player to get actions for

    Returns:
        List of legal Action objects
    """
    if game_state.game_over:
        return []

    # Any active bidder may act during an auction, not just the current player
    auction = game_state.active_auction
    if auction is not None and not auction.is_complete:
        if player_id in auction.active_bidders:
            return [Action(ActionType.BID), Action(ActionType.PASS_AUCTION)]
        return []

    decision = game_state.pending_decision
    if game_state.phase == TurnPhase.AWAITING_DECISION and decision is not None:
        if decision.player_id != player_id:
            return []
        return [
            Action(_CHOICE_ACTIONS[choice], position=decision.position)
            for choice in decision.enabled_choices()
        ]

    if game_state.phase != TurnPhase.AWAITING_ROLL:
        return []

    player = game_state.players[player_id]
    if game_state.get_current_player().player_id != player_id:
        return []

    actions = [Action(ActionType.ROLL_DICE)]
    if player.in_jail:
        if player.cash >= game_state.config.jail_fine:
            actions.append(Action(ActionType.PAY_JAIL_FINE))
        if player.get_out_of_jail_cards:
            actions.append(Action(ActionType.USE_JAIL_CARD))

    # Property management is allowed before rolling
    actions.extend(_get_property_management_actions(game_state, player_id))
    return actions


def _get_property_management_actions(game_state: GameState, player_id: int) -> List[Action]:
    """Get actions related to upgrading, mortgaging, etc."""
    actions: List[Action] = []
    player = game_state.players[player_id]

    for position in sorted(player.properties):
        if game_state.can_upgrade(player_id, position):
            actions.append(Action(ActionType.UPGRADE, position=position))
        if game_state.can_downgrade(player_id, position):
            actions.append(Action(ActionType.DOWNGRADE, position=position))
        if game_state.can_mortgage(player_id, position):
            actions.append(Action(ActionType.MORTGAGE, position=position))
        if game_state.can_unmortgage(player_id, position):
            actions.append(Action(ActionType.UNMORTGAGE, position=position))

    return actions


def apply_action(game_state: GameState, action: Action, player_id: Optional[int] = None) -> bool:
    """
    Apply an action to the game state.

    This is the main interface for executing moves.

    Args:
        game_state: Current game state
        action: Action to apply
        player_id: Player executing the action (optional, defaults to current player)

    Returns:
        True if action was successful, False otherwise
    """
    if player_id is None:
        player_id = game_state.get_current_player().player_id

    if action.action_type == ActionType.BID:
        return game_state.place_bid(player_id, action.params.get("amount", 0))

    elif action.action_type == ActionType.PASS_AUCTION:
        return game_state.pass_auction(player_id)

    if game_state.phase == TurnPhase.AWAITING_DECISION and action.action_type in _DECISION_CHOICES:
        return game_state.resolve_decision(_DECISION_CHOICES[action.action_type], player_id)

    if action.action_type == ActionType.ROLL_DICE:
        if game_state.get_current_player().player_id != player_id:
            return False
        game_state.roll_dice()
        return True

    elif action.action_type == ActionType.PAY_JAIL_FINE:
        return game_state.pay_jail_fine(player_id)

    elif action.action_type == ActionType.USE_JAIL_CARD:
        return game_state.use_jail_card(player_id)

    management = {
        ActionType.UPGRADE: game_state.upgrade_property,
        ActionType.DOWNGRADE: game_state.downgrade_property,
        ActionType.MORTGAGE: game_state.mortgage_property,
        ActionType.UNMORTGAGE: game_state.unmortgage_property,
    }
    if action.action_type in management:
        position = action.params.get("position")
        if position is None:
            return False
        return management[action.action_type](player_id, position)

    return False
