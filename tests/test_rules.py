"""
Tests for the action API: legal actions and applying them.
"""

from tycoon.game import Choice, TurnPhase
from tycoon.rules import Action, ActionType, apply_action, get_legal_actions


def action_types(actions):
    return [a.action_type for a in actions]


def test_start_of_game_actions(scripted_game):
    assert action_types(get_legal_actions(scripted_game, 0)) == [ActionType.ROLL_DICE]
    # Not Bob's turn
    assert get_legal_actions(scripted_game, 1) == []


def test_property_management_before_rolling(scripted_game):
    scripted_game.buy_property(0, 1)

    actions = get_legal_actions(scripted_game, 0)

    assert Action(ActionType.UPGRADE, position=1) in actions
    assert Action(ActionType.MORTGAGE, position=1) in actions
    assert Action(ActionType.DOWNGRADE, position=1) not in actions


def test_decision_actions(make_game):
    game = make_game(rolls=[(3, 4)])
    game.players[0].has_passed_go = True
    game.roll_dice()

    actions = get_legal_actions(game, 0)

    assert set(action_types(actions)) == {ActionType.BUY_PROPERTY, ActionType.AUCTION, ActionType.DECLINE}
    assert all(a.params["position"] == 7 for a in actions)
    assert get_legal_actions(game, 1) == []


def test_apply_buy(make_game):
    game = make_game(rolls=[(3, 4)])
    game.players[0].has_passed_go = True
    apply_action(game, Action(ActionType.ROLL_DICE))

    assert apply_action(game, Action(ActionType.BUY_PROPERTY, position=7))

    assert game.board.ownership_of(7).owner_id == 0
    assert game.get_current_player().player_id == 1


def test_apply_disabled_choice_fails(make_game):
    game = make_game(rolls=[(3, 4)])
    game.players[0].has_passed_go = True
    game.players[0].cash = 20
    game.roll_dice()

    assert not apply_action(game, Action(ActionType.BUY_PROPERTY, position=7))
    assert game.phase == TurnPhase.AWAITING_DECISION


def test_jail_actions(make_game):
    game = make_game()
    game.send_to_jail(0)

    types = action_types(get_legal_actions(game, 0))

    assert ActionType.ROLL_DICE in types
    assert ActionType.PAY_JAIL_FINE in types
    assert ActionType.USE_JAIL_CARD not in types

    assert apply_action(game, Action(ActionType.PAY_JAIL_FINE))
    assert not game.players[0].in_jail


def test_auction_actions_for_bidders(make_game, deferred_presenter):
    game = make_game(rolls=[(3, 4)], presenter=deferred_presenter)
    game.players[0].has_passed_go = True
    game.roll_dice()
    apply_action(game, Action(ActionType.AUCTION, position=7))
    deferred_presenter.complete()

    for player_id in (0, 1):
        assert action_types(get_legal_actions(game, player_id)) == [ActionType.BID, ActionType.PASS_AUCTION]

    assert apply_action(game, Action(ActionType.BID, amount=50), player_id=1)
    assert apply_action(game, Action(ActionType.PASS_AUCTION), player_id=0)
    assert game.active_auction.is_complete

    deferred_presenter.complete()

    assert game.board.ownership_of(7).owner_id == 1
    assert game.players[1].cash == 1450


def test_roll_out_of_turn_rejected(scripted_game):
    assert not apply_action(scripted_game, Action(ActionType.ROLL_DICE), player_id=1)


def test_management_without_position_fails(scripted_game):
    assert not apply_action(scripted_game, Action(ActionType.MORTGAGE))


def test_no_actions_after_game_over(basic_game):
    basic_game.end_by_time_limit()
    assert get_legal_actions(basic_game, 0) == []


def test_buy_enabled_with_exact_cash(make_game):
    """Spending down to exactly zero is allowed; a pound short is not."""
    game = make_game(rolls=[(3, 4)])
    game.players[0].has_passed_go = True
    game.players[0].cash = 100
    game.roll_dice()

    assert game.pending_decision.is_enabled(Choice.BUY)
    assert game.resolve_decision(Choice.BUY)
    assert game.players[0].cash == 0

    game.players[1].cash = 99
    assert not game.can_buy(1, 8)
