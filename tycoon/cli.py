"""
Headless command-line runner.

Plays a complete match with a scripted decision policy standing in for the
UI: buy whenever possible, upgrade while keeping a cash reserve, otherwise
decline. Useful for smoke-testing rule changes and layouts.
"""

import argparse
import logging
import sys
from typing import List, Optional

from tycoon.exceptions import TycoonError
from tycoon.game import GameState, TurnPhase, create_game
from tycoon.player import Player
from tycoon.rules import Action, ActionType, apply_action, get_legal_actions
from tycoon.settings import configure_logging, get_settings

logger = logging.getLogger(__name__)

PLAYER_NAMES = ["Alice", "Bob", "Charlie", "Diana", "Eve", "Frank", "Grace", "Hank"]
CASH_RESERVE = 300


def choose_action(game: GameState, legal_actions: List[Action]) -> Optional[Action]:
    """Pick the scripted policy's action from the legal ones."""
    by_type = {}
    for action in legal_actions:
        by_type.setdefault(action.action_type, action)

    player = game.get_current_player()

    if game.phase == TurnPhase.AWAITING_DECISION:
        if ActionType.BUY_PROPERTY in by_type:
            return by_type[ActionType.BUY_PROPERTY]
        if ActionType.UNMORTGAGE in by_type:
            return by_type[ActionType.UNMORTGAGE]
        upgrade = by_type.get(ActionType.UPGRADE)
        if upgrade is not None:
            cost = game.board.ownership_of(upgrade.params["position"]).upgrades.upgrade_cost
            if player.cash - cost >= CASH_RESERVE:
                return upgrade
        return by_type.get(ActionType.DECLINE)

    if ActionType.USE_JAIL_CARD in by_type:
        return by_type[ActionType.USE_JAIL_CARD]
    if ActionType.PAY_JAIL_FINE in by_type and player.cash >= CASH_RESERVE:
        return by_type[ActionType.PAY_JAIL_FINE]
    return by_type.get(ActionType.ROLL_DICE)


def print_game_state(game: GameState) -> None:
    """Print current game state."""
    print("\n" + "=" * 60)
    print(f"TURN {game.turn_number}")
    print("=" * 60)

    for player_id, player in sorted(game.players.items()):
        if player.is_bankrupt:
            status = "BANKRUPT"
        elif player.in_jail:
            status = f"IN JAIL ({player.jail_turns} attempts)"
        else:
            status = f"at {game.board.tile_at(player.position).name}"

        print(f"Player {player_id} ({player.name}): £{player.cash} | {len(player.properties)} properties | {status}")


def print_game_summary(game: GameState) -> None:
    """Print final game summary."""
    print("\n" + "=" * 60)
    print("GAME OVER" if game.game_over else "GAME STOPPED")
    print("=" * 60)

    if game.winner is not None:
        winner = game.players[game.winner]
        print(f"\nWinner: {winner.name}")
        print(f"Final Cash: £{winner.cash}")
        print(f"Properties Owned: {len(winner.properties)}")

    print("\nFinal Standings:")
    standings = sorted(game.players.values(), key=lambda p: game.net_worth(p.player_id), reverse=True)
    for player in standings:
        status = "BANKRUPT" if player.is_bankrupt else f"£{game.net_worth(player.player_id)}"
        print(f"  {player.name}: {status}")

    print(f"\nTotal Turns: {game.turn_number}")
    print(f"Free Parking: £{game.free_parking.cash}")


def simulate_game(
    num_players: int = 2,
    seed: Optional[int] = None,
    max_turns: Optional[int] = None,
    verbose: bool = True,
    max_iterations: int = 10000,
) -> GameState:
    """
    Simulate a complete game.

    Args:
        num_players: Number of players (1-8)
        seed: Random seed for reproducibility
        max_turns: Turn limit; the richest player wins when reached
        verbose: Whether to print periodic state
        max_iterations: Safety limit on actions taken

    Returns:
        The finished (or stopped) game
    """
    settings = get_settings()
    config = settings.to_game_config()
    if seed is not None:
        config.seed = seed
    if max_turns is not None:
        config.time_limit_turns = max_turns

    players = [Player(i, PLAYER_NAMES[i]) for i in range(num_players)]
    game = create_game(config, players, layout=settings.load_board_layout())

    if verbose:
        print(f"Starting game with {num_players} players (seed: {config.seed})")

    last_turn = -1
    for _ in range(max_iterations):
        if game.game_over:
            break

        if verbose and game.turn_number != last_turn and game.turn_number % 10 == 0:
            print_game_state(game)
        last_turn = game.turn_number

        player = game.get_current_player()
        acting_id = game.pending_decision.player_id if game.pending_decision else player.player_id
        action = choose_action(game, get_legal_actions(game, acting_id))
        if action is None:
            logger.warning(f"No action available for player {acting_id} in phase {game.phase.value}")
            break
        apply_action(game, action, player_id=acting_id)
    else:
        logger.warning(f"Stopped after {max_iterations} actions without a winner")

    return game


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run a headless Tycoon match")
    parser.add_argument("--players", type=int, default=2, help="Number of players (1-8)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--max-turns", type=int, default=200, help="Turn limit (default: 200)")
    parser.add_argument("--quiet", action="store_true", help="Only print the final summary")
    parser.add_argument("--log-level", default=None, help="Override TYCOON_LOG_LEVEL")
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
        configure_logging(args.log_level or settings.log_level)
        game = simulate_game(
            num_players=args.players,
            seed=args.seed,
            max_turns=args.max_turns,
            verbose=not args.quiet,
        )
    except TycoonError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_game_summary(game)
    return 0


if __name__ == "__main__":
    sys.exit(main())
