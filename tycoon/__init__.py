"""
Tycoon Rules Engine

Turn state machine, tile resolution, property economics and the cash ledger
for a property-trading board game.
"""

from .board import Board
from .config import GameConfig
from .game import Choice, GameState, TurnPhase, create_game
from .layout import BoardLayout, default_layout, load_layout
from .player import Player, PlayerState
from .presenter import Presenter

__all__ = [
    "Board",
    "BoardLayout",
    "Choice",
    "GameConfig",
    "GameState",
    "Player",
    "PlayerState",
    "Presenter",
    "TurnPhase",
    "create_game",
    "default_layout",
    "load_layout",
]
