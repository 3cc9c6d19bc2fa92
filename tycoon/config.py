"""
Game configuration settings.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from tycoon.exceptions import ConfigurationError

TIMER_OPTIONS = (0, 30, 60, 90, 120)


@dataclass
class GameConfig:
    """Rules for a single Tycoon match. Read once at game start."""

    starting_cash: int = 1500
    go_salary: int = 200
    jail_fine: int = 50
    mortgage_interest_rate: float = 0.10

    max_jail_turns: int = 3
    max_consecutive_doubles: int = 3

    player_count: int = 2
    computer_count: int = 0

    # Minutes; 0 disables the match timer
    timer_minutes: int = 0
    time_limit_turns: Optional[int] = None

    seed: Optional[int] = None

    # House rules
    require_pass_go_to_buy: bool = True
    upgrade_requires_monopoly: bool = False
    even_building: bool = False
    free_parking_fees: bool = True

    utility_multipliers: Tuple[int, int] = (4, 10)

    def __post_init__(self) -> None:
        if self.timer_minutes not in TIMER_OPTIONS:
            raise ConfigurationError(
                f"timer_minutes must be one of {TIMER_OPTIONS}, got {self.timer_minutes}"
            )
        if self.starting_cash < 0 or self.go_salary < 0 or self.jail_fine < 0:
            raise ConfigurationError("Cash amounts must be non-negative")

    @property
    def total_players(self) -> int:
        return self.player_count + self.computer_count

    def unmortgage_cost(self, mortgage_value: int) -> int:
        """Mortgage value plus interest, rounded down."""
        return int(mortgage_value * (1 + self.mortgage_interest_rate))
