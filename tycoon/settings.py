"""
Environment configuration using pydantic-settings.

Typed access to the rules and setup a host application would otherwise hard
code. Values are read once and turned into a ``GameConfig`` and, when
``TYCOON_LAYOUT_FILE`` is set, a custom ``BoardLayout``.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tycoon.config import TIMER_OPTIONS, GameConfig
from tycoon.exceptions import ConfigurationError
from tycoon.layout import BoardLayout, default_layout, load_layout_file

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class TycoonSettings(BaseSettings):
    """
    Match setup read from the environment.

    Environment variables (prefix: TYCOON_):
        TYCOON_PLAYER_COUNT    - Human seats (default: 2)
        TYCOON_COMPUTER_COUNT  - Computer seats (default: 0)
        TYCOON_TIMER_MINUTES   - 0 (off), 30, 60, 90 or 120
        TYCOON_STARTING_CASH   - Cash per player (default: 1500)
        TYCOON_SEED            - RNG seed for reproducible games
        TYCOON_LAYOUT_FILE     - JSON board layout replacing the default board
        TYCOON_LOG_LEVEL       - DEBUG | INFO | WARNING | ERROR (default: WARNING)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="TYCOON_",
    )

    player_count: int = Field(default=2, ge=0, le=8, description="Number of human players.")
    computer_count: int = Field(default=0, ge=0, le=8, description="Number of computer players.")
    timer_minutes: int = Field(default=0, description="Match timer in minutes; 0 disables it.")
    time_limit_turns: Optional[int] = Field(default=None, gt=0)

    starting_cash: int = Field(default=1500, ge=0)
    go_salary: int = Field(default=200, ge=0)
    jail_fine: int = Field(default=50, ge=0)
    mortgage_interest_rate: float = Field(default=0.10, ge=0)

    require_pass_go_to_buy: bool = True
    upgrade_requires_monopoly: bool = False
    even_building: bool = False
    free_parking_fees: bool = True

    seed: Optional[int] = None
    layout_file: Optional[Path] = Field(default=None, description="Path to a JSON board layout.")
    log_level: str = Field(default="WARNING", description="Root log level for the CLI.")

    @field_validator("timer_minutes")
    @classmethod
    def validate_timer(cls, value: int) -> int:
        if value not in TIMER_OPTIONS:
            raise ValueError(f"timer_minutes must be one of {TIMER_OPTIONS}")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        value = str(value).upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return value

    @field_validator("computer_count")
    @classmethod
    def validate_seats(cls, value: int, info) -> int:
        total = info.data.get("player_count", 0) + value
        if not 1 <= total <= 8:
            raise ValueError(f"A game needs 1-8 players, got {total}")
        return value

    def to_game_config(self) -> GameConfig:
        """Build the per-match rules."""
        return GameConfig(
            starting_cash=self.starting_cash,
            go_salary=self.go_salary,
            jail_fine=self.jail_fine,
            mortgage_interest_rate=self.mortgage_interest_rate,
            player_count=self.player_count,
            computer_count=self.computer_count,
            timer_minutes=self.timer_minutes,
            time_limit_turns=self.time_limit_turns,
            seed=self.seed,
            require_pass_go_to_buy=self.require_pass_go_to_buy,
            upgrade_requires_monopoly=self.upgrade_requires_monopoly,
            even_building=self.even_building,
            free_parking_fees=self.free_parking_fees,
        )

    def load_board_layout(self) -> BoardLayout:
        """The configured layout file, or the default board."""
        if self.layout_file is None:
            return default_layout()
        return load_layout_file(self.layout_file)


@lru_cache
def get_settings() -> TycoonSettings:
    """
    Return cached settings instance.

    Raises:
        ConfigurationError: if the environment holds invalid values.
    """
    try:
        return TycoonSettings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid TYCOON_ settings: {e}") from e


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING), format=LOG_FORMAT)
