"""
Dice rolling mechanics.
"""

import random
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DiceRoll:
    """Result of rolling two dice."""

    die1: int
    die2: int

    @property
    def total(self) -> int:
        return self.die1 + self.die2

    @property
    def is_doubles(self) -> bool:
        return self.die1 == self.die2

    def as_tuple(self) -> tuple:
        return (self.die1, self.die2)


class Dice:
    """Two six-sided dice. Stateless apart from the RNG."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    def roll(self) -> DiceRoll:
        return DiceRoll(self.rng.randint(1, 6), self.rng.randint(1, 6))
