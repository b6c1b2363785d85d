"""Random multiplication problems for the drill."""

from __future__ import annotations

import random
from typing import Optional

from times_table_trainer.core.models import (
    MULTIPLICAND_MAX,
    MULTIPLICAND_MIN,
    MULTIPLIER_MAX,
    MULTIPLIER_MIN,
)
from times_table_trainer.core.ports import RandomSource


class ProblemGenerator:
    """Draw operand pairs uniformly from the drill's times tables."""

    def __init__(self, rng: Optional[RandomSource] = None) -> None:
        self._rng: RandomSource = rng if rng is not None else random.Random()

    def generate(self) -> tuple[int, int]:
        """Return a new ``(multiplicand, multiplier)`` pair."""
        multiplicand = self._rng.randint(MULTIPLICAND_MIN, MULTIPLICAND_MAX)
        multiplier = self._rng.randint(MULTIPLIER_MIN, MULTIPLIER_MAX)
        return multiplicand, multiplier


__all__ = ["ProblemGenerator"]
