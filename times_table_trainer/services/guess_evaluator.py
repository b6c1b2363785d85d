"""Guess parsing and classification.

Guesses arrive as free-form intent arguments (numbers or strings from the NLU
layer). Anything that does not parse to a finite number is simply a wrong
answer, never an error. Parsed guesses are ``Decimal`` so arbitrarily large
or long inputs compare exactly against the product.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Optional

from times_table_trainer.core.intents import GuessOutcome

# Plain decimal notation only: no digit grouping, no non-ASCII digits,
# no "inf"/"nan" words.
_DECIMAL_GUESS = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_guess(value: Any) -> Optional[Decimal]:
    """Return ``value`` as an exact finite number, or ``None`` when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        number = Decimal(value)
        return number if number.is_finite() else None
    if isinstance(value, str):
        text = value.strip()
        if _DECIMAL_GUESS.fullmatch(text):
            return Decimal(text)
    return None


def evaluate_guess(multiplicand: int, multiplier: int, guess: Any) -> GuessOutcome:
    """Classify ``guess`` against ``multiplicand * multiplier``."""
    parsed = parse_guess(guess)
    if parsed is not None and parsed == multiplicand * multiplier:
        return GuessOutcome.CORRECT
    return GuessOutcome.INCORRECT


__all__ = ["parse_guess", "evaluate_guess"]
