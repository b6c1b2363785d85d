"""Core data transfer objects shared across layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from times_table_trainer.core.exceptions import InvalidSessionError
from times_table_trainer.core.intents import Continuation

MULTIPLICAND_MIN, MULTIPLICAND_MAX = 2, 9
MULTIPLIER_MIN, MULTIPLIER_MAX = 1, 10


def _require_int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    # bool is an int subclass but never a valid session field
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidSessionError(f"session field {key!r} must be an integer, got {value!r}")
    return value


@dataclass(slots=True)
class GameSession:
    """Per-conversation game state threaded through every turn handler."""

    multiplicand: int
    multiplier: int
    current_streak: int = 0
    best_streak: int = 0

    def __post_init__(self) -> None:
        self.validate()

    @property
    def product(self) -> int:
        """Expected answer for the pending problem."""
        return self.multiplicand * self.multiplier

    def validate(self) -> None:
        """Raise ``InvalidSessionError`` if any invariant is violated."""
        if not MULTIPLICAND_MIN <= self.multiplicand <= MULTIPLICAND_MAX:
            raise InvalidSessionError(f"multiplicand out of range: {self.multiplicand}")
        if not MULTIPLIER_MIN <= self.multiplier <= MULTIPLIER_MAX:
            raise InvalidSessionError(f"multiplier out of range: {self.multiplier}")
        if self.current_streak < 0 or self.best_streak < 0:
            raise InvalidSessionError("streak counters must be non-negative")

    def set_problem(self, multiplicand: int, multiplier: int) -> None:
        """Replace the pending problem with a freshly generated operand pair."""
        self.multiplicand = multiplicand
        self.multiplier = multiplier

    def to_dict(self) -> dict[str, int]:
        """Return the plain-dict form used for persistence and API payloads."""
        return {
            "multiplicand": self.multiplicand,
            "multiplier": self.multiplier,
            "current_streak": self.current_streak,
            "best_streak": self.best_streak,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GameSession":
        """Build a session from persisted data, validating every field."""
        if not isinstance(data, Mapping):
            raise InvalidSessionError("session payload must be a mapping")
        return cls(
            multiplicand=_require_int(data, "multiplicand"),
            multiplier=_require_int(data, "multiplier"),
            current_streak=_require_int(data, "current_streak"),
            best_streak=_require_int(data, "best_streak"),
        )


@dataclass(slots=True)
class TurnOutcome:
    """Result of one conversation turn."""

    text: str
    session: Optional[GameSession]
    continuation: Continuation

    @property
    def ends_conversation(self) -> bool:
        """True when the turn closes the conversation."""
        return self.continuation is Continuation.END


__all__ = [
    "GameSession",
    "TurnOutcome",
    "MULTIPLICAND_MIN",
    "MULTIPLICAND_MAX",
    "MULTIPLIER_MIN",
    "MULTIPLIER_MAX",
]
