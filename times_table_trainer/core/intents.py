"""Intent identifiers and turn-level enums for the trainer."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class IntentType(str, Enum):
    """Enumeration of the conversation intents the trainer understands."""

    START_GAME = "input.welcome"
    CHECK_GUESS = "check.guess"
    PASS_QUESTION = "pass.question"
    REPEAT_QUESTION = "repeat.question"
    QUIT_GAME = "quit.game"

    @classmethod
    def parse(cls, value: object) -> Optional["IntentType"]:
        """Return the matching intent for ``value`` or ``None`` if unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip())
        except ValueError:
            return None


class Continuation(str, Enum):
    """Whether the conversation stays open after a turn."""

    CONTINUE = "continue"
    END = "end"


class GuessOutcome(str, Enum):
    """Classification of a submitted guess."""

    CORRECT = "correct"
    INCORRECT = "incorrect"


__all__ = ["IntentType", "Continuation", "GuessOutcome"]
