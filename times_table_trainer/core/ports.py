"""Protocol definitions for infrastructure adapters."""

# pylint: disable=unnecessary-ellipsis

from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence, TypeVar

from times_table_trainer.core.models import GameSession

T = TypeVar("T")

PromptPools = Mapping[str, Mapping[str, Sequence[str]]]


class SessionStorePort(Protocol):
    """Port exposing per-conversation game session persistence."""

    def load_session(self, conversation_id: str) -> Optional[GameSession]:
        """Return the stored session for ``conversation_id`` or ``None``."""
        ...

    def save_session(self, conversation_id: str, session: GameSession) -> None:
        """Persist ``session`` for ``conversation_id``."""
        ...

    def clear_session(self, conversation_id: str) -> None:
        """Remove any stored session for ``conversation_id``."""
        ...


class TemplateSourcePort(Protocol):
    """Port supplying locale-keyed template pools."""

    def load_pools(self) -> PromptPools:
        """Return ``{locale: {category: [template, ...]}}``."""
        ...


class RandomSource(Protocol):
    """Randomness capability; ``random.Random`` satisfies it."""

    def randint(self, a: int, b: int) -> int:
        """Return a uniform integer in ``[a, b]``."""
        ...

    def choice(self, seq: Sequence[T]) -> T:
        """Return a uniformly chosen element of ``seq``."""
        ...


__all__ = ["SessionStorePort", "TemplateSourcePort", "RandomSource", "PromptPools"]
