"""Streak bookkeeping on a game session."""

from __future__ import annotations

from times_table_trainer.core.models import GameSession


def record_correct(session: GameSession) -> None:
    """Extend the current streak and lift the best streak along with it."""
    session.current_streak += 1
    session.best_streak = max(session.best_streak, session.current_streak)


def record_miss(session: GameSession) -> None:
    """Bank the current streak as best if higher, then reset it (wrong guess or pass)."""
    session.best_streak = max(session.best_streak, session.current_streak)
    session.current_streak = 0


__all__ = ["record_correct", "record_miss"]
