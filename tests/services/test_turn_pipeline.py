"""Tests for the session-store bracket around a single turn."""

from __future__ import annotations

import logging

import pytest

from times_table_trainer.core.intents import Continuation
from times_table_trainer.core.logging import current_log_context
from times_table_trainer.core.models import GameSession
from times_table_trainer.services import ServiceContainer
from times_table_trainer.services.turn_pipeline import handle_turn, run_conversation_turn


def test_turn_saves_next_session(services: ServiceContainer, scripted_random) -> None:
    scripted_random.ints = [3, 4, 5, 6]
    store = services.require_session_store()

    first = run_conversation_turn("conv-1", "input.welcome", {}, "en", services)
    assert store.load_session("conv-1") == first.session == GameSession(3, 4)

    second = run_conversation_turn("conv-1", "check.guess", {"guess": 12}, "en", services)
    assert second.text == "Correct! 3 times 4 is 12. What is 5 times 6?"
    assert store.load_session("conv-1") == GameSession(5, 6, 1, 1)


def test_quit_clears_stored_session(services: ServiceContainer) -> None:
    store = services.require_session_store()
    store.save_session("conv-1", GameSession(3, 4, 0, 5))

    outcome = run_conversation_turn("conv-1", "quit.game", None, "en", services)

    assert outcome.text == "Best streak 5. Bye."
    assert outcome.continuation is Continuation.END
    assert store.load_session("conv-1") is None


def test_conversations_are_isolated(services: ServiceContainer, scripted_random) -> None:
    scripted_random.ints = [3, 4, 7, 8]
    store = services.require_session_store()

    run_conversation_turn("alice", "input.welcome", {}, "en", services)
    run_conversation_turn("bob", "input.welcome", {}, "de", services)
    run_conversation_turn("alice", "quit.game", {}, "en", services)

    assert store.load_session("alice") is None
    assert store.load_session("bob") == GameSession(7, 8)


def test_unknown_intent_without_session_stores_nothing(services: ServiceContainer) -> None:
    outcome = run_conversation_turn("conv-1", "smalltalk.weather", {}, "en", services)

    assert outcome.text == "Huh?"
    assert outcome.continuation is Continuation.CONTINUE
    assert len(services.require_session_store()) == 0  # type: ignore[arg-type]


class _ContextRecorder(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.INFO)
        self.contexts: list[dict[str, str]] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.contexts.append(dict(current_log_context()))


def test_turn_logs_carry_conversation_and_intent(services: ServiceContainer) -> None:
    recorder = _ContextRecorder()
    pipeline_logger = logging.getLogger("times_table_trainer.services.turn_pipeline")
    pipeline_logger.addHandler(recorder)
    try:
        run_conversation_turn("conv-42", " input.welcome ", {}, "en", services)
    finally:
        pipeline_logger.removeHandler(recorder)

    assert {"conversation": "conv-42", "intent": "input.welcome"} in recorder.contexts
    assert not current_log_context()


def test_handle_turn_requires_router() -> None:
    with pytest.raises(RuntimeError):
        handle_turn("input.welcome", {}, None, "en", ServiceContainer())


def test_run_turn_requires_session_store(services: ServiceContainer) -> None:
    services.session_store = None
    with pytest.raises(RuntimeError):
        run_conversation_turn("conv-1", "input.welcome", {}, "en", services)
