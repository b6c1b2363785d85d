"""Turn entry points: the pure turn handler and its session-store bracket."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from times_table_trainer.core.logging import get_logger, log_context
from times_table_trainer.core.models import GameSession, TurnOutcome
from times_table_trainer.services import ServiceContainer
from times_table_trainer.services.intent_router import IntentRequest

logger = get_logger(__name__)


def handle_turn(
    intent: str,
    arguments: Optional[Mapping[str, Any]],
    session: Optional[GameSession],
    locale: Optional[str],
    services: ServiceContainer,
) -> TurnOutcome:
    """Dispatch one turn and return the utterance, next session and continuation.

    No I/O happens here; loading and saving the session is the caller's job.
    """
    request = IntentRequest(
        intent=str(intent or "").strip(),
        arguments=dict(arguments or {}),
        session=session,
        locale=locale,
    )
    response = services.require_intent_router().dispatch(request, services)
    outcome = response.result
    logger.info(
        "Handled intent '%s' as '%s' -> %s",
        request.intent,
        response.intent.value if response.intent else "fallback",
        outcome.continuation.value,
    )
    return outcome


def run_conversation_turn(
    conversation_id: str,
    intent: str,
    arguments: Optional[Mapping[str, Any]],
    locale: Optional[str],
    services: ServiceContainer,
) -> TurnOutcome:
    """Load the conversation's session, handle the turn, then save or clear it."""
    store = services.require_session_store()
    with log_context(conversation=conversation_id, intent=str(intent or "").strip()):
        session = store.load_session(conversation_id)
        outcome = handle_turn(intent, arguments, session, locale, services)
        if outcome.ends_conversation or outcome.session is None:
            store.clear_session(conversation_id)
        else:
            store.save_session(conversation_id, outcome.session)
    return outcome


__all__ = ["handle_turn", "run_conversation_turn"]
