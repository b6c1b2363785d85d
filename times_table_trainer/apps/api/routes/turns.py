"""Client-agnostic turn endpoint.

The turn runs synchronously on the event loop while holding the
conversation's lock, which keeps TinyDB writes serialized.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from times_table_trainer.apps.api.conversation_locks import ConversationLocks
from times_table_trainer.apps.api.dependencies import (
    get_conversation_locks,
    get_service_container,
    require_api_token,
)
from times_table_trainer.core.api_models import SessionSnapshot, TurnRequest, TurnResponse
from times_table_trainer.core.intents import IntentType
from times_table_trainer.core.logging import get_logger
from times_table_trainer.core.models import TurnOutcome
from times_table_trainer.services import ServiceContainer
from times_table_trainer.services.turn_pipeline import run_conversation_turn

router = APIRouter(prefix="/api/v1", tags=["turns"])
logger = get_logger(__name__)


def build_turn_response(intent: str, outcome: TurnOutcome) -> TurnResponse:
    """Translate a core turn outcome into the API response model."""
    parsed = IntentType.parse(intent)
    return TurnResponse(
        text=outcome.text,
        continuation=outcome.continuation.value,
        session=(
            SessionSnapshot(**outcome.session.to_dict()) if outcome.session is not None else None
        ),
        intent_processed=parsed.value if parsed else "unknown",
    )


@router.post("/turns", response_model=TurnResponse)
async def take_turn(
    turn_request: TurnRequest,
    _: None = Depends(require_api_token),
    services: ServiceContainer = Depends(get_service_container),
    locks: ConversationLocks = Depends(get_conversation_locks),
) -> TurnResponse:
    """
    Handle one conversation turn.

    Turns from the same conversation are serialized so each one sees the
    session saved by the previous turn.
    """
    conversation_id = turn_request.conversation_id.strip()
    if not conversation_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="conversation_id is empty"
        )
    if not turn_request.intent.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="intent is empty")

    logger.info("Turn for conversation %s: intent=%s", conversation_id, turn_request.intent)
    async with locks.lock_for(conversation_id):
        outcome = run_conversation_turn(
            conversation_id,
            turn_request.intent,
            turn_request.arguments,
            turn_request.locale,
            services,
        )
    return build_turn_response(turn_request.intent, outcome)


__all__ = ["router", "build_turn_response"]
