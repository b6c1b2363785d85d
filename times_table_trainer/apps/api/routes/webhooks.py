"""Platform webhook routes (Dialogflow v1 / API.AI fulfillment).

Like the turn endpoint, each fulfillment runs synchronously on the event loop
while holding the conversation's lock, which keeps TinyDB writes serialized.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from fastapi import APIRouter, Depends, Request

from times_table_trainer.apps.api.conversation_locks import ConversationLocks
from times_table_trainer.apps.api.dependencies import (
    get_conversation_locks,
    get_service_container,
    require_api_token,
)
from times_table_trainer.core.api_models import (
    ApiAiResponseData,
    ApiAiWebhookRequest,
    ApiAiWebhookResponse,
    GoogleResponseData,
)
from times_table_trainer.core.intents import Continuation
from times_table_trainer.core.logging import get_logger
from times_table_trainer.core.models import TurnOutcome
from times_table_trainer.services import ServiceContainer
from times_table_trainer.services.turn_pipeline import run_conversation_turn

router = APIRouter(prefix="/webhooks", tags=["webhooks"])
logger = get_logger(__name__)

REDACTED_HEADERS = {"authorization", "x-api-token", "cookie"}


def _loggable_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {
        key: ("<redacted>" if key.lower() in REDACTED_HEADERS else value)
        for key, value in headers.items()
    }


def _arguments(parameters: Mapping[str, Any]) -> dict[str, Any]:
    # API.AI sends unfilled parameters as empty strings
    return {key: value for key, value in parameters.items() if value != ""}


def build_apiai_response(outcome: TurnOutcome) -> ApiAiWebhookResponse:
    """Translate a core turn outcome into an API.AI fulfillment response."""
    return ApiAiWebhookResponse(
        speech=outcome.text,
        display_text=outcome.text,
        data=ApiAiResponseData(
            google=GoogleResponseData(
                expect_user_response=outcome.continuation is Continuation.CONTINUE
            )
        ),
    )


@router.post("/apiai", response_model=ApiAiWebhookResponse)
async def handle_apiai_webhook(
    request: Request,
    envelope: ApiAiWebhookRequest,
    _: None = Depends(require_api_token),
    services: ServiceContainer = Depends(get_service_container),
    locks: ConversationLocks = Depends(get_conversation_locks),
) -> ApiAiWebhookResponse:
    """Fulfill an API.AI action by running it as one conversation turn."""
    logger.debug("Request headers: %s", json.dumps(_loggable_headers(request.headers)))
    logger.debug(
        "Request body: %s", envelope.model_dump_json(by_alias=True, exclude_none=True)
    )

    async with locks.lock_for(envelope.session_id):
        outcome = run_conversation_turn(
            envelope.session_id,
            envelope.result.action,
            _arguments(envelope.result.parameters),
            envelope.user_locale(),
            services,
        )
    return build_apiai_response(outcome)


__all__ = ["router", "build_apiai_response"]
