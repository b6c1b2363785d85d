"""API request/response models for the turn endpoint and platform webhooks."""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

ArgumentValue = Union[str, int, float, None]


class SessionSnapshot(BaseModel):
    """Serialized game session returned to clients."""

    multiplicand: int
    multiplier: int
    current_streak: int
    best_streak: int


class TurnRequest(BaseModel):
    """Request model for POST /api/v1/turns."""

    conversation_id: str = Field(..., description="Conversation identifier from the client")
    intent: str = Field(..., description="Classified intent identifier, e.g. 'check.guess'")
    arguments: dict[str, ArgumentValue] = Field(
        default_factory=dict, description="Named intent arguments such as 'guess'"
    )
    locale: str | None = Field(
        default=None, description="Best-effort user locale (e.g. 'en-US'); default if omitted"
    )


class TurnResponse(BaseModel):
    """Response model for POST /api/v1/turns."""

    text: str = Field(..., description="Utterance to speak or display")
    continuation: Literal["continue", "end"] = Field(
        ..., description="Whether the conversation stays open"
    )
    session: SessionSnapshot | None = Field(
        default=None, description="Game state after the turn (absent once the game ends)"
    )
    intent_processed: str = Field(..., description="Which intent was handled")


class ApiAiUser(BaseModel):
    """User block of an Actions on Google original request."""

    model_config = ConfigDict(extra="allow")

    locale: str | None = None
    user_id: str | None = Field(default=None, alias="userId")


class ApiAiOriginalData(BaseModel):
    """Platform data forwarded by API.AI from the originating surface."""

    model_config = ConfigDict(extra="allow")

    user: ApiAiUser | None = None


class ApiAiOriginalRequest(BaseModel):
    """Original platform request wrapped in the API.AI envelope."""

    model_config = ConfigDict(extra="allow")

    source: str | None = None
    data: ApiAiOriginalData | None = None


class ApiAiResult(BaseModel):
    """Classification result of an API.AI request."""

    model_config = ConfigDict(extra="allow")

    action: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)
    resolved_query: str | None = Field(default=None, alias="resolvedQuery")


class ApiAiWebhookRequest(BaseModel):
    """Dialogflow v1 (API.AI) fulfillment request envelope."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    lang: str | None = None
    result: ApiAiResult
    original_request: ApiAiOriginalRequest | None = Field(default=None, alias="originalRequest")

    def user_locale(self) -> str | None:
        """Return the platform user locale, falling back to the agent language."""
        original = self.original_request
        if original and original.data and original.data.user and original.data.user.locale:
            return original.data.user.locale
        return self.lang


class GoogleResponseData(BaseModel):
    """Actions on Google payload of an API.AI fulfillment response."""

    expect_user_response: bool


class ApiAiResponseData(BaseModel):
    """Platform-specific data of an API.AI fulfillment response."""

    google: GoogleResponseData


class ApiAiWebhookResponse(BaseModel):
    """Dialogflow v1 (API.AI) fulfillment response."""

    model_config = ConfigDict(populate_by_name=True)

    speech: str
    display_text: str = Field(..., alias="displayText")
    data: ApiAiResponseData


__all__ = [
    "ArgumentValue",
    "SessionSnapshot",
    "TurnRequest",
    "TurnResponse",
    "ApiAiUser",
    "ApiAiOriginalData",
    "ApiAiOriginalRequest",
    "ApiAiResult",
    "ApiAiWebhookRequest",
    "ApiAiWebhookResponse",
    "ApiAiResponseData",
    "GoogleResponseData",
]
