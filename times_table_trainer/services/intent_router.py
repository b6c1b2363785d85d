"""Intent router and supporting request/response models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Mapping, MutableMapping, Optional

from times_table_trainer.core.intents import IntentType
from times_table_trainer.core.models import GameSession, TurnOutcome

if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from . import ServiceContainer


IntentArguments = dict[str, Any]


@dataclass(slots=True)
class IntentRequest:
    """One classified turn: raw intent identifier, arguments, session and locale."""

    intent: str
    arguments: IntentArguments = field(default_factory=dict)
    session: Optional[GameSession] = None
    locale: Optional[str] = None

    @property
    def intent_type(self) -> Optional[IntentType]:
        """Recognized intent, or ``None`` for identifiers the trainer does not know."""
        return IntentType.parse(self.intent)


@dataclass(slots=True)
class IntentResponse:
    """Uniform handler response structure for downstream transport."""

    intent: Optional[IntentType]
    result: TurnOutcome


IntentHandler = Callable[[IntentRequest, "ServiceContainer"], IntentResponse]


class IntentRouterError(RuntimeError):
    """Base error for router failures."""


class IntentHandlerNotFoundError(IntentRouterError):
    """Raised when no handler is registered for the requested intent."""


class IntentRouter:
    """Dispatch intents to registered handlers.

    Identifiers outside :class:`IntentType` go to the fallback handler when one
    is configured. A known intent without a registered handler is a wiring
    error and always raises.
    """

    def __init__(
        self,
        handlers: Mapping[IntentType, IntentHandler] | None = None,
        fallback: IntentHandler | None = None,
    ) -> None:
        self._handlers: MutableMapping[IntentType, IntentHandler] = dict(handlers or {})
        self._fallback = fallback

    def register(self, intent: IntentType, handler: IntentHandler) -> None:
        """Register or replace a handler for ``intent``."""

        self._handlers[intent] = handler

    def unregister(self, intent: IntentType) -> None:
        """Remove a handler if present."""

        self._handlers.pop(intent, None)

    def set_fallback(self, handler: IntentHandler | None) -> None:
        """Install the handler used for unrecognized intent identifiers."""

        self._fallback = handler

    def dispatch(self, request: IntentRequest, services: "ServiceContainer") -> IntentResponse:
        """Invoke the handler for ``request.intent`` with the provided services."""

        intent = request.intent_type
        if intent is None:
            if self._fallback is None:
                raise IntentHandlerNotFoundError(
                    f"No handler registered for intent {request.intent!r}"
                )
            return self._fallback(request, services)
        try:
            handler = self._handlers[intent]
        except KeyError as exc:
            raise IntentHandlerNotFoundError(
                f"No handler registered for intent {intent.value}"
            ) from exc
        return handler(request, services)

    def handlers(self) -> Mapping[IntentType, IntentHandler]:
        """Return a shallow copy of the current intent handler registry."""

        return dict(self._handlers)


__all__ = [
    "IntentRouter",
    "IntentRouterError",
    "IntentHandlerNotFoundError",
    "IntentHandler",
    "IntentArguments",
    "IntentRequest",
    "IntentResponse",
]
