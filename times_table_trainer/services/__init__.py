"""Application service layer scaffolding for intent handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from times_table_trainer.core.ports import SessionStorePort

if TYPE_CHECKING:  # pragma: no cover - type narrowing only
    from .intent_router import IntentRouter
    from .problem_generator import ProblemGenerator
    from .prompt_catalog import PromptCatalog


DEFAULT_STREAK_CALLOUT_THRESHOLD = 3


@dataclass(slots=True)
class ServiceContainer:
    """Aggregate of application-level services available to handlers."""

    prompts: Optional["PromptCatalog"] = None
    problems: Optional["ProblemGenerator"] = None
    session_store: Optional[SessionStorePort] = None
    intent_router: Optional["IntentRouter"] = None
    streak_callout_threshold: int = DEFAULT_STREAK_CALLOUT_THRESHOLD

    def require_prompts(self) -> "PromptCatalog":
        """Return the prompt catalog or raise if it was never wired."""
        if self.prompts is None:
            raise RuntimeError("PromptCatalog has not been configured.")
        return self.prompts

    def require_problems(self) -> "ProblemGenerator":
        """Return the problem generator or raise if it was never wired."""
        if self.problems is None:
            raise RuntimeError("ProblemGenerator has not been configured.")
        return self.problems

    def require_session_store(self) -> SessionStorePort:
        """Return the session store or raise if it was never wired."""
        if self.session_store is None:
            raise RuntimeError("SessionStorePort has not been configured.")
        return self.session_store

    def require_intent_router(self) -> "IntentRouter":
        """Return the intent router or raise if it was never wired."""
        if self.intent_router is None:
            raise RuntimeError("IntentRouter has not been configured.")
        return self.intent_router


def build_default_services(
    *,
    prompts: Optional["PromptCatalog"] = None,
    problems: Optional["ProblemGenerator"] = None,
    session_store: Optional[SessionStorePort] = None,
    streak_callout_threshold: int = DEFAULT_STREAK_CALLOUT_THRESHOLD,
) -> ServiceContainer:
    """Return a service container with the game intent router wiring."""

    # pylint: disable=import-outside-toplevel
    from .intents.game_intents import build_game_router
    from .problem_generator import ProblemGenerator

    return ServiceContainer(
        prompts=prompts,
        problems=problems or ProblemGenerator(),
        session_store=session_store,
        intent_router=build_game_router(),
        streak_callout_threshold=streak_callout_threshold,
    )


__all__ = ["ServiceContainer", "build_default_services", "DEFAULT_STREAK_CALLOUT_THRESHOLD"]
