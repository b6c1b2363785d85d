"""Turn handlers for the multiplication drill.

Every handler takes the incoming session snapshot and returns a new one; the
caller's ``GameSession`` is never mutated in place.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from times_table_trainer.core.intents import Continuation, GuessOutcome, IntentType
from times_table_trainer.core.logging import get_logger
from times_table_trainer.core.models import GameSession, TurnOutcome
from times_table_trainer.services import ServiceContainer
from times_table_trainer.services.guess_evaluator import evaluate_guess
from times_table_trainer.services.intent_router import IntentRequest, IntentResponse, IntentRouter
from times_table_trainer.services.prompt_catalog import PromptCategory
from times_table_trainer.services.response_composer import compose
from times_table_trainer.services.streaks import record_correct, record_miss

logger = get_logger(__name__)

GUESS_ARGUMENT = "guess"


def _respond(
    intent: Optional[IntentType],
    fragments: list[str],
    session: Optional[GameSession],
    continuation: Continuation = Continuation.CONTINUE,
) -> IntentResponse:
    return IntentResponse(
        intent=intent,
        result=TurnOutcome(text=compose(fragments), session=session, continuation=continuation),
    )


def _question(services: ServiceContainer, locale: Optional[str], session: GameSession) -> str:
    return services.require_prompts().render(
        PromptCategory.QUESTION, locale, session.multiplicand, session.multiplier
    )


def _active_session(request: IntentRequest) -> Optional[GameSession]:
    if request.session is None:
        logger.warning(
            "Intent '%s' arrived without an active session; restarting the game",
            request.intent,
        )
        return None
    return replace(request.session)


def start_game(request: IntentRequest, services: ServiceContainer) -> IntentResponse:
    """Open a fresh game: greet the player and ask the first question."""
    prompts = services.require_prompts()
    multiplicand, multiplier = services.require_problems().generate()
    session = GameSession(multiplicand=multiplicand, multiplier=multiplier)
    fragments = [
        prompts.render(PromptCategory.GREETING, request.locale),
        _question(services, request.locale, session),
    ]
    return _respond(IntentType.START_GAME, fragments, session)


def check_guess(request: IntentRequest, services: ServiceContainer) -> IntentResponse:
    """Score the guess, report the answer, and move on to a new problem."""
    session = _active_session(request)
    if session is None:
        return start_game(request, services)

    prompts = services.require_prompts()
    locale = request.locale
    multiplicand, multiplier, product = session.multiplicand, session.multiplier, session.product

    outcome = evaluate_guess(multiplicand, multiplier, request.arguments.get(GUESS_ARGUMENT))
    if outcome is GuessOutcome.CORRECT:
        record_correct(session)
        fragments = [prompts.render(PromptCategory.CORRECT, locale)]
        if session.current_streak >= services.streak_callout_threshold:
            fragments.append(
                prompts.render(PromptCategory.CURRENT_STREAK, locale, session.current_streak)
            )
    else:
        record_miss(session)
        fragments = [prompts.render(PromptCategory.WRONG, locale)]
    logger.info(
        "Guess for %d x %d was %s (streak %d, best %d)",
        multiplicand,
        multiplier,
        outcome.value,
        session.current_streak,
        session.best_streak,
    )

    fragments.append(
        prompts.render(PromptCategory.RESULT, locale, multiplicand, multiplier, product)
    )
    session.set_problem(*services.require_problems().generate())
    fragments.append(_question(services, locale, session))
    return _respond(IntentType.CHECK_GUESS, fragments, session)


def pass_question(request: IntentRequest, services: ServiceContainer) -> IntentResponse:
    """Skip the pending problem; skipping breaks the streak like a wrong guess."""
    session = _active_session(request)
    if session is None:
        return start_game(request, services)

    prompts = services.require_prompts()
    locale = request.locale
    multiplicand, multiplier, product = session.multiplicand, session.multiplier, session.product
    record_miss(session)
    fragments = [
        prompts.render(PromptCategory.PASS, locale),
        prompts.render(PromptCategory.RESULT, locale, multiplicand, multiplier, product),
    ]
    session.set_problem(*services.require_problems().generate())
    fragments.append(_question(services, locale, session))
    return _respond(IntentType.PASS_QUESTION, fragments, session)


def repeat_question(request: IntentRequest, services: ServiceContainer) -> IntentResponse:
    """Ask the pending question again without touching the session."""
    session = _active_session(request)
    if session is None:
        return start_game(request, services)
    return _respond(
        IntentType.REPEAT_QUESTION, [_question(services, request.locale, session)], session
    )


def quit_game(request: IntentRequest, services: ServiceContainer) -> IntentResponse:
    """Say goodbye, mentioning the best streak if there was one, and end the conversation."""
    prompts = services.require_prompts()
    locale = request.locale
    session = request.session
    # An inbound snapshot may still hold a current streak above its best.
    best_streak = max(session.best_streak, session.current_streak) if session is not None else 0

    fragments = []
    if best_streak > 0:
        fragments.append(prompts.render(PromptCategory.BEST_STREAK, locale, best_streak))
    fragments.append(prompts.render(PromptCategory.GOODBYE, locale))
    return _respond(IntentType.QUIT_GAME, fragments, None, Continuation.END)


def unknown_intent(request: IntentRequest, services: ServiceContainer) -> IntentResponse:
    """Answer identifiers the trainer does not recognize and keep the game going."""
    logger.warning("Unrecognized intent '%s'", request.intent)
    fragments = [services.require_prompts().render(PromptCategory.FALLBACK, request.locale)]
    if request.session is not None:
        fragments.append(_question(services, request.locale, request.session))
    return _respond(None, fragments, request.session)


GAME_HANDLERS = {
    IntentType.START_GAME: start_game,
    IntentType.CHECK_GUESS: check_guess,
    IntentType.PASS_QUESTION: pass_question,
    IntentType.REPEAT_QUESTION: repeat_question,
    IntentType.QUIT_GAME: quit_game,
}


def build_game_router() -> IntentRouter:
    """Return a router wired with every game handler and the unknown-intent fallback."""
    return IntentRouter(GAME_HANDLERS, fallback=unknown_intent)


__all__ = [
    "GUESS_ARGUMENT",
    "GAME_HANDLERS",
    "build_game_router",
    "start_game",
    "check_guess",
    "pass_question",
    "repeat_question",
    "quit_game",
    "unknown_intent",
]
