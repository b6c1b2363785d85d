"""CLI commands to play the drill locally and to serve the API."""

from __future__ import annotations

import random
import uuid
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from times_table_trainer.adapters.session_store import InMemorySessionStore
from times_table_trainer.core.config import settings
from times_table_trainer.core.intents import IntentType
from times_table_trainer.services import ServiceContainer, build_default_services
from times_table_trainer.services.problem_generator import ProblemGenerator
from times_table_trainer.services.prompt_catalog import load_prompt_catalog
from times_table_trainer.services.turn_pipeline import run_conversation_turn

console = Console()

KEYWORD_INTENTS = {
    "pass": IntentType.PASS_QUESTION,
    "skip": IntentType.PASS_QUESTION,
    "repeat": IntentType.REPEAT_QUESTION,
    "again": IntentType.REPEAT_QUESTION,
    "quit": IntentType.QUIT_GAME,
    "exit": IntentType.QUIT_GAME,
    "stop": IntentType.QUIT_GAME,
}


def _build_services(seed: Optional[int]) -> ServiceContainer:
    rng = random.Random(seed)
    return build_default_services(
        prompts=load_prompt_catalog(settings, rng=rng),
        problems=ProblemGenerator(rng),
        session_store=InMemorySessionStore(),
        streak_callout_threshold=settings.STREAK_CALLOUT_THRESHOLD,
    )


def classify_input(text: str) -> tuple[IntentType, dict[str, str]]:
    """Map a line typed by the player to an intent and its arguments."""
    cleaned = text.strip()
    intent = KEYWORD_INTENTS.get(cleaned.lower())
    if intent is not None:
        return intent, {}
    return IntentType.CHECK_GUESS, {"guess": cleaned}


def play(
    locale: str = typer.Option(settings.DEFAULT_LOCALE, "--locale", "-l", help="Prompt locale"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible games"),
) -> None:
    """Play the multiplication drill in the terminal."""
    services = _build_services(seed)
    conversation_id = uuid.uuid4().hex

    outcome = run_conversation_turn(
        conversation_id, IntentType.START_GAME.value, {}, locale, services
    )
    console.print(f"[bold cyan]{outcome.text}[/bold cyan]")
    console.print("[dim]Type a number to answer, or pass, repeat, quit.[/dim]")

    while not outcome.ends_conversation:
        try:
            line = typer.prompt("You", default="", show_default=False)
        except typer.Abort:
            line = "quit"
        intent, arguments = classify_input(line)
        outcome = run_conversation_turn(
            conversation_id, intent.value, arguments, locale, services
        )
        console.print(f"[bold cyan]{outcome.text}[/bold cyan]")


def list_locales() -> None:
    """List the locales with configured prompt pools."""
    catalog = load_prompt_catalog(settings)
    table = Table(title="Prompt locales")
    table.add_column("Locale", style="cyan")
    table.add_column("Default")
    for locale in catalog.locales():
        table.add_row(locale, "yes" if locale == catalog.default_locale else "")
    console.print(table)


def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
) -> None:
    """Serve the HTTP API with uvicorn."""
    import uvicorn  # pylint: disable=import-outside-toplevel

    uvicorn.run("times_table_trainer.apps.api.app:create_app", factory=True, host=host, port=port)


__all__ = ["play", "list_locales", "serve", "classify_input"]
