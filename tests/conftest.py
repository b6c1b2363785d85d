"""Pytest configuration: ensure env vars and import path are set early.

This runs before any tests, so modules can import without local path hacks.
Also load .env before setting defaults so local overrides are used when present.
"""
from __future__ import annotations

import copy
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Iterable, Sequence

import pytest
from dotenv import load_dotenv

# Ensure repository root is on sys.path for local package imports
sys.path.append(str(Path(__file__).resolve().parents[1]))

load_dotenv(override=False)

# Keep sessions and logs out of /data during tests
_TEST_DATA_DIR = tempfile.mkdtemp(prefix="trainer-tests-")
os.environ.setdefault("DATA_DIR", _TEST_DATA_DIR)
os.environ.setdefault("TRAINER_LOG_DIR", os.path.join(_TEST_DATA_DIR, "logs"))
os.environ.setdefault("ENABLE_AUTH", "false")
os.environ.setdefault("DEFAULT_LOCALE", "en")

# pylint: disable=wrong-import-position
from times_table_trainer.adapters.session_store import InMemorySessionStore  # noqa: E402
from times_table_trainer.services import ServiceContainer, build_default_services  # noqa: E402
from times_table_trainer.services.problem_generator import ProblemGenerator  # noqa: E402
from times_table_trainer.services.prompt_catalog import PromptCatalog  # noqa: E402

TEST_POOLS: dict[str, dict[str, list[str]]] = {
    "en": {
        "greeting": ["Hello."],
        "question": ["What is {0} times {1}?"],
        "correct": ["Correct!"],
        "wrong": ["Wrong."],
        "result": ["{0} times {1} is {2}."],
        "pass": ["Skipped."],
        "current_streak": ["Streak of {0}!"],
        "best_streak": ["Best streak {0}."],
        "goodbye": ["Bye."],
        "fallback": ["Huh?"],
    },
    "de": {
        "greeting": ["Hallo."],
        "question": ["Was ist {0} mal {1}?"],
        "correct": ["Richtig!"],
        "wrong": ["Falsch."],
        "result": ["{0} mal {1} ist {2}."],
        "pass": ["Übersprungen."],
        "current_streak": ["Serie von {0}!"],
        "best_streak": ["Beste Serie {0}."],
        "goodbye": ["Tschüss."],
        "fallback": ["Wie bitte?"],
    },
}


class ScriptedRandom:
    """Deterministic randomness: queued integers and first-element choices."""

    def __init__(self, ints: Iterable[int] = ()) -> None:
        self.ints = list(ints)
        self.randint_calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.randint_calls.append((a, b))
        value = self.ints.pop(0) if self.ints else a
        assert a <= value <= b, f"scripted value {value} outside [{a}, {b}]"
        return value

    def choice(self, seq: Sequence[Any]) -> Any:
        return seq[0]


@pytest.fixture
def scripted_random() -> ScriptedRandom:
    """A scripted random source; push integers onto ``.ints`` before use."""
    return ScriptedRandom()


@pytest.fixture
def catalog(scripted_random: ScriptedRandom) -> PromptCatalog:
    """Single-template pools so responses are fully predictable."""
    return PromptCatalog(TEST_POOLS, "en", rng=scripted_random)


@pytest.fixture
def services(scripted_random: ScriptedRandom, catalog: PromptCatalog) -> ServiceContainer:
    """Service container wired with deterministic collaborators."""
    return build_default_services(
        prompts=catalog,
        problems=ProblemGenerator(scripted_random),
        session_store=InMemorySessionStore(),
    )


@pytest.fixture
def prompt_pools() -> dict[str, dict[str, list[str]]]:
    """A fresh, mutable copy of the single-template test pools."""
    return copy.deepcopy(TEST_POOLS)
