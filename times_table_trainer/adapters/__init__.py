"""Infrastructure adapter exports."""

from .prompt_files import JsonPromptSource
from .session_store import InMemorySessionStore, TinyDBSessionStore

__all__ = [
    "InMemorySessionStore",
    "JsonPromptSource",
    "TinyDBSessionStore",
]
