"""Game session adapters implementing the session store port.

Provides TinyDB database wiring and session access helpers, plus an in-memory
store for the CLI and tests.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, cast

from tinydb import Query, TinyDB

from times_table_trainer.core.config import config
from times_table_trainer.core.exceptions import InvalidSessionError
from times_table_trainer.core.logging import get_logger
from times_table_trainer.core.models import GameSession
from times_table_trainer.core.ports import SessionStorePort

# Provide a QueryLike alias for static checkers; at runtime use Any.
if TYPE_CHECKING:  # pragma: no cover - typing only
    from tinydb.queries import QueryLike  # type: ignore
else:
    QueryLike = Any  # type: ignore[misc,assignment]

logger = get_logger(__name__)

SESSIONS_TABLE = "sessions"

# Resolve from settings dynamically to satisfy static analysis.
DATA_DIR = Path(getattr(config, "DATA_DIR", Path("/data")))
DB_PATH = DATA_DIR / "sessions.json"
_db: Optional[TinyDB] = None


def get_session_db() -> TinyDB:
    """Return the process-wide TinyDB instance for game sessions."""
    global _db  # pylint: disable=global-statement
    if _db is None:
        DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        _db = TinyDB(str(DB_PATH))
    return _db


def _is_expired(updated_at: Any, now: float) -> bool:
    ttl = int(config.SESSION_TTL_SECONDS)
    if ttl <= 0:
        return False
    if not isinstance(updated_at, (int, float)):
        return True
    return now - float(updated_at) > ttl


def get_session_record(conversation_id: str) -> Optional[Dict[str, Any]]:
    """Return the raw stored record for ``conversation_id`` if present."""
    q = Query()
    cond = cast(QueryLike, q.conversation_id == conversation_id)
    raw = get_session_db().table(SESSIONS_TABLE).get(cond)
    result = cast(Optional[Dict[str, Any]], raw)
    return dict(result) if result else None


def load_game_session(conversation_id: str, now: Optional[float] = None) -> Optional[GameSession]:
    """Load the session for ``conversation_id``, dropping expired or corrupt records."""
    record = get_session_record(conversation_id)
    if record is None:
        return None

    current_time = time.time() if now is None else now
    if _is_expired(record.get("updated_at"), current_time):
        logger.info("Discarding expired session for conversation %s", conversation_id)
        clear_game_session(conversation_id)
        return None

    try:
        return GameSession.from_dict(record.get("session") or {})
    except InvalidSessionError:
        logger.warning(
            "Discarding corrupt session for conversation %s", conversation_id, exc_info=True
        )
        clear_game_session(conversation_id)
        return None


def save_game_session(
    conversation_id: str, session: GameSession, now: Optional[float] = None
) -> None:
    """Upsert ``session`` for ``conversation_id`` and stamp the update time."""
    q = Query()
    cond = cast(QueryLike, q.conversation_id == conversation_id)
    record = {
        "conversation_id": conversation_id,
        "session": session.to_dict(),
        "updated_at": time.time() if now is None else now,
    }
    get_session_db().table(SESSIONS_TABLE).upsert(record, cond)


def clear_game_session(conversation_id: str) -> None:
    """Remove any stored session for ``conversation_id``."""
    q = Query()
    cond = cast(QueryLike, q.conversation_id == conversation_id)
    get_session_db().table(SESSIONS_TABLE).remove(cond)


class TinyDBSessionStore(SessionStorePort):
    """Concrete adapter wrapping TinyDB helper functions."""

    def load_session(self, conversation_id: str) -> Optional[GameSession]:
        return load_game_session(conversation_id)

    def save_session(self, conversation_id: str, session: GameSession) -> None:
        save_game_session(conversation_id, session)

    def clear_session(self, conversation_id: str) -> None:
        clear_game_session(conversation_id)


class InMemorySessionStore(SessionStorePort):
    """Process-local session store; sessions are kept as plain dicts."""

    def __init__(self) -> None:
        self._sessions: dict[str, dict[str, int]] = {}

    def load_session(self, conversation_id: str) -> Optional[GameSession]:
        data = self._sessions.get(conversation_id)
        return GameSession.from_dict(data) if data is not None else None

    def save_session(self, conversation_id: str, session: GameSession) -> None:
        self._sessions[conversation_id] = session.to_dict()

    def clear_session(self, conversation_id: str) -> None:
        self._sessions.pop(conversation_id, None)

    def __len__(self) -> int:
        return len(self._sessions)


__all__ = [
    "TinyDBSessionStore",
    "InMemorySessionStore",
    "get_session_db",
    "get_session_record",
    "load_game_session",
    "save_game_session",
    "clear_game_session",
    "SESSIONS_TABLE",
]
