"""JSON logging for the trainer.

Every record carries the request and turn it belongs to: the HTTP layer binds
``request_id`` and ``client_ip``, the turn pipeline adds ``conversation`` and
``intent``. Fields are bound with :func:`log_context` and stamped onto records
by :class:`LogContextFilter` on the shared root handlers.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

from pythonjsonlogger import jsonlogger

from times_table_trainer.core.config import settings

CONTEXT_FIELDS = ("request_id", "client_ip", "conversation", "intent")

_bound_fields: ContextVar[Mapping[str, str]] = ContextVar(
    "trainer_log_fields", default=MappingProxyType({})
)

LOG_LEVEL = getattr(logging, str(settings.TRAINER_LOG_LEVEL).upper(), logging.INFO)

BASE_DIR = Path(__file__).resolve().parent.parent
ROOT_DIR = BASE_DIR.parent


def _log_dir_candidates() -> Iterator[Path]:
    configured = getattr(settings, "TRAINER_LOG_DIR", None)
    if configured:
        yield Path(configured)
    yield ROOT_DIR / "logs"
    yield Path(getattr(settings, "DATA_DIR", Path("/data"))) / "logs"
    yield BASE_DIR / "logs"


def _resolve_logs_dir() -> Path:
    """Return the first log directory that can be created."""
    for candidate in _log_dir_candidates():
        try:
            candidate.mkdir(parents=True, exist_ok=True)
        except OSError:
            continue
        return candidate
    raise PermissionError("Unable to create a writable logs directory")


LOGS_DIR = _resolve_logs_dir()
LOG_FILE_PATH = LOGS_DIR / "trainer.log"
LOG_SCHEMA_VERSION = "1.0.0"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5


@contextmanager
def log_context(**fields: Optional[str]) -> Iterator[None]:
    """Attach ``fields`` to every record logged inside the block.

    Nested blocks layer on top of the enclosing one; ``None`` or empty values
    leave an outer binding in place.
    """
    unknown = set(fields) - set(CONTEXT_FIELDS)
    if unknown:
        raise ValueError(f"unknown log context fields: {sorted(unknown)}")
    merged = dict(_bound_fields.get())
    merged.update({name: str(value) for name, value in fields.items() if value})
    token = _bound_fields.set(MappingProxyType(merged))
    try:
        yield
    finally:
        _bound_fields.reset(token)


def current_log_context() -> Mapping[str, str]:
    """Return the fields bound for the current request or turn."""
    return _bound_fields.get()


class LogContextFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Stamp the bound context fields onto each record, ``-`` when unbound."""

    def filter(self, record: logging.LogRecord) -> bool:
        bound = _bound_fields.get()
        for name in CONTEXT_FIELDS:
            setattr(record, name, bound.get(name, "-"))
        return True


class VersionedJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that tags every entry with the log schema version."""

    def __init__(self, *args, schema_version: str, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._schema_version = schema_version

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("schema_version", self._schema_version)


def _build_formatter() -> VersionedJsonFormatter:
    fields = ["asctime", "levelname", "name", "message", *CONTEXT_FIELDS]
    return VersionedJsonFormatter(
        " ".join(f"%({field})s" for field in fields),
        rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
        datefmt="%Y-%m-%d %H:%M:%S",
        json_ensure_ascii=False,
        schema_version=LOG_SCHEMA_VERSION,
    )


def shared_handlers() -> list[logging.Handler]:
    """Return the trainer's handlers installed on the root logger."""
    return [
        handler
        for handler in logging.getLogger().handlers
        if any(isinstance(flt, LogContextFilter) for flt in handler.filters)
    ]


def _install_handlers() -> None:
    if shared_handlers():
        return
    formatter = _build_formatter()
    context_filter = LogContextFilter()
    handlers: list[logging.Handler] = [
        logging.StreamHandler(sys.stdout),
        RotatingFileHandler(
            LOG_FILE_PATH, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
        ),
    ]
    root = logging.getLogger()
    for handler in handlers:
        handler.addFilter(context_filter)
        handler.setFormatter(formatter)
        root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger writing through the shared root handlers."""
    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)
    _install_handlers()
    return logger


__all__ = [
    "CONTEXT_FIELDS",
    "LogContextFilter",
    "VersionedJsonFormatter",
    "current_log_context",
    "get_logger",
    "log_context",
    "shared_handlers",
    "LOG_FILE_PATH",
    "LOG_SCHEMA_VERSION",
]
