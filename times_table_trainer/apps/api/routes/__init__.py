"""Router namespace exports for FastAPI include hooks."""

from . import health, turns, webhooks

__all__ = ["health", "turns", "webhooks"]
