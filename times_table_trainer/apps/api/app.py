"""FastAPI application factory."""

from __future__ import annotations

import asyncio
import contextlib
from contextlib import asynccontextmanager

from fastapi import FastAPI

from times_table_trainer import TRAINER_VERSION
from times_table_trainer.apps.api.conversation_locks import ConversationLocks, prune_periodically
from times_table_trainer.apps.api.middleware import RequestContextMiddleware
from times_table_trainer.bootstrap import build_default_service_container
from times_table_trainer.core.logging import get_logger
from times_table_trainer.services import ServiceContainer

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prune idle conversation locks for as long as the app is serving."""
    logger.info("Initializing times table trainer %s...", TRAINER_VERSION)
    pruning = asyncio.create_task(prune_periodically(app.state.conversation_locks))
    logger.info("times table trainer ready.")
    try:
        yield
    finally:
        pruning.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await pruning


def create_app(services: ServiceContainer | None = None) -> FastAPI:
    """Build the FastAPI application with configured routers.

    Without ``services`` the default TinyDB-backed container is built, which
    makes this usable directly as a uvicorn app factory.
    """
    app = FastAPI(title="Times Table Trainer", version=TRAINER_VERSION, lifespan=lifespan)
    app.state.services = services if services is not None else build_default_service_container()
    app.state.conversation_locks = ConversationLocks()
    app.add_middleware(RequestContextMiddleware)

    # Import lazily to avoid potential circular imports when routers grow.
    from .routes import health, turns, webhooks  # pylint: disable=import-outside-toplevel

    app.include_router(health.router)
    app.include_router(turns.router)
    app.include_router(webhooks.router)
    return app


__all__ = ["create_app", "lifespan"]
