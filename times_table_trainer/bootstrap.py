"""Application bootstrap helpers for assembling the service container."""

from __future__ import annotations

from times_table_trainer.adapters.session_store import TinyDBSessionStore
from times_table_trainer.core.config import settings
from times_table_trainer.services import ServiceContainer, build_default_services
from times_table_trainer.services.prompt_catalog import load_prompt_catalog


def build_default_service_container() -> ServiceContainer:
    """Return the default service container wired to production adapters."""

    return build_default_services(
        prompts=load_prompt_catalog(settings),
        session_store=TinyDBSessionStore(),
        streak_callout_threshold=settings.STREAK_CALLOUT_THRESHOLD,
    )


__all__ = ["build_default_service_container"]
