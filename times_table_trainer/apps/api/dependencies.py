"""Shared FastAPI dependencies for token validation and service access."""

import hmac
from typing import Annotated, Optional

from fastapi import Header, HTTPException, Request, status

from times_table_trainer.apps.api.conversation_locks import ConversationLocks
from times_table_trainer.core.config import config
from times_table_trainer.services import ServiceContainer


async def _validate_token(
    *,
    expected: Optional[str],
    authorization: Optional[str] = None,
    x_api_token: Optional[str] = None,
) -> None:
    """Shared helper to validate bearer/X-Api-Token headers."""
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token not configured",
            headers={"WWW-Authenticate": "Bearer"},
        )

    provided = None
    if authorization and authorization.lower().startswith("bearer "):
        provided = authorization.split(" ", 1)[1].strip()
    elif x_api_token:
        provided = x_api_token.strip()

    if not provided:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not hmac.compare_digest(provided, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def require_api_token(
    authorization: Annotated[Optional[str], Header(alias="Authorization")] = None,
    x_api_token: Annotated[Optional[str], Header(alias="X-Api-Token")] = None,
) -> None:
    """Token guard for the turn endpoint and platform webhooks."""
    if not config.ENABLE_AUTH:
        return
    await _validate_token(
        expected=config.API_TOKEN,
        authorization=authorization,
        x_api_token=x_api_token,
    )


async def require_healthcheck_token(
    authorization: Annotated[Optional[str], Header(alias="Authorization")] = None,
    x_api_token: Annotated[Optional[str], Header(alias="X-Api-Token")] = None,
) -> None:
    """Token guard specifically for the health check endpoint."""
    if not config.ENABLE_AUTH:
        return
    await _validate_token(
        expected=config.HEALTHCHECK_API_TOKEN,
        authorization=authorization,
        x_api_token=x_api_token,
    )


def get_service_container(request: Request) -> ServiceContainer:
    """Return the service container the app was created with."""
    services = getattr(request.app.state, "services", None)
    if not isinstance(services, ServiceContainer):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Service container not configured",
        )
    return services


def get_conversation_locks(request: Request) -> ConversationLocks:
    """Return the app's per-conversation lock registry."""
    return request.app.state.conversation_locks


__all__ = [
    "get_conversation_locks",
    "get_service_container",
    "require_api_token",
    "require_healthcheck_token",
]
