"""Health and readiness routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from times_table_trainer.apps.api.conversation_locks import ConversationLocks

from ..dependencies import get_conversation_locks, require_healthcheck_token

router = APIRouter()


@router.get("/")
def read_root() -> dict[str, str]:
    """Health/info endpoint with a short usage message."""
    return {"message": "Welcome to the times table trainer. Refer to /docs for endpoints."}


@router.get("/alive")
async def alive_check(
    _: None = Depends(require_healthcheck_token),
    locks: ConversationLocks = Depends(get_conversation_locks),
) -> JSONResponse:
    """Authenticated health check endpoint for infrastructure monitoring."""
    return JSONResponse(
        {
            "status": "ok",
            "message": "Times table trainer is alive and healthy.",
            "conversation_locks": locks.stats(),
        }
    )


__all__ = ["router"]
