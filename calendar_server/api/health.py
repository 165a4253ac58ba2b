"""
Health Check Endpoints.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (event store reachable and its indexes consistent)
"""

import asyncio
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from calendar_server.core.exceptions import InternalError
from calendar_server.core.logging import get_logger
from calendar_server.core.utils import utc_now
from calendar_server.repositories.event import EventStore
from calendar_server.schemas.base import ResultResponse

router = APIRouter()
logger = get_logger(__name__)


def check_event_store(store: EventStore) -> dict[str, Any]:
    """
    Check the event store.

    Returns:
        Dict with status, store sizes and optional error message
    """
    try:
        store.check_consistency()
    except InternalError as e:
        logger.error("Event store inconsistent", extra={"error": e.message})
        return {"status": "unhealthy", "error": e.message}
    return {"status": "healthy", **store.stats()}


@router.get("/health")
async def health_check() -> ResultResponse[dict[str, str]]:
    """
    Liveness check.

    Returns 200 if the process is running.
    No dependency checks - this endpoint should always respond quickly.
    """
    return ResultResponse(result={"status": "healthy"})


@router.get("/health/ready", response_model=None)
async def readiness_check(request: Request) -> ResultResponse[dict[str, Any]] | JSONResponse:
    """
    Readiness check.

    Returns 200 if ready to serve traffic, 503 if the event store's
    primary map and secondary index disagree.
    """
    store: EventStore = request.app.state.event_store
    store_result = await asyncio.to_thread(check_event_store, store)

    payload = {
        "status": store_result["status"],
        "checks": {"event_store": store_result},
        "timestamp": utc_now().isoformat(),
    }

    if store_result["status"] != "healthy":
        logger.warning("Readiness check failed", extra={"checks": payload["checks"]})
        return JSONResponse(status_code=503, content={"error": "event store unhealthy", **payload})

    return ResultResponse(result=payload)
