"""
API Routers.

Aggregates all endpoint routers.
"""

from fastapi import APIRouter

from calendar_server.api import events, health

router = APIRouter()

# Health endpoints
router.include_router(health.router, tags=["health"])

# Event endpoints
router.include_router(events.router, tags=["events"])
