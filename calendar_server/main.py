"""
ASGI application.

    uvicorn calendar_server.main:app

``app`` is built on first attribute access, not at import, so importing
this module never reads configuration. Tests call create_app() directly
with their own store.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from calendar_server.api import router as api_router
from calendar_server.core.concurrency import shutdown_pools
from calendar_server.core.config import get_app_config, get_log_level
from calendar_server.core.config_schema import ApplicationSchema
from calendar_server.core.exception_handlers import register_exception_handlers
from calendar_server.core.logging import get_logger, setup_logging
from calendar_server.core.middleware import RequestContextMiddleware
from calendar_server.repositories.event import EventStore
from calendar_server.services.scheduling import SchedulingService

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging on startup; drain the worker pool on shutdown."""
    setup_logging(level=get_log_level())
    application = get_app_config().application
    logger.info(
        "Application starting",
        extra={"app_name": application.name, "env": application.environment},
    )

    yield

    await shutdown_pools()
    logger.info(
        "Application shutting down",
        extra={"events": app.state.event_store.count()},
    )


def _add_cors(app: FastAPI, settings: ApplicationSchema) -> None:
    if not settings.cors.origins:
        return
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app(store: EventStore | None = None) -> FastAPI:
    """
    Build the calendar application.

    Args:
        store: Store to serve; each call without one gets a new empty store.
    """
    settings = get_app_config().application
    docs_enabled = settings.debug

    app = FastAPI(
        title=settings.name,
        description=settings.description,
        version=settings.version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        lifespan=lifespan,
    )

    app.state.event_store = store if store is not None else EventStore()
    app.state.scheduling_service = SchedulingService(app.state.event_store)

    app.add_middleware(RequestContextMiddleware)
    _add_cors(app, settings)
    register_exception_handlers(app)
    app.include_router(api_router)
    return app


def get_app() -> FastAPI:
    """The module-level app, created on first call."""
    global _app
    if _app is None:
        _app = create_app()
    return _app


def __getattr__(name: str) -> FastAPI:
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
