"""
Exception Handlers.

Every failure leaves the server as ``{"error": "<message>"}`` with an
application/json body. Statuses:

    ValidationError                    400
    NotFoundError, ConflictError       503
    InternalError, anything unhandled  500
    routing errors (404, 405)          their own status

Usage:
    from calendar_server.core.exception_handlers import register_exception_handlers

    register_exception_handlers(app)
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from calendar_server.core.exceptions import (
    ApplicationError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from calendar_server.core.logging import get_logger
from calendar_server.schemas.base import ErrorResponse

logger = get_logger(__name__)

# Unknown and duplicate events are reported as 503, not 404 / 409.
EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    ValidationError: 400,
    NotFoundError: 503,
    ConflictError: 503,
    InternalError: 500,
}


def status_for(exc: ApplicationError) -> int:
    """HTTP status for an application error; subclasses inherit their parent's."""
    for cls in type(exc).__mro__:
        status = EXCEPTION_STATUS_MAP.get(cls)
        if status is not None:
            return status
    return 500


def _get_request_id(request: Request) -> str | None:
    """Request ID from the middleware, else from the raw header."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("x-request-id")


def _request_context(request: Request, **fields: Any) -> dict[str, Any]:
    context = {"path": request.url.path, "method": request.method, **fields}
    request_id = _get_request_id(request)
    if request_id:
        context["request_id"] = request_id
    return context


def error_response(status_code: int, message: str) -> JSONResponse:
    """Render the error envelope."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(mode="json"),
    )


async def application_error_handler(
    request: Request,
    exc: ApplicationError,
) -> JSONResponse:
    """
    Render an ApplicationError.

    Store invariant violations are logged as errors; rejected input,
    unknown events and duplicates as warnings.
    """
    status_code = status_for(exc)
    context = _request_context(request, code=exc.code, message=exc.message, status=status_code)

    if isinstance(exc, InternalError):
        logger.error("Server error", extra=context)
    else:
        logger.warning("Request rejected", extra=context)

    return error_response(status_code, exc.message)


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Requests FastAPI itself could not bind are reported as an invalid body."""
    logger.warning(
        "Request validation failed",
        extra=_request_context(request, error_count=len(exc.errors())),
    )
    return error_response(400, "invalid body")


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Wrap routing errors (404, 405) in the error envelope."""
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Log the traceback and answer with a generic 500."""
    logger.exception(
        "Unhandled exception",
        extra=_request_context(request, exception_type=type(exc).__name__),
    )
    return error_response(500, "internal error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install every handler above on the app."""
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
