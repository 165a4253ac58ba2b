"""
FastAPI Dependencies.

Shared dependencies for request handling.

Request bodies arrive either as JSON or form-encoded. Both are normalized
here into one flat ``dict[str, str]`` so endpoints validate a single shape
regardless of how the client encoded it.
"""

from typing import Annotated, Any

from fastapi import Depends, Request

from calendar_server.core.exceptions import ValidationError
from calendar_server.core.logging import get_logger
from calendar_server.services.scheduling import SchedulingService

logger = get_logger(__name__)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_scheduling_service(request: Request) -> SchedulingService:
    """Return the scheduling service owned by the running application."""
    return request.app.state.scheduling_service


Scheduling = Annotated[SchedulingService, Depends(get_scheduling_service)]


def normalize_json_fields(payload: Any) -> dict[str, str]:
    """
    Flatten a decoded JSON body into string fields.

    ``null`` values count as absent and numbers become their decimal text.
    Anything that is not a flat object of scalars is rejected.

    Raises:
        ValidationError: If the body is not a flat JSON object
    """
    if not isinstance(payload, dict):
        raise ValidationError("invalid body")

    fields: dict[str, str] = {}
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, str):
            fields[key] = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            fields[key] = str(value)
        else:
            raise ValidationError("invalid body", details={"field": key})
    return fields


async def read_request_fields(request: Request) -> dict[str, str]:
    """
    Read the request body as string fields.

    Form encoding is assumed when no Content-Type is sent; any other
    content type is decoded as JSON. Form requests also pick up query
    parameters, with body values taking precedence. For repeated keys
    the first value wins.

    Raises:
        ValidationError: If the body cannot be decoded
    """
    content_type = request.headers.get("content-type", "").lower()

    if not content_type or content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        fields: dict[str, str] = {}
        for key, value in form.multi_items():
            if isinstance(value, str):
                fields.setdefault(key, value)
        for key, value in request.query_params.multi_items():
            fields.setdefault(key, value)
        return fields

    body = await request.body()
    if not body.strip():
        raise ValidationError("invalid body")
    try:
        payload = await request.json()
    except ValueError as e:
        logger.debug("Undecodable JSON body", extra={"error": str(e)})
        raise ValidationError("invalid body") from e
    return normalize_json_fields(payload)


def read_query_fields(request: Request) -> dict[str, str]:
    """Query parameters as string fields (first value wins)."""
    fields: dict[str, str] = {}
    for key, value in request.query_params.multi_items():
        fields.setdefault(key, value)
    return fields


RequestFields = Annotated[dict[str, str], Depends(read_request_fields)]
QueryFields = Annotated[dict[str, str], Depends(read_query_fields)]
