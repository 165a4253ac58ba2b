"""
Event API Endpoints.

HTTP surface of the scheduling service:

    POST /create_event       user_id, date, event
    POST /update_event       id, [user_id], [date], [event]
    POST /delete_event       id
    GET  /events_for_day     ?user_id=&date=
    GET  /events_for_week    ?user_id=&date=
    GET  /events_for_month   ?user_id=&date=

Bodies may be JSON or form-encoded. Successful responses are wrapped as
{"result": ...}; failures are rendered by core.exception_handlers.
"""

from fastapi import APIRouter

from calendar_server.core.dependencies import QueryFields, RequestFields, Scheduling
from calendar_server.schemas.base import ErrorResponse, ResultResponse
from calendar_server.schemas.event import (
    EventCreateForm,
    EventDeleteForm,
    EventQuery,
    EventResponse,
    EventUpdateForm,
)

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    500: {"model": ErrorResponse, "description": "Unexpected failure"},
    503: {"model": ErrorResponse, "description": "Duplicate or unknown event"},
}


@router.post(
    "/create_event",
    response_model=ResultResponse[EventResponse],
    responses=_ERROR_RESPONSES,
    summary="Create an event",
    description="Create an event for a user on a day. Rejects a repeated (user, date, title).",
)
async def create_event(
    fields: RequestFields,
    service: Scheduling,
) -> ResultResponse[EventResponse]:
    """Create an event."""
    form = EventCreateForm.from_fields(fields)
    event = await service.create_event(form.user_id, form.date, form.event)
    return ResultResponse(result=EventResponse.from_event(event))


@router.post(
    "/update_event",
    response_model=ResultResponse[EventResponse],
    responses=_ERROR_RESPONSES,
    summary="Update an event",
    description="Update an existing event. Only provided fields are changed.",
)
async def update_event(
    fields: RequestFields,
    service: Scheduling,
) -> ResultResponse[EventResponse]:
    """Update an event."""
    form = EventUpdateForm.from_fields(fields)
    event = await service.update_event(
        form.id,
        user_id=form.user_id,
        day=form.date,
        title=form.event,
    )
    return ResultResponse(result=EventResponse.from_event(event))


@router.post(
    "/delete_event",
    response_model=ResultResponse[str],
    responses=_ERROR_RESPONSES,
    summary="Delete an event",
    description="Permanently delete an event.",
)
async def delete_event(
    fields: RequestFields,
    service: Scheduling,
) -> ResultResponse[str]:
    """Delete an event."""
    form = EventDeleteForm.from_fields(fields)
    await service.delete_event(form.id)
    return ResultResponse(result="deleted")


@router.get(
    "/events_for_day",
    response_model=ResultResponse[list[EventResponse]],
    responses=_ERROR_RESPONSES,
    summary="Events of one day",
)
async def events_for_day(
    params: QueryFields,
    service: Scheduling,
) -> ResultResponse[list[EventResponse]]:
    """List a user's events on one day."""
    query = EventQuery.from_fields(params)
    events = await service.events_for_day(query.user_id, query.date)
    return ResultResponse(result=[EventResponse.from_event(e) for e in events])


@router.get(
    "/events_for_week",
    response_model=ResultResponse[list[EventResponse]],
    responses=_ERROR_RESPONSES,
    summary="Events of one week",
    description="List a user's events in the Monday-to-Sunday week containing the date.",
)
async def events_for_week(
    params: QueryFields,
    service: Scheduling,
) -> ResultResponse[list[EventResponse]]:
    """List a user's events in one week."""
    query = EventQuery.from_fields(params)
    events = await service.events_for_week(query.user_id, query.date)
    return ResultResponse(result=[EventResponse.from_event(e) for e in events])


@router.get(
    "/events_for_month",
    response_model=ResultResponse[list[EventResponse]],
    responses=_ERROR_RESPONSES,
    summary="Events of one month",
    description="List a user's events in the calendar month containing the date.",
)
async def events_for_month(
    params: QueryFields,
    service: Scheduling,
) -> ResultResponse[list[EventResponse]]:
    """List a user's events in one month."""
    query = EventQuery.from_fields(params)
    events = await service.events_for_month(query.user_id, query.date)
    return ResultResponse(result=[EventResponse.from_event(e) for e in events])
