"""
Base Schemas.

Response envelopes shared by every endpoint:

    {"result": <payload>}   on success
    {"error": "<message>"}  on failure
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class ResultResponse(BaseModel, Generic[DataT]):
    """
    Success envelope.

    All successful API responses use this structure.
    """

    result: DataT


class ErrorResponse(BaseModel):
    """Failure envelope."""

    error: str


# Example usage:
#
# @router.get("/events_for_day", response_model=ResultResponse[list[EventResponse]])
# async def events_for_day(...):
#     events = await service.events_for_day(user_id, day)
#     return ResultResponse(result=[EventResponse.from_event(e) for e in events])
