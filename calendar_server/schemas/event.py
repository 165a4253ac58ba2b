"""
Event Schemas.

Pydantic schemas for event request validation and response serialization.

Request schemas validate the flat ``dict[str, str]`` produced from either a
JSON or a form-encoded body (see core.dependencies), one field at a time.
The first failing field decides the error message.
"""

import re
from datetime import date, datetime, timezone
from typing import Annotated, Any, Self

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer
from pydantic import ValidationError as PydanticValidationError

from calendar_server.core.exceptions import ValidationError
from calendar_server.core.utils import parse_day
from calendar_server.models.event import Event

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

FIELD_ERRORS: dict[str, str] = {
    "id": "id is required",
    "user_id": "invalid user_id",
    "date": "invalid date (YYYY-MM-DD)",
    "event": "event is required",
}


def _parse_user_id(value: Any) -> int:
    if not isinstance(value, str) or not _INTEGER_PATTERN.fullmatch(value):
        raise ValueError("user_id must be a decimal integer")
    parsed = int(value)
    if not INT64_MIN <= parsed <= INT64_MAX:
        raise ValueError("user_id out of range")
    return parsed


def _parse_day(value: Any) -> date:
    if not isinstance(value, str):
        raise ValueError("date must be a string")
    return parse_day(value)


def _require_text(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("must not be blank")
    return value


def _utc_iso(value: datetime) -> str:
    """ISO 8601 with a trailing Z; naive values are taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + "Z"


UserId = Annotated[int, BeforeValidator(_parse_user_id)]
Day = Annotated[date, BeforeValidator(_parse_day)]
Text = Annotated[str, BeforeValidator(_require_text)]
CalendarDate = date
Timestamp = Annotated[datetime, PlainSerializer(_utc_iso, return_type=str, when_used="json")]


class FieldsForm(BaseModel):
    """Base for request schemas built from normalized string fields."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    @classmethod
    def from_fields(cls, fields: dict[str, str]) -> Self:
        """
        Validate normalized request fields.

        Raises:
            ValidationError: With the message of the first invalid field
        """
        try:
            return cls.model_validate(fields)
        except PydanticValidationError as e:
            errors = e.errors()
            field = str(errors[0]["loc"][0]) if errors and errors[0]["loc"] else ""
            raise ValidationError(
                FIELD_ERRORS.get(field, "invalid body"),
                details={"fields": sorted({str(err["loc"][0]) for err in errors if err["loc"]})},
            ) from e


class EventCreateForm(FieldsForm):
    """Fields for creating an event."""

    user_id: UserId
    date: Day
    event: Text


class EventUpdateForm(FieldsForm):
    """Fields for updating an event. Everything but id is optional."""

    id: Text
    user_id: UserId | None = None
    date: Day | None = None
    event: Text | None = None


class EventDeleteForm(FieldsForm):
    """Fields for deleting an event."""

    id: Text


class EventQuery(FieldsForm):
    """Query parameters of the day / week / month views."""

    user_id: UserId
    date: Day


class EventResponse(BaseModel):
    """Schema for an event in API responses. The title is sent as ``event``."""

    id: str = Field(description="Event unique identifier")
    user_id: int = Field(description="Owning user")
    date: CalendarDate = Field(description="Event day (YYYY-MM-DD, UTC)")
    event: str = Field(description="Event text")
    created_at: Timestamp = Field(description="Creation timestamp (UTC)")
    updated_at: Timestamp = Field(description="Last update timestamp (UTC)")

    @classmethod
    def from_event(cls, event: Event) -> "EventResponse":
        return cls(
            id=event.id,
            user_id=event.user_id,
            date=event.date,
            event=event.title,
            created_at=event.created_at,
            updated_at=event.updated_at,
        )
