"""
Event Model.

The calendar event entity held by the in-memory event store.
"""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True, slots=True)
class Event:
    """
    Calendar event.

    Frozen so that events handed out by the store can never be mutated
    behind its back; changes go through dataclasses.replace() and
    EventStore.update().

    Attributes:
        id: Opaque identifier assigned at creation, never changed
        user_id: Owning user (64-bit signed)
        date: Calendar day in UTC
        title: Non-empty event text
        created_at: Naive UTC creation timestamp
        updated_at: Naive UTC timestamp of the last mutation
    """

    id: str
    user_id: int
    date: date
    title: str
    created_at: datetime
    updated_at: datetime

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, user_id={self.user_id}, date={self.date}, title={self.title!r})>"
