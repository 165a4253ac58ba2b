"""
Scheduling Service.

Business logic layer for calendar events: duplicate detection on create,
partial updates, UTC day normalization and the day / week / month views.
"""

import dataclasses
from collections.abc import Callable
from concurrent.futures import Executor
from datetime import date, datetime

from calendar_server.core.exceptions import DuplicateEventError
from calendar_server.core.utils import month_bounds, to_utc_day, utc_now, week_bounds
from calendar_server.models.event import Event
from calendar_server.repositories.base import EventRepository
from calendar_server.services.base import BaseService
from calendar_server.services.ids import EventIdGenerator


class SchedulingService(BaseService):
    """
    Service for calendar event business rules.

    Every date argument may be a date or a datetime; datetimes are
    reduced to their UTC calendar day before use.
    """

    def __init__(
        self,
        repo: EventRepository,
        id_generator: Callable[[], str] | None = None,
        clock: Callable[[], datetime] = utc_now,
        executor: Executor | None = None,
    ) -> None:
        super().__init__(executor)
        self.repo = repo
        self._new_id = id_generator or EventIdGenerator()
        self._clock = clock

    async def create_event(
        self,
        user_id: int,
        day: date | datetime,
        title: str,
    ) -> Event:
        """
        Create a new event.

        Args:
            user_id: Owning user
            day: Event day
            title: Event text

        Returns:
            Stored event

        Raises:
            ValidationError: If the title is blank
            DuplicateEventError: If the user already has this title on this day
        """
        self._validate_required({"event": title}, ["event"])
        day = to_utc_day(day)

        now = self._clock()
        event = Event(
            id=self._new_id(),
            user_id=user_id,
            date=day,
            title=title,
            created_at=now,
            updated_at=now,
        )
        # Duplicate check and insert share one write lock in the store
        try:
            event = await self._run(self.repo.create_unique, event)
        except DuplicateEventError:
            self._log_operation(
                "Duplicate event rejected",
                user_id=user_id,
                date=day.isoformat(),
            )
            raise

        self._log_operation(
            "Event created",
            event_id=event.id,
            user_id=user_id,
            date=day.isoformat(),
        )
        return event

    async def update_event(
        self,
        event_id: str,
        user_id: int | None = None,
        day: date | datetime | None = None,
        title: str | None = None,
    ) -> Event:
        """
        Update an existing event.

        Only the fields passed (not None) are changed. The (user, date,
        title) uniqueness rule is NOT re-checked here, so an update may
        produce a triple that create_event would have rejected.

        Args:
            event_id: Event to update
            user_id: New owner
            day: New day
            title: New text

        Returns:
            Updated event

        Raises:
            ValidationError: If a blank title is given
            NotFoundError: If the event does not exist
        """
        existing = await self._run(self.repo.get_by_id, event_id)

        changes: dict[str, object] = {}
        if user_id is not None:
            changes["user_id"] = user_id
        if day is not None:
            changes["date"] = to_utc_day(day)
        if title is not None:
            self._validate_required({"event": title}, ["event"])
            changes["title"] = title

        updated = dataclasses.replace(existing, **changes, updated_at=self._clock())
        updated = await self._run(self.repo.update, updated)

        self._log_operation(
            "Event updated",
            event_id=event_id,
            fields=sorted(changes),
        )
        return updated

    async def delete_event(self, event_id: str) -> None:
        """
        Delete an event.

        Raises:
            NotFoundError: If the event does not exist
        """
        await self._run(self.repo.delete, event_id)
        self._log_operation("Event deleted", event_id=event_id)

    async def get_event(self, event_id: str) -> Event:
        """
        Get an event by ID.

        Raises:
            NotFoundError: If the event does not exist
        """
        return await self._run(self.repo.get_by_id, event_id)

    async def events_for_day(self, user_id: int, day: date | datetime) -> list[Event]:
        """Events of the user on the given day, oldest first."""
        day = to_utc_day(day)
        self._log_debug("Listing day", user_id=user_id, date=day.isoformat())
        return await self._run(self.repo.list_for_date, user_id, day)

    async def events_for_week(self, user_id: int, day: date | datetime) -> list[Event]:
        """Events of the user in the Monday-to-Sunday week containing day."""
        start, end = week_bounds(to_utc_day(day))
        self._log_debug("Listing week", user_id=user_id, start=start.isoformat())
        return await self._run(self.repo.list_for_range, user_id, start, end)

    async def events_for_month(self, user_id: int, day: date | datetime) -> list[Event]:
        """Events of the user in the calendar month containing day."""
        start, end = month_bounds(to_utc_day(day))
        self._log_debug("Listing month", user_id=user_id, start=start.isoformat())
        return await self._run(self.repo.list_for_range, user_id, start, end)
