"""
Base Repository.

Abstract interface the scheduling service depends on. The in-memory
EventStore is the only implementation; tests may substitute their own.
"""

from abc import ABC, abstractmethod
from datetime import date

from calendar_server.models.event import Event


class EventRepository(ABC):
    """
    Storage contract for calendar events.

    Implementations must be safe to call from multiple threads and must
    raise NotFoundError for unknown IDs.
    """

    @abstractmethod
    def create(self, event: Event) -> Event:
        """
        Store a new event.

        Raises:
            AlreadyExistsError: If the ID is already stored
        """

    @abstractmethod
    def create_unique(self, event: Event) -> Event:
        """
        Store a new event unless the user already has one with the same
        title on the same day. Check and insert happen as one step.

        Raises:
            DuplicateEventError: If (user_id, date, title) is already taken
            AlreadyExistsError: If the ID is already stored
        """

    @abstractmethod
    def update(self, event: Event) -> Event:
        """
        Replace a stored event.

        Raises:
            NotFoundError: If the event does not exist
        """

    @abstractmethod
    def delete(self, event_id: str) -> None:
        """
        Remove an event.

        Raises:
            NotFoundError: If the event does not exist
        """

    @abstractmethod
    def get_by_id(self, event_id: str) -> Event:
        """
        Get a single event by ID.

        Raises:
            NotFoundError: If the event does not exist
        """

    @abstractmethod
    def list_for_date(self, user_id: int, day: date) -> list[Event]:
        """Events of one user on one day, oldest first."""

    @abstractmethod
    def list_for_range(self, user_id: int, start: date, end: date | None) -> list[Event]:
        """Events of one user in the half-open day range [start, end); end None is open-ended."""

    @abstractmethod
    def exists_by_user_date_title(self, user_id: int, day: date, title: str) -> bool:
        """Check whether the user already has an event with this title on this day."""
