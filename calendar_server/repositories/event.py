"""
Event Store.

Thread-safe in-memory repository for calendar events. Keeps two
structures under one reader/writer lock:

    _by_id         event_id -> Event
    _by_user_date  user_id -> day -> {event_id: None, ...}

Day buckets are dicts used as insertion-ordered sets, so events with
equal created_at keep their insertion order after sorting.

Every mutation updates both before the lock is released, so readers
never see an event without its index entry or an index entry without
its event.
"""

from datetime import date

from calendar_server.core.concurrency import ReadWriteLock
from calendar_server.core.exceptions import (
    AlreadyExistsError,
    DuplicateEventError,
    InternalError,
    NotFoundError,
)
from calendar_server.core.logging import get_logger
from calendar_server.core.utils import iter_days
from calendar_server.models.event import Event
from calendar_server.repositories.base import EventRepository

logger = get_logger(__name__)


class EventStore(EventRepository):
    """
    In-memory event repository with a (user, day) secondary index.

    Reads take the shared side of the lock and may run in parallel;
    mutations take the exclusive side.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._by_id: dict[str, Event] = {}
        self._by_user_date: dict[int, dict[date, dict[str, None]]] = {}

    # -------------------------------------------------------------------------
    # Index maintenance (callers hold the write lock)
    # -------------------------------------------------------------------------

    def _index_add(self, event: Event) -> None:
        days = self._by_user_date.setdefault(event.user_id, {})
        days.setdefault(event.date, {})[event.id] = None

    def _index_remove(self, event: Event) -> None:
        days = self._by_user_date.get(event.user_id)
        if days is None:
            return
        bucket = days.get(event.date)
        if bucket is not None:
            bucket.pop(event.id, None)
            if not bucket:
                del days[event.date]
        if not days:
            del self._by_user_date[event.user_id]

    def _events_in_bucket(self, user_id: int, day: date) -> list[Event]:
        ids = self._by_user_date.get(user_id, {}).get(day, ())
        return [self._by_id[event_id] for event_id in ids]

    def _has_title(self, user_id: int, day: date, title: str) -> bool:
        return any(event.title == title for event in self._events_in_bucket(user_id, day))

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create(self, event: Event) -> Event:
        with self._lock.write_locked():
            if event.id in self._by_id:
                logger.error("Event id collision", extra={"event_id": event.id})
                raise AlreadyExistsError()
            self._by_id[event.id] = event
            self._index_add(event)
        return event

    def create_unique(self, event: Event) -> Event:
        with self._lock.write_locked():
            if self._has_title(event.user_id, event.date, event.title):
                raise DuplicateEventError()
            if event.id in self._by_id:
                logger.error("Event id collision", extra={"event_id": event.id})
                raise AlreadyExistsError()
            self._by_id[event.id] = event
            self._index_add(event)
        return event

    def update(self, event: Event) -> Event:
        with self._lock.write_locked():
            old = self._by_id.get(event.id)
            if old is None:
                raise NotFoundError()
            if old.user_id != event.user_id or old.date != event.date:
                self._index_remove(old)
                self._index_add(event)
            self._by_id[event.id] = event
        return event

    def delete(self, event_id: str) -> None:
        with self._lock.write_locked():
            event = self._by_id.pop(event_id, None)
            if event is None:
                raise NotFoundError()
            self._index_remove(event)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_by_id(self, event_id: str) -> Event:
        with self._lock.read_locked():
            event = self._by_id.get(event_id)
        if event is None:
            raise NotFoundError()
        return event

    def list_for_date(self, user_id: int, day: date) -> list[Event]:
        with self._lock.read_locked():
            events = self._events_in_bucket(user_id, day)
        events.sort(key=lambda e: e.created_at)
        return events

    def list_for_range(self, user_id: int, start: date, end: date | None) -> list[Event]:
        with self._lock.read_locked():
            if user_id not in self._by_user_date:
                return []
            events = [
                event
                for day in iter_days(start, end)
                for event in self._events_in_bucket(user_id, day)
            ]
        events.sort(key=lambda e: (e.date, e.created_at))
        return events

    def exists_by_user_date_title(self, user_id: int, day: date, title: str) -> bool:
        with self._lock.read_locked():
            return self._has_title(user_id, day, title)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def count(self) -> int:
        """Number of stored events."""
        with self._lock.read_locked():
            return len(self._by_id)

    def stats(self) -> dict[str, int]:
        """Sizes of the primary map and the secondary index."""
        with self._lock.read_locked():
            return {
                "events": len(self._by_id),
                "users": len(self._by_user_date),
                "day_buckets": sum(len(days) for days in self._by_user_date.values()),
            }

    def check_consistency(self) -> None:
        """
        Verify that the primary map and the secondary index agree.

        Raises:
            InternalError: If an event is missing from the index, the index
                references a missing or misplaced event, or an empty bucket
                was left behind
        """
        with self._lock.read_locked():
            indexed: set[str] = set()
            for user_id, days in self._by_user_date.items():
                if not days:
                    raise InternalError(f"empty user bucket for user {user_id}")
                for day, ids in days.items():
                    if not ids:
                        raise InternalError(f"empty day bucket for user {user_id} on {day}")
                    for event_id in ids:
                        event = self._by_id.get(event_id)
                        if event is None:
                            raise InternalError(f"dangling index entry {event_id}")
                        if event.user_id != user_id or event.date != day:
                            raise InternalError(f"misplaced index entry {event_id}")
                        indexed.add(event_id)
            missing = self._by_id.keys() - indexed
            if missing:
                raise InternalError(f"{len(missing)} events missing from index")
