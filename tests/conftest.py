"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Every test gets its own EventStore and SchedulingService, so no state
leaks between tests.
"""

from collections.abc import Callable
from datetime import date, datetime, timedelta

import pytest

from calendar_server.core.utils import utc_now
from calendar_server.models.event import Event
from calendar_server.repositories.event import EventStore
from calendar_server.services.ids import EventIdGenerator
from calendar_server.services.scheduling import SchedulingService


# =============================================================================
# Clock Helpers
# =============================================================================


class TickingClock:
    """
    Deterministic clock for tests.

    Each call advances one second, so events created in sequence get
    strictly increasing created_at values.
    """

    def __init__(self, start: datetime = datetime(2025, 10, 1, 9, 0, 0)) -> None:
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock() -> TickingClock:
    """Provide a ticking clock."""
    return TickingClock()


# =============================================================================
# Store and Service Fixtures
# =============================================================================


@pytest.fixture
def store() -> EventStore:
    """Provide an empty event store."""
    return EventStore()


@pytest.fixture
def service(store: EventStore, clock: TickingClock) -> SchedulingService:
    """
    Provide a scheduling service over the test store.

    Usage:
        async def test_create(service: SchedulingService):
            event = await service.create_event(1, date(2025, 10, 8), "Meet")
    """
    return SchedulingService(store, id_generator=EventIdGenerator(seed=0), clock=clock)


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """
    Factory for Event instances with sensible defaults.

    Usage:
        def test_store(store, make_event):
            store.create(make_event(id="e1", title="Meet"))
    """
    counter = iter(range(1, 1_000_000))

    def _make(
        id: str | None = None,
        user_id: int = 1,
        day: date = date(2025, 10, 8),
        title: str = "Meet",
        created_at: datetime | None = None,
    ) -> Event:
        n = next(counter)
        stamp = created_at or utc_now() + timedelta(microseconds=n)
        return Event(
            id=id or f"evt-{n}",
            user_id=user_id,
            date=day,
            title=title,
            created_at=stamp,
            updated_at=stamp,
        )

    return _make

