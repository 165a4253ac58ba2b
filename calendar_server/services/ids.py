"""
Event ID Generator.

IDs look like ``20251008T142501Z:1759933501123456790``: the UTC generation
second followed by a counter. The counter is seeded from the nanosecond
clock when the generator is built and only ever increases, so two IDs
from one generator never collide, even within the same second.
"""

import itertools
import threading
import time
from collections.abc import Callable
from datetime import datetime

from calendar_server.core.utils import utc_now

ID_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"


class EventIdGenerator:
    """Thread-safe, per-instance event ID source."""

    def __init__(
        self,
        seed: int | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._counter = itertools.count((time.time_ns() if seed is None else seed) + 1)
        self._clock = clock
        self._lock = threading.Lock()

    def __call__(self) -> str:
        return self.next_id()

    def next_id(self) -> str:
        with self._lock:
            stamp = self._clock().strftime(ID_TIMESTAMP_FORMAT)
            value = next(self._counter)
        return f"{stamp}:{value}"
