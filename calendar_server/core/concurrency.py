"""
Concurrency Infrastructure.

Thread pool and lock primitives for the application.
The pool is created lazily on first access and cleaned up during shutdown.

Pools:
    _io_pool - TracedThreadPoolExecutor that runs event store calls off the
               event loop, so concurrent requests hit the store from
               multiple threads

Locks:
    ReadWriteLock - shared/exclusive lock guarding the event store

Usage:
    from calendar_server.core.concurrency import get_io_pool, ReadWriteLock

    # Run store code in the thread pool (preserves structlog context)
    result = await loop.run_in_executor(get_io_pool(), store.get_by_id, event_id)

    lock = ReadWriteLock()
    with lock.read_locked():
        ...
    with lock.write_locked():
        ...
"""

import asyncio
import contextvars
import threading
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager

from calendar_server.core.logging import get_logger

logger = get_logger(__name__)

_io_pool: ThreadPoolExecutor | None = None


class TracedThreadPoolExecutor(ThreadPoolExecutor):
    """ThreadPoolExecutor that propagates contextvars to worker threads.

    Standard ThreadPoolExecutor does not carry structlog context or the
    request_id into worker threads. This subclass copies the current
    context before dispatching, so log records keep their request fields.
    """

    def submit(self, fn, /, *args, **kwargs):
        ctx = contextvars.copy_context()
        return super().submit(ctx.run, fn, *args, **kwargs)


class ReadWriteLock:
    """
    Reader/writer lock.

    Any number of readers may hold the lock together; a writer holds it
    alone. Writer-preferring: once a writer is waiting, new readers queue
    behind it so writers are never starved.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        """Hold the shared side of the lock for the duration of the block."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        """Hold the exclusive side of the lock for the duration of the block."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


def get_io_pool() -> TracedThreadPoolExecutor:
    """Get the shared thread pool for event store calls.

    Creates the pool lazily on first call using config from concurrency.yaml.
    """
    global _io_pool
    if _io_pool is None:
        from calendar_server.core.config import get_app_config
        max_workers = get_app_config().concurrency.thread_pool.max_workers
        _io_pool = TracedThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="event-store",
        )
        logger.info("Thread pool created", extra={"max_workers": max_workers})
    return _io_pool


async def shutdown_pools() -> None:
    """Shut down the thread pool gracefully. Called during application shutdown.

    Pool shutdown is blocking, so we run it in a thread to avoid stalling
    the event loop during graceful shutdown.
    """
    global _io_pool

    if _io_pool is not None:
        await asyncio.to_thread(_io_pool.shutdown, wait=True)
        logger.info("Thread pool shut down")
        _io_pool = None
