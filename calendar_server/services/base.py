"""
Base Service.

Repositories are synchronous and guard their own state with locks.
Services are async: every repository call goes through ``_run``, which
hands it to a worker thread, so a slow lock acquisition never stalls the
event loop and independent requests reach the store in parallel.

Usage:
    class ReminderService(BaseService):
        def __init__(self, repo: ReminderRepository) -> None:
            super().__init__()
            self.repo = repo

        async def get_reminder(self, reminder_id: str) -> Reminder:
            return await self._run(self.repo.get_by_id, reminder_id)
"""

import asyncio
from collections.abc import Callable
from concurrent.futures import Executor
from typing import Any, TypeVar

from calendar_server.core.concurrency import get_io_pool
from calendar_server.core.exceptions import ValidationError
from calendar_server.core.logging import get_logger

T = TypeVar("T")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class BaseService:
    """Executor plumbing, required-field checks and service-tagged logging."""

    def __init__(self, executor: Executor | None = None) -> None:
        """
        Args:
            executor: Where repository calls run. The shared I/O pool is
                used when omitted, resolved on first use.
        """
        self._executor = executor
        self._logger = get_logger(self.__class__.__module__)

    @property
    def executor(self) -> Executor:
        if self._executor is None:
            self._executor = get_io_pool()
        return self._executor

    async def _run(self, fn: Callable[..., T], *args: Any) -> T:
        """
        Await ``fn(*args)`` on the executor.

        Cancelling the awaiting task abandons the wait immediately; a call
        a worker already picked up still runs to completion.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, fn, *args)

    def _validate_required(self, fields: dict[str, Any], field_names: list[str]) -> None:
        """
        Raise ValidationError("<first> is required") if any named field is
        absent, None or whitespace. ``details["missing_fields"]`` lists all.
        """
        missing = [name for name in field_names if _is_blank(fields.get(name))]
        if missing:
            raise ValidationError(
                f"{missing[0]} is required",
                details={"missing_fields": missing},
            )

    def _context(self, fields: dict[str, Any]) -> dict[str, Any]:
        return {"service": self.__class__.__name__, **fields}

    def _log_operation(self, operation: str, **context: Any) -> None:
        """Info record for a state change."""
        self._logger.info(operation, extra=self._context(context))

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(message, extra=self._context(context))
