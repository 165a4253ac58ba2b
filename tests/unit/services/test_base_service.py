"""
Unit Tests for Base Service.

Tests executor handling, required-field validation and logging helpers.
"""

import threading
from unittest.mock import patch

import pytest

from calendar_server.core.exceptions import ValidationError
from calendar_server.services.base import BaseService


class TestBaseServiceInit:
    """Tests for BaseService initialization."""

    def test_init_stores_executor(self, executor):
        """Should use the executor it was given."""
        service = BaseService(executor)

        assert service.executor is executor

    def test_default_executor_is_shared_pool(self):
        """Should fall back to the shared thread pool."""
        sentinel = object()
        with patch("calendar_server.services.base.get_io_pool", return_value=sentinel):
            service = BaseService()

            assert service.executor is sentinel

    def test_init_creates_logger(self):
        """Should create a logger for the service."""
        service = BaseService()

        assert service._logger is not None


class TestRun:
    """Tests for the _run helper."""

    @pytest.mark.asyncio
    async def test_runs_on_worker_thread(self, executor):
        """Should execute the call off the event loop thread."""
        service = BaseService(executor)

        thread_name = await service._run(lambda: threading.current_thread().name)

        assert thread_name.startswith("test")

    @pytest.mark.asyncio
    async def test_passes_arguments_and_returns_result(self, executor):
        """Should forward positional arguments and return the result."""
        service = BaseService(executor)

        assert await service._run(pow, 2, 10) == 1024

    @pytest.mark.asyncio
    async def test_propagates_exceptions(self, executor):
        """Should re-raise exceptions from the worker."""
        service = BaseService(executor)

        def boom() -> None:
            raise ValidationError("id is required")

        with pytest.raises(ValidationError, match="id is required"):
            await service._run(boom)


class TestValidateRequired:
    """Tests for _validate_required."""

    @pytest.fixture
    def service(self):
        """Create a BaseService instance."""
        return BaseService()

    def test_passes_when_all_present(self, service):
        """Should not raise when every field has a value."""
        service._validate_required({"id": "abc", "event": "Meet"}, ["id", "event"])

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_raises_for_missing_or_blank(self, service, value):
        """Should raise ValidationError naming the first missing field."""
        with pytest.raises(ValidationError) as exc_info:
            service._validate_required({"event": value}, ["event"])

        assert exc_info.value.message == "event is required"
        assert exc_info.value.details == {"missing_fields": ["event"]}

    def test_reports_all_missing_fields(self, service):
        """Should list every missing field in details."""
        with pytest.raises(ValidationError) as exc_info:
            service._validate_required({}, ["id", "event"])

        assert exc_info.value.message == "id is required"
        assert exc_info.value.details["missing_fields"] == ["id", "event"]


class TestLogging:
    """Tests for the logging helpers."""

    def test_log_operation_includes_service_name(self, mock_logger):
        """Should log at info with the service name in extra."""
        service = BaseService()
        service._logger = mock_logger

        service._log_operation("Event created", event_id="e1")

        mock_logger.info.assert_called_once_with(
            "Event created",
            extra={"service": "BaseService", "event_id": "e1"},
        )

    def test_log_debug_includes_service_name(self, mock_logger):
        """Should log at debug with the service name in extra."""
        service = BaseService()
        service._logger = mock_logger

        service._log_debug("Listing day", user_id=1)

        mock_logger.debug.assert_called_once_with(
            "Listing day",
            extra={"service": "BaseService", "user_id": 1},
        )
