"""
Unit Test Fixtures.

Collaborators are mocked where a test covers one layer only.
"""

from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from calendar_server.core.config_schema import (
    ApplicationSchema,
    ConcurrencySchema,
    LoggingSchema,
)


@pytest.fixture
def mock_repo() -> MagicMock:
    """
    Event repository double.

    Empty store semantics: no duplicates, empty listings, and the
    create / update methods hand back the event they were given.
    """
    repo = MagicMock()
    repo.exists_by_user_date_title.return_value = False
    repo.create.side_effect = lambda event: event
    repo.create_unique.side_effect = lambda event: event
    repo.update.side_effect = lambda event: event
    repo.delete.return_value = None
    repo.list_for_date.return_value = []
    repo.list_for_range.return_value = []
    return repo


@pytest.fixture
def executor() -> Iterator[ThreadPoolExecutor]:
    """Private pool with "test" thread names, shut down after the test."""
    pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="test")
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def mock_settings() -> MagicMock:
    """Environment overrides with PORT and LOG_LEVEL unset."""
    settings = MagicMock()
    settings.port = None
    settings.log_level = None
    return settings


@pytest.fixture
def mock_app_config() -> MagicMock:
    """
    YAML configuration built from real schema instances.

    Usage:
        with patch("calendar_server.main.get_app_config", return_value=mock_app_config):
            app = create_app()
    """
    config = MagicMock()
    config.application = ApplicationSchema(
        name="Test Calendar",
        version="1.0.0",
        description="Calendar under test",
        environment="test",
        debug=True,
        server={"host": "127.0.0.1", "port": 8000},
        cors={"origins": []},
    )
    config.logging = LoggingSchema(
        level="DEBUG",
        format="console",
        handlers={
            "console": {"enabled": True},
            "file": {
                "enabled": False,
                "path": "logs/system.jsonl",
                "max_bytes": 10485760,
                "backup_count": 5,
            },
        },
    )
    config.concurrency = ConcurrencySchema(
        thread_pool={"max_workers": 2},
        shutdown={"drain_seconds": 1},
    )
    return config


@pytest.fixture
def mock_logger() -> MagicMock:
    """Stand-in for a module's ``logger``; patch it in and assert on its methods."""
    return MagicMock()
