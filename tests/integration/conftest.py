"""
Integration Test Fixtures.

The whole HTTP stack (middleware, exception handlers, routes, service,
store) runs in-process behind httpx's ASGI transport. Each test gets a
fresh app over an empty store.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient, Response

from calendar_server.main import create_app
from calendar_server.repositories.event import EventStore


@pytest.fixture
def event_store() -> EventStore:
    return EventStore()


@pytest.fixture
def app(event_store: EventStore) -> FastAPI:
    return create_app(store=event_store)


def _client(app: FastAPI, **transport_options: Any) -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=app, **transport_options),
        base_url="http://test",
    )


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Client over the test app.

    Usage:
        async def test_health(client: AsyncClient):
            assert (await client.get("/health")).status_code == 200
    """
    async with _client(app) as test_client:
        yield test_client


@pytest.fixture
async def lenient_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Client that receives the 500 response for unhandled exceptions.

    Starlette re-raises those after responding; the default client would
    surface the exception instead of the response.
    """
    async with _client(app, raise_app_exceptions=False) as test_client:
        yield test_client


def _check_envelope(response: Response, expected_status: int, key: str) -> Any:
    assert response.status_code == expected_status, (
        f"Expected status {expected_status}, got {response.status_code}: {response.text}"
    )
    assert response.headers["content-type"].startswith("application/json")
    body = response.json()
    assert set(body) == {key}, f"Expected a {key!r} envelope, got {body}"
    return body[key]


class ApiAssertions:
    """Envelope checks for calendar responses."""

    @staticmethod
    def assert_success(response: Response, expected_status: int = 200) -> Any:
        """Check for ``{"result": ...}`` and return the result."""
        return _check_envelope(response, expected_status, "result")

    @staticmethod
    def assert_error(
        response: Response,
        expected_status: int,
        expected_message: str | None = None,
    ) -> str:
        """Check for ``{"error": ...}`` (and its text, if given); return the message."""
        message = _check_envelope(response, expected_status, "error")
        if expected_message is not None:
            assert message == expected_message, (
                f"Expected error {expected_message!r}, got {message!r}"
            )
        return message


@pytest.fixture
def api() -> ApiAssertions:
    return ApiAssertions()
