"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterator

import pytest
from aiohttp.test_utils import TestServer

from notifier.utils.logging import clear_correlation_id
from tests.fixtures.endpoint import NotificationEndpoint
from tests.fixtures.transports import StubTransport


@pytest.fixture
def stub_transport() -> StubTransport:
    """Transport answering 204 to every request without network activity."""
    return StubTransport()


@pytest.fixture
def endpoint() -> NotificationEndpoint:
    """Recording request handler for the local notification server."""
    return NotificationEndpoint()


@pytest.fixture
async def endpoint_url(endpoint: NotificationEndpoint) -> AsyncIterator[str]:
    """Start a local aiohttp server and yield its notification URL."""
    server = TestServer(endpoint.build_app())
    await server.start_server()
    try:
        yield str(server.make_url("/notify"))
    finally:
        endpoint.shutdown()
        await server.close()


@pytest.fixture(autouse=True)
def reset_logging_state() -> Iterator[None]:
    """Restore root logger handlers and the correlation ID after each test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    clear_correlation_id()
