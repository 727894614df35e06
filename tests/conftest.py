from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from aresiter.core.context import CallContext

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_wait() -> Generator[Mock, None, None]:
    """Patch CallContext.wait to skip the waits between attempts."""
    with patch.object(CallContext, "wait", autospec=True, return_value=False) as mock:
        yield mock


@pytest.fixture
def mock_wait_async() -> Generator[AsyncMock, None, None]:
    """Patch CallContext.wait_async to skip the waits between attempts."""
    with patch.object(
        CallContext, "wait_async", new_callable=AsyncMock, return_value=False
    ) as mock:
        yield mock


@pytest.fixture
def mock_client() -> httpx.Client:
    """Create a mock httpx.Client building real requests."""
    client = Mock(spec=httpx.Client)
    client.build_request.side_effect = httpx.Request
    return client


@pytest.fixture
def mock_async_client() -> httpx.AsyncClient:
    """Create a mock httpx.AsyncClient building real requests."""
    client = Mock(spec=httpx.AsyncClient, send=AsyncMock(), aclose=AsyncMock())
    client.build_request.side_effect = httpx.Request
    return client


@pytest.fixture
def http_request() -> httpx.Request:
    """Create a GET request for testing."""
    return httpx.Request("GET", "https://example.com/data")
