r"""Unit tests for BodyRewinder."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from aresiter.core.rewind import BodyRewinder
from aresiter.exceptions import BodyRewindError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator


def chunks() -> Iterator[bytes]:
    yield b"hello "
    yield b"world"


async def async_chunks() -> AsyncIterator[bytes]:
    yield b"hello "
    yield b"world"


def broken_chunks() -> Iterator[bytes]:
    yield b"hello "
    msg = "disk unplugged"
    raise OSError(msg)


##############################
#     Tests for capture      #
##############################


def test_capture_bytes_body() -> None:
    """Test an in-memory body is replayed on every call."""
    request = httpx.Request("POST", "https://example.com", content=b"payload")
    rewinder = BodyRewinder.capture(request)
    assert b"".join(rewinder()) == b"payload"
    assert b"".join(rewinder()) == b"payload"


def test_capture_returns_independent_streams() -> None:
    request = httpx.Request("POST", "https://example.com", content=b"payload")
    rewinder = BodyRewinder.capture(request)
    assert rewinder() is not rewinder()


def test_capture_empty_body_replays_same_stream() -> None:
    """Test a request without a body replays its empty stream."""
    request = httpx.Request("GET", "https://example.com")
    rewinder = BodyRewinder.capture(request)
    assert rewinder() is request.stream
    assert rewinder() is request.stream
    assert b"".join(rewinder()) == b""


def test_capture_streamed_body() -> None:
    """Test a single-use body is buffered once and replayed."""
    request = httpx.Request("PUT", "https://example.com", content=chunks())
    rewinder = BodyRewinder.capture(request)
    for _ in range(3):
        assert b"".join(rewinder()) == b"hello world"


def test_capture_streamed_body_replaces_live_body() -> None:
    """Test the request can still send the buffered body."""
    request = httpx.Request("PUT", "https://example.com", content=chunks())
    BodyRewinder.capture(request)
    assert isinstance(request.stream, httpx.ByteStream)
    assert b"".join(request.stream) == b"hello world"


def test_capture_read_failure() -> None:
    request = httpx.Request("POST", "https://example.com", content=broken_chunks())
    with pytest.raises(BodyRewindError, match=r"failed to buffer the body") as exc_info:
        BodyRewinder.capture(request)
    assert isinstance(exc_info.value.__cause__, OSError)
    assert exc_info.value.method == "POST"


def test_capture_consumed_body() -> None:
    """Test a body consumed before the call cannot be rewound."""
    stream = chunks()
    request = httpx.Request("POST", "https://example.com", content=stream)
    b"".join(request.stream)
    with pytest.raises(BodyRewindError):
        BodyRewinder.capture(request)


def test_capture_async_body_in_sync_call() -> None:
    request = httpx.Request("POST", "https://example.com", content=async_chunks())
    with pytest.raises(BodyRewindError, match=r"no synchronous body stream"):
        BodyRewinder.capture(request)


def test_rewinder_repr() -> None:
    assert repr(BodyRewinder(b"abc")) == "BodyRewinder(size=3)"
    assert repr(BodyRewinder(None)) == "BodyRewinder(size=0)"


####################################
#     Tests for capture_async      #
####################################


@pytest.mark.asyncio
async def test_capture_async_streamed_body() -> None:
    request = httpx.Request("POST", "https://example.com", content=async_chunks())
    rewinder = await BodyRewinder.capture_async(request)
    assert b"".join([chunk async for chunk in rewinder()]) == b"hello world"
    assert b"".join([chunk async for chunk in rewinder()]) == b"hello world"


@pytest.mark.asyncio
async def test_capture_async_sync_body() -> None:
    request = httpx.Request("POST", "https://example.com", content=chunks())
    rewinder = await BodyRewinder.capture_async(request)
    assert b"".join(rewinder()) == b"hello world"


@pytest.mark.asyncio
async def test_capture_async_bytes_body() -> None:
    request = httpx.Request("POST", "https://example.com", content=b"payload")
    rewinder = await BodyRewinder.capture_async(request)
    assert b"".join(rewinder()) == b"payload"


@pytest.mark.asyncio
async def test_capture_async_read_failure() -> None:
    request = httpx.Request("POST", "https://example.com", content=broken_chunks())
    with pytest.raises(BodyRewindError):
        await BodyRewinder.capture_async(request)
