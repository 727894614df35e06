r"""Unit tests for the synchronous attempt executor."""

from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING
from unittest.mock import Mock

import httpx
import pytest

from aresiter.core.context import CallContext
from aresiter.exceptions import (
    AttemptTimeoutError,
    DeadlineExceededError,
    RequestCancelledError,
)
from aresiter.retry.executor import AttemptExecutor, attach_timeout, prepare_attempt

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def release() -> Generator[threading.Event, None, None]:
    event = threading.Event()
    yield event
    event.set()


def hanging_send(release: threading.Event) -> Mock:
    def send(request: httpx.Request) -> httpx.Response:
        release.wait(10)
        return httpx.Response(200, request=request)

    return Mock(side_effect=send)


#####################################
#     Tests for prepare_attempt     #
#####################################


def test_prepare_attempt_copies_template() -> None:
    template = httpx.Request(
        "PUT", "https://example.com/item", headers={"X-Token": "abc"}, content=b"data"
    )
    template.extensions["trace"] = "on"
    stream = httpx.ByteStream(b"data")
    request = prepare_attempt(template, stream)
    assert request is not template
    assert request.method == "PUT"
    assert request.url == template.url
    assert request.headers == template.headers
    assert request.stream is stream
    assert request.extensions == {"trace": "on"}
    assert request.extensions is not template.extensions


####################################
#     Tests for attach_timeout     #
####################################


def test_attach_timeout_with_deadline() -> None:
    request = httpx.Request("GET", "https://example.com")
    attach_timeout(request, CallContext(timeout=5))
    timeout = request.extensions["timeout"]
    assert set(timeout) == {"connect", "read", "write", "pool"}
    assert 0.0 < timeout["read"] <= 5.0


def test_attach_timeout_without_deadline() -> None:
    request = httpx.Request("GET", "https://example.com")
    attach_timeout(request, CallContext())
    assert "timeout" not in request.extensions


#####################################
#     Tests for AttemptExecutor     #
#####################################


def test_attempt_executor_success(mock_client: httpx.Client, http_request: httpx.Request) -> None:
    response = httpx.Response(200, request=http_request)
    mock_client.send.return_value = response
    outcome = AttemptExecutor(mock_client).execute(http_request, CallContext())
    assert outcome == (response, None)
    mock_client.send.assert_called_once_with(http_request)


def test_attempt_executor_transport_error(
    mock_client: httpx.Client, http_request: httpx.Request
) -> None:
    error = httpx.ConnectError("connection refused")
    mock_client.send.side_effect = error
    assert AttemptExecutor(mock_client).execute(http_request, CallContext()) == (None, error)


def test_attempt_executor_status_error_keeps_response(
    mock_client: httpx.Client, http_request: httpx.Request
) -> None:
    response = httpx.Response(500, request=http_request)
    error = httpx.HTTPStatusError("boom", request=http_request, response=response)
    mock_client.send.side_effect = error
    assert AttemptExecutor(mock_client).execute(http_request, CallContext()) == (response, error)


def test_attempt_executor_aspect(mock_client: httpx.Client, http_request: httpx.Request) -> None:
    """Test the aspect wraps the physical call exactly once."""
    response = httpx.Response(200, request=http_request)
    mock_client.send.return_value = response
    calls = []

    def aspect(request: httpx.Request, send: object) -> httpx.Response:
        calls.append(request)
        request.headers["X-Attempt"] = "1"
        return send(request)

    outcome = AttemptExecutor(mock_client, aspect=aspect).execute(http_request, CallContext())
    assert outcome == (response, None)
    assert calls == [http_request]
    assert mock_client.send.call_args.args[0].headers["X-Attempt"] == "1"


def test_attempt_executor_aspect_short_circuit(
    mock_client: httpx.Client, http_request: httpx.Request
) -> None:
    response = httpx.Response(204)
    executor = AttemptExecutor(mock_client, aspect=lambda request, send: response)  # noqa: ARG005
    assert executor.execute(http_request, CallContext()) == (response, None)
    mock_client.send.assert_not_called()


def test_attempt_executor_done_context(
    mock_client: httpx.Client, http_request: httpx.Request
) -> None:
    """Test no call is made once the context is done."""
    response, error = AttemptExecutor(mock_client).execute(http_request, CallContext(timeout=0))
    assert response is None
    assert isinstance(error, DeadlineExceededError)
    mock_client.send.assert_not_called()


def test_attempt_executor_period_timeout(
    mock_client: httpx.Client, http_request: httpx.Request, release: threading.Event
) -> None:
    """Test a hanging call is abandoned once the period elapses."""
    mock_client.send = hanging_send(release)
    start = time.monotonic()
    response, error = AttemptExecutor(mock_client, period=0.05).execute(
        http_request, CallContext()
    )
    assert time.monotonic() - start < 5
    assert response is None
    assert isinstance(error, AttemptTimeoutError)


def test_attempt_executor_deadline_during_call(
    mock_client: httpx.Client, http_request: httpx.Request, release: threading.Event
) -> None:
    mock_client.send = hanging_send(release)
    response, error = AttemptExecutor(mock_client, period=10).execute(
        http_request, CallContext(timeout=0.05)
    )
    assert response is None
    assert isinstance(error, DeadlineExceededError)


def test_attempt_executor_cancel_during_call(
    mock_client: httpx.Client, http_request: httpx.Request, release: threading.Event
) -> None:
    mock_client.send = hanging_send(release)
    context = CallContext()
    timer = threading.Timer(0.05, context.cancel)
    timer.start()
    try:
        response, error = AttemptExecutor(mock_client).execute(http_request, context)
    finally:
        timer.cancel()
    assert response is None
    assert isinstance(error, RequestCancelledError)


def test_attempt_executor_attaches_timeout(
    mock_client: httpx.Client, http_request: httpx.Request
) -> None:
    mock_client.send.return_value = httpx.Response(200)
    AttemptExecutor(mock_client, period=2.0).execute(http_request, CallContext())
    sent = mock_client.send.call_args.args[0]
    assert 0.0 < sent.extensions["timeout"]["read"] <= 2.0


def test_attempt_executor_detaches_attempt_context(
    mock_client: httpx.Client, http_request: httpx.Request
) -> None:
    mock_client.send.return_value = httpx.Response(200)
    context = CallContext()
    AttemptExecutor(mock_client, period=1.0).execute(http_request, context)
    assert context._callbacks == []


def test_attempt_executor_repr(mock_client: httpx.Client) -> None:
    assert repr(AttemptExecutor(mock_client, period=1.5)) == "AttemptExecutor(period=1.5)"
