r"""End-to-end tests of the synchronous engine over a real
``httpx.Client``, served by an in-process mock transport."""

from __future__ import annotations

import gzip
import json
import logging

import httpx
import pytest

from aresiter import (
    CallContext,
    DeadlineExceededError,
    get,
    is_terminated_with_client_error,
    post,
    put,
    request,
    with_client,
    with_content_type,
    with_headers,
    with_interval,
    with_max_attempts,
    with_period,
    with_termination_condition,
)
from aresiter.content_types import APPLICATION_JSON
from aresiter.utils.structured_logging import StructuredFormatter
from tests.helpers import TEST_URL, recording_transport


def test_get_recovers_from_server_errors() -> None:
    transport, seen = recording_transport([503, 502, 200])
    with httpx.Client(transport=transport) as client:
        outcomes = list(get(TEST_URL, with_client(client), with_interval(0.01)))
    assert [response.status_code for response, _ in outcomes] == [503, 502, 200]
    assert len(seen) == 3


def test_get_stops_on_client_error() -> None:
    transport, seen = recording_transport([410])
    with httpx.Client(transport=transport) as client:
        [(response, error)] = list(get(TEST_URL, with_client(client), with_max_attempts(4)))
    assert response.status_code == 410
    assert is_terminated_with_client_error(error)
    assert str(error) == "4xx response: 410 Gone"
    assert len(seen) == 1


def test_get_retry_after_zero() -> None:
    """Test ``Retry-After: 0`` retries without waiting."""
    transport, seen = recording_transport([429, 429, 200], headers={"Retry-After": "0"})
    with httpx.Client(transport=transport) as client:
        outcomes = list(get(TEST_URL, with_client(client), with_interval(30)))
    assert [response.status_code for response, _ in outcomes] == [429, 429, 200]
    assert len(seen) == 3


def test_post_body_identical_on_every_attempt() -> None:
    transport, seen = recording_transport([500, 500, 201])
    payload = json.dumps({"name": "widget", "size": 3}).encode()
    with httpx.Client(transport=transport) as client:
        list(
            post(
                TEST_URL,
                payload,
                with_client(client),
                with_interval(0.01),
                with_content_type(APPLICATION_JSON),
            )
        )
    assert [request_.content for request_ in seen] == [payload] * 3
    assert all(request_.headers["Content-Type"] == APPLICATION_JSON for request_ in seen)


def test_put_generator_body_identical_on_every_attempt() -> None:
    transport, seen = recording_transport([503, 200])

    def chunks():
        yield b"alpha,"
        yield b"beta"

    with httpx.Client(transport=transport) as client:
        list(put(TEST_URL, chunks(), with_client(client), with_interval(0.01)))
    assert [request_.content for request_ in seen] == [b"alpha,beta"] * 2


def test_request_custom_headers_replace_client_defaults() -> None:
    transport, seen = recording_transport([200])
    with httpx.Client(transport=transport, headers={"X-Default": "1"}) as client:
        list(request("GET", TEST_URL, None, with_client(client), with_headers({"X-Call": "2"})))
    [sent] = seen
    assert sent.headers["X-Call"] == "2"
    assert "X-Default" not in sent.headers


def test_request_polling_until_condition() -> None:
    """Test a termination condition can poll a resource until it is
    ready."""
    states = iter(["queued", "running", "done"])

    def handler(request_: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(200, json={"state": next(states)})

    def is_done(response: httpx.Response, error: Exception | None) -> bool:  # noqa: ARG001
        return response.json()["state"] == "done"

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        outcomes = list(
            get(
                TEST_URL,
                with_client(client),
                with_interval(0.01),
                with_termination_condition(is_done),
            )
        )
    assert [response.json()["state"] for response, _ in outcomes] == ["queued", "running", "done"]


def test_request_deadline_bounds_unlimited_attempts() -> None:
    transport, _ = recording_transport([503])
    with httpx.Client(transport=transport) as client:
        outcomes = list(
            get(
                TEST_URL,
                with_client(client),
                with_interval(0.05),
                context=CallContext(timeout=0.3),
            )
        )
    assert len(outcomes) >= 2
    response, error = outcomes[-1]
    assert response is None
    assert isinstance(error, DeadlineExceededError)


def test_request_period_sets_transport_timeout() -> None:
    """Test the per-attempt timeout reaches the transport as the request
    timeout."""
    timeouts = []

    def handler(request_: httpx.Request) -> httpx.Response:
        timeouts.append(request_.extensions["timeout"])
        return httpx.Response(200)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        list(get(TEST_URL, with_client(client), with_period(2.5)))
    [timeout] = timeouts
    assert 0 < timeout["read"] <= 2.5


def test_request_transport_errors_are_yielded() -> None:
    calls = []

    def handler(request_: httpx.Request) -> httpx.Response:
        calls.append(request_)
        if len(calls) < 3:
            msg = "connection reset"
            raise httpx.ConnectError(msg, request=request_)
        return httpx.Response(200)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        outcomes = list(get(TEST_URL, with_client(client), with_interval(0.01)))
    assert [response is None for response, _ in outcomes] == [True, True, False]
    assert all(isinstance(error, httpx.ConnectError) for _, error in outcomes[:2])
    assert outcomes[-1] == (outcomes[-1].response, None)
    assert outcomes[-1].response.status_code == 200


def test_request_structured_warning_on_unrewindable_body(
    caplog: pytest.LogCaptureFixture,
) -> None:
    transport, seen = recording_transport([503])

    def broken():
        yield b"x"
        msg = "disk error"
        raise OSError(msg)

    with (
        caplog.at_level(logging.WARNING, logger="aresiter"),
        httpx.Client(transport=transport) as client,
    ):
        outcomes = list(post(TEST_URL, broken(), with_client(client), with_max_attempts(3)))
    assert len(outcomes) == 1
    assert len(seen) <= 1
    [record] = [record for record in caplog.records if record.levelno == logging.WARNING]
    rendered = json.loads(StructuredFormatter().format(record))
    assert rendered["level"] == "WARNING"
    assert rendered["method"] == "POST"
    assert rendered["url"] == TEST_URL
    assert "disk error" in rendered["error"]


def test_request_condition_on_compressed_response() -> None:
    """Test a termination condition reads the decoded body of a
    compressed response."""
    bodies = iter([b'{"done": false}', b'{"done": true}'])

    def handler(request_: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(
            200, headers={"Content-Encoding": "gzip"}, content=gzip.compress(next(bodies))
        )

    def is_done(response: httpx.Response, error: Exception | None) -> bool:  # noqa: ARG001
        return response.json()["done"]

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        outcomes = list(
            get(
                TEST_URL,
                with_client(client),
                with_interval(0.01),
                with_termination_condition(is_done),
            )
        )
    assert [(response.status_code, error) for response, error in outcomes] == [
        (200, None),
        (200, None),
    ]
    assert outcomes[-1].response.json() == {"done": True}
