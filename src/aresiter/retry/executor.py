r"""Synchronous attempt executor.

This module provides the AttemptExecutor class performing exactly one
physical HTTP call. The call runs on its own daemon thread and is raced
against the attempt's deadline and the cancellation of the call context.
If the deadline wins, the executor returns a timeout without joining the
thread: the stale call may keep running in the background and its
result is discarded.
"""

from __future__ import annotations

__all__ = ["AttemptExecutor", "prepare_attempt"]

import logging
import threading
from concurrent.futures import Future
from typing import TYPE_CHECKING, Any

import httpx

from aresiter.core.config import passthrough
from aresiter.retry.outcome import Outcome

if TYPE_CHECKING:
    from collections.abc import Callable

    from aresiter.core.context import CallContext

logger: logging.Logger = logging.getLogger(__name__)


def prepare_attempt(
    template: httpx.Request, stream: httpx.SyncByteStream | httpx.AsyncByteStream
) -> httpx.Request:
    r"""Build the request of one attempt from the request of the call.

    Each attempt gets its own request object so that a call abandoned
    after a timeout never shares a body stream or extensions with the
    next attempt.

    Args:
        template: The request built when the logical call started.
        stream: A fresh body stream for this attempt.

    Returns:
        A request with the same method, URL, headers, and extensions.

    Example:
        ```pycon
        >>> import httpx
        >>> from aresiter.retry.executor import prepare_attempt
        >>> template = httpx.Request("PUT", "https://example.com/item", content=b"data")
        >>> request = prepare_attempt(template, httpx.ByteStream(b"data"))
        >>> request is template, request.method, request.read()
        (False, 'PUT', b'data')

        ```
    """
    return httpx.Request(
        template.method,
        template.url,
        headers=template.headers,
        stream=stream,
        extensions=dict(template.extensions),
    )


def attach_timeout(request: httpx.Request, context: CallContext) -> None:
    r"""Bound the transport timeouts of a request by the remaining time
    of a context."""
    remaining = context.remaining()
    if remaining is not None:
        request.extensions["timeout"] = httpx.Timeout(max(remaining, 0.001)).as_dict()


class AttemptExecutor:
    """Performs one physical HTTP call under an optional timeout.

    Args:
        client: The transport; ``send(request)`` performs the call.
        aspect: Optional hook ``aspect(request, send)`` wrapped around the
            call. ``None`` sends the request unchanged.
        period: Timeout in seconds of the attempt. ``0`` means the attempt
            is only bounded by the call context.

    Example:
        ```pycon
        >>> import httpx
        >>> from aresiter.core.context import CallContext
        >>> from aresiter.retry.executor import AttemptExecutor
        >>> client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(204)))
        >>> executor = AttemptExecutor(client, period=5.0)
        >>> response, error = executor.execute(
        ...     httpx.Request("GET", "https://example.com"), CallContext()
        ... )
        >>> response.status_code, error
        (204, None)

        ```
    """

    def __init__(
        self,
        client: Any,
        aspect: Callable[..., httpx.Response] | None = None,
        period: float = 0.0,
    ) -> None:
        self.client = client
        self.aspect = aspect if aspect is not None else passthrough
        self.period = period

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(period={self.period})"

    def execute(self, request: httpx.Request, context: CallContext) -> Outcome:
        """Perform the attempt.

        Args:
            request: The request of this attempt.
            context: The context of the logical call.

        Returns:
            The outcome produced by the aspect or the transport, or
                ``(None, error)`` with the context error if the deadline
                elapsed or the context was cancelled first.
        """
        if context.done():
            return Outcome(None, context.error())
        with context.child(self.period) as attempt_context:
            attach_timeout(request, attempt_context)
            future: Future[Outcome] = Future()
            wake = threading.Event()
            future.add_done_callback(lambda _: wake.set())
            attempt_context.add_done_callback(wake.set)
            thread = threading.Thread(
                target=self._run, args=(request, future), name="aresiter-attempt", daemon=True
            )
            thread.start()
            while not future.done() and not attempt_context.done():
                wake.wait(attempt_context.remaining())
            if future.done():
                return future.result()
            logger.debug(
                f"{request.method} request to {request.url} abandoned: "
                f"{attempt_context.error()}"
            )
            return Outcome(None, attempt_context.error())

    def _run(self, request: httpx.Request, future: Future[Outcome]) -> None:
        try:
            future.set_result(self._send(request))
        except BaseException as exc:
            future.set_exception(exc)

    def _send(self, request: httpx.Request) -> Outcome:
        try:
            response = self.aspect(request, self.client.send)
        except Exception as exc:  # noqa: BLE001
            logger.debug(
                f"{request.method} request to {request.url} raised {type(exc).__name__}: {exc}"
            )
            return Outcome.from_exception(exc)
        return Outcome(response, None)
