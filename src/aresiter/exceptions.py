r"""Exceptions surfaced by the resilient request iterator.

None of these exceptions is raised out of the iteration for transport,
status, timeout, or cancellation conditions. They are yielded as the
``error`` half of an ``Outcome`` so the caller can decide what to do.
"""

from __future__ import annotations

__all__ = [
    "AttemptTimeoutError",
    "BodyRewindError",
    "ClientErrorResponseError",
    "DeadlineExceededError",
    "HttpRequestError",
    "RequestCancelledError",
    "is_terminated_with_client_error",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class HttpRequestError(RuntimeError):
    r"""Base error for failures tied to a specific HTTP request.

    Args:
        method: The HTTP method of the request.
        url: The URL of the request.
        message: A human readable description of the failure.
        status_code: The HTTP status code, if a response was received.
        response: The response, if one was received.
        cause: The underlying exception, if any.

    Example:
        ```pycon
        >>> from aresiter.exceptions import HttpRequestError
        >>> error = HttpRequestError(
        ...     method="GET", url="https://example.com", message="boom", status_code=500
        ... )
        >>> error.status_code
        500
        >>> str(error)
        'boom'

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int | None = None,
        response: httpx.Response | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.status_code = status_code
        self.response = response
        self.__cause__ = cause


class ClientErrorResponseError(HttpRequestError):
    r"""The iteration terminated with a client-error (4xx) response.

    ``429 Too Many Requests`` never produces this error.
    """


class BodyRewindError(HttpRequestError):
    r"""The request body could not be buffered for reuse across
    attempts."""


class DeadlineExceededError(TimeoutError):
    r"""The overall deadline of the call context elapsed."""


class AttemptTimeoutError(TimeoutError):
    r"""A single attempt did not complete within its timeout period."""


class RequestCancelledError(RuntimeError):
    r"""The call context was cancelled by the caller."""


def is_terminated_with_client_error(error: BaseException | None) -> bool:
    r"""Indicate if an error is, or was caused by, a client-error
    termination.

    Args:
        error: The error to inspect. ``None`` is accepted.

    Returns:
        ``True`` if ``error`` or any exception in its ``__cause__`` chain
            is a ``ClientErrorResponseError``, otherwise ``False``.

    Example:
        ```pycon
        >>> from aresiter.exceptions import (
        ...     ClientErrorResponseError,
        ...     is_terminated_with_client_error,
        ... )
        >>> error = ClientErrorResponseError(method="GET", url="u", message="404 Not Found")
        >>> is_terminated_with_client_error(error)
        True
        >>> is_terminated_with_client_error(ValueError("nope"))
        False
        >>> is_terminated_with_client_error(None)
        False

        ```
    """
    seen: set[int] = set()
    while error is not None and id(error) not in seen:
        if isinstance(error, ClientErrorResponseError):
            return True
        seen.add(id(error))
        error = error.__cause__
    return False
