r"""Helpers for the responses yielded by the iteration."""

from __future__ import annotations

__all__ = [
    "close_response",
    "close_response_async",
    "replayable_copy",
    "replayable_copy_async",
    "status_text",
]

import logging

import httpx

logger: logging.Logger = logging.getLogger(__name__)


def status_text(response: httpx.Response) -> str:
    r"""Return the status line text of a response, e.g. ``"404 Not
    Found"``.

    Example:
        ```pycon
        >>> import httpx
        >>> from aresiter.utils.response import status_text
        >>> status_text(httpx.Response(404))
        '404 Not Found'
        >>> status_text(httpx.Response(499))
        '499'

        ```
    """
    reason = response.reason_phrase
    return f"{response.status_code} {reason}" if reason else str(response.status_code)


def replayable_copy(response: httpx.Response) -> httpx.Response:
    r"""Return an independent copy of a response with a buffered body.

    The original response is read into memory first, so reading or
    closing the copy leaves the original body intact for the caller.

    Args:
        response: The response to copy.

    Returns:
        A new response with the same status, decoded body, request, and
            extensions. The headers are copied without
            ``Content-Encoding`` and ``Content-Length``, which describe
            the body as it was sent rather than the decoded copy.

    Example:
        ```pycon
        >>> import httpx
        >>> from aresiter.utils.response import replayable_copy
        >>> response = httpx.Response(200, content=b"payload")
        >>> copy = replayable_copy(response)
        >>> copy.read()
        b'payload'
        >>> copy.close()
        >>> response.content
        b'payload'

        ```
    """
    content = response.read()
    return httpx.Response(
        status_code=response.status_code,
        headers=_decoded_headers(response),
        content=content,
        request=_request_of(response),
        extensions=dict(response.extensions),
    )


async def replayable_copy_async(response: httpx.Response) -> httpx.Response:
    r"""Asynchronous version of ``replayable_copy``."""
    content = await response.aread()
    return httpx.Response(
        status_code=response.status_code,
        headers=_decoded_headers(response),
        content=content,
        request=_request_of(response),
        extensions=dict(response.extensions),
    )


def _decoded_headers(response: httpx.Response) -> httpx.Headers:
    # The copy carries the decoded body, so the original encoding and
    # length no longer describe it
    headers = response.headers.copy()
    for name in ("Content-Encoding", "Content-Length"):
        headers.pop(name, None)
    return headers


def _request_of(response: httpx.Response) -> httpx.Request | None:
    try:
        return response.request
    except RuntimeError:
        # The response was built without a request
        return None


def close_response(response: httpx.Response | None) -> None:
    r"""Close a response if there is one and it is still open."""
    if response is None or response.is_closed:
        return
    logger.debug(f"Closing response with status {response.status_code}")
    response.close()


async def close_response_async(response: httpx.Response | None) -> None:
    r"""Asynchronous version of ``close_response``."""
    if response is None or response.is_closed:
        return
    logger.debug(f"Closing response with status {response.status_code}")
    await response.aclose()
