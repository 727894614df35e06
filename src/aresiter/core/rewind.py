r"""Request body rewinding.

A streamed request body can only be read once. The rewinder captures it
when the logical call starts and hands out a fresh, independent stream
for every attempt, so each retry sends the same payload.
"""

from __future__ import annotations

__all__ = ["BodyRewinder"]

import logging
from collections.abc import AsyncIterable, Iterable

import httpx

from aresiter.exceptions import BodyRewindError

logger: logging.Logger = logging.getLogger(__name__)


class BodyRewinder:
    r"""Produce fresh copies of a request body.

    Use ``capture`` (or ``capture_async``) rather than the constructor:
    they inspect the request and pick the cheapest way to replay it.

    - A request without a body replays the same empty stream.
    - A request whose body is already held in memory (an
      ``httpx.ByteStream``, e.g. built from ``bytes`` or ``str``) is
      replayed from that memory without buffering again.
    - Any other body is drained into memory once. The request is left
      with a stream over the buffered bytes, so the first attempt can
      still send it.

    Args:
        content: The buffered body, or ``None`` to replay ``empty``.
        empty: The stream replayed when there is no body.

    Example:
        ```pycon
        >>> import httpx
        >>> from aresiter.core.rewind import BodyRewinder
        >>> request = httpx.Request("POST", "https://example.com", content=iter([b"a", b"b"]))
        >>> rewinder = BodyRewinder.capture(request)
        >>> b"".join(rewinder())
        b'ab'
        >>> b"".join(rewinder())
        b'ab'

        ```
    """

    def __init__(self, content: bytes | None, empty: httpx.ByteStream | None = None) -> None:
        self._content = content
        self._empty = empty if empty is not None else httpx.ByteStream(b"")

    def __repr__(self) -> str:
        size = 0 if self._content is None else len(self._content)
        return f"{self.__class__.__qualname__}(size={size})"

    def __call__(self) -> httpx.ByteStream:
        r"""Return a fresh stream over the captured body."""
        if self._content is None:
            return self._empty
        return httpx.ByteStream(self._content)

    @classmethod
    def capture(cls, request: httpx.Request) -> BodyRewinder:
        r"""Capture the body of a request.

        Args:
            request: The request. Its stream is replaced by an in-memory
                stream if it had to be drained.

        Returns:
            The rewinder.

        Raises:
            BodyRewindError: if reading the body fails.
        """
        rewinder = cls._from_memory(request)
        if rewinder is not None:
            return rewinder
        if not isinstance(request.stream, Iterable):
            msg = f"{request.method} request to {request.url} has no synchronous body stream"
            raise BodyRewindError(method=request.method, url=str(request.url), message=msg)
        try:
            content = request.read()
        except (OSError, ValueError, httpx.StreamError) as exc:
            raise BodyRewindError(
                method=request.method,
                url=str(request.url),
                message=f"failed to buffer the body of {request.method} request to "
                f"{request.url}: {exc}",
                cause=exc,
            ) from exc
        logger.debug(f"Buffered {len(content)} byte(s) of request body for {request.url}")
        return cls(content)

    @classmethod
    async def capture_async(cls, request: httpx.Request) -> BodyRewinder:
        r"""Asynchronous version of ``capture``.

        Asynchronous bodies are read with ``aread``, synchronous ones
        with ``read``.
        """
        rewinder = cls._from_memory(request)
        if rewinder is not None:
            return rewinder
        try:
            if isinstance(request.stream, AsyncIterable):
                content = await request.aread()
            else:
                content = request.read()
        except (OSError, ValueError, httpx.StreamError) as exc:
            raise BodyRewindError(
                method=request.method,
                url=str(request.url),
                message=f"failed to buffer the body of {request.method} request to "
                f"{request.url}: {exc}",
                cause=exc,
            ) from exc
        logger.debug(f"Buffered {len(content)} byte(s) of request body for {request.url}")
        return cls(content)

    @classmethod
    def _from_memory(cls, request: httpx.Request) -> BodyRewinder | None:
        stream = request.stream
        if not isinstance(stream, httpx.ByteStream):
            return None
        content = b"".join(stream)
        if not content:
            return cls(None, empty=stream)
        return cls(content)
