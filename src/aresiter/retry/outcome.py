r"""The result of a single attempt."""

from __future__ import annotations

__all__ = ["Outcome"]

from typing import NamedTuple

import httpx


class Outcome(NamedTuple):
    r"""The ``(response, error)`` pair of an attempt.

    Either half may be ``None``. Both are set when a response was
    received but the attempt still failed, for instance a terminal 4xx
    response, or a hook raising ``httpx.HTTPStatusError``.

    Example:
        ```pycon
        >>> import httpx
        >>> from aresiter.retry.outcome import Outcome
        >>> response, error = Outcome(httpx.Response(200), None)
        >>> response.status_code, error
        (200, None)

        ```
    """

    response: httpx.Response | None
    error: Exception | None

    @classmethod
    def from_exception(cls, exc: Exception) -> Outcome:
        r"""Build the outcome of an attempt that raised ``exc``.

        The response carried by the exception, if any, is kept.

        Example:
            ```pycon
            >>> import httpx
            >>> from aresiter.retry.outcome import Outcome
            >>> request = httpx.Request("GET", "https://example.com")
            >>> response = httpx.Response(502, request=request)
            >>> error = httpx.HTTPStatusError("bad gateway", request=request, response=response)
            >>> Outcome.from_exception(error).response.status_code
            502
            >>> Outcome.from_exception(httpx.ConnectError("refused")).response is None
            True

            ```
        """
        response = getattr(exc, "response", None)
        return cls(response if isinstance(response, httpx.Response) else None, exc)
