r"""Contains the asynchronous resilient HTTP HEAD request."""

from __future__ import annotations

__all__ = ["head_async"]

from typing import TYPE_CHECKING

from aresiter.request_async import request_async

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import httpx

    from aresiter.core.config import Policy
    from aresiter.core.context import CallContext
    from aresiter.core.options import Option
    from aresiter.retry.outcome import Outcome


def head_async(
    url: str | httpx.URL,
    *options: Option,
    context: CallContext | None = None,
    policy: Policy | None = None,
) -> AsyncIterator[Outcome]:
    r"""Send an HTTP HEAD request asynchronously, retrying it according
    to the policy.

    The asynchronous version of ``head``. Iterate the result with
    ``async for``, inside ``contextlib.aclosing`` to stop early.

    Example:
        ```pycon
        >>> from contextlib import aclosing
        >>> from aresiter import head_async
        >>> async def main():
        ...     async with aclosing(head_async("https://api.example.com/data")) as outcomes:
        ...         async for response, error in outcomes:
        ...             print(response.status_code if response is not None else error)
        ...

        ```
    """
    return request_async("HEAD", url, None, *options, context=context, policy=policy)
