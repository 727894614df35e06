r"""Contains the asynchronous resilient HTTP DELETE request."""

from __future__ import annotations

__all__ = ["delete_async"]

from typing import TYPE_CHECKING, Any

from aresiter.request_async import request_async

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import httpx

    from aresiter.core.config import Policy
    from aresiter.core.context import CallContext
    from aresiter.core.options import Option
    from aresiter.retry.outcome import Outcome


def delete_async(
    url: str | httpx.URL,
    body: Any = None,
    *options: Option,
    context: CallContext | None = None,
    policy: Policy | None = None,
) -> AsyncIterator[Outcome]:
    r"""Send an HTTP DELETE request asynchronously, retrying it according
    to the policy.

    The asynchronous version of ``delete``. The body may also be an async
    iterable of ``bytes``; it is buffered once and replayed on every
    attempt.
    """
    return request_async("DELETE", url, body, *options, context=context, policy=policy)
