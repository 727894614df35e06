r"""Shared HTTP logic for sync and async iterations.

This module contains the construction of the request of a logical call
and the selection of its client. Both are shared by the synchronous and
asynchronous engines.
"""

from __future__ import annotations

__all__ = ["build_request", "resolve_async_client", "resolve_client"]

from typing import TYPE_CHECKING, Any

import httpx

from aresiter.utils.headers import replace_headers

if TYPE_CHECKING:
    from aresiter.core.config import Policy


def build_request(
    policy: Policy, method: str, url: str | httpx.URL, body: Any = None
) -> httpx.Request:
    r"""Build the request of a logical call.

    The request factory is, in order, the policy's ``new_request``, the
    client's ``build_request``, or ``httpx.Request``. It is called as
    ``factory(method, url, content=body)``. The custom headers of the
    policy then replace the request headers, and the content type is set
    for every method except ``GET`` and ``HEAD``.

    Args:
        policy: The policy of the call.
        method: The HTTP method.
        url: The target URL.
        body: The request body: ``bytes``, ``str``, an iterable or async
            iterable of ``bytes``, or ``None`` for no body.

    Returns:
        The request.

    Example:
        ```pycon
        >>> from aresiter.core.config import Policy
        >>> from aresiter.core.http_logic import build_request
        >>> policy = Policy(content_type="application/json", headers={"X-Token": "abc"})
        >>> request = build_request(policy, "POST", "https://example.com", b"{}")
        >>> request.headers["Content-Type"], request.headers["X-Token"]
        ('application/json', 'abc')
        >>> request.headers["Content-Length"]
        '2'

        ```
    """
    factory = policy.new_request
    if factory is None:
        factory = getattr(policy.client, "build_request", None) or httpx.Request
    request = factory(method, url, content=body)
    if policy.headers is not None:
        request.headers = replace_headers(request.headers, policy.headers)
    if policy.applies_content_type(method):
        request.headers["Content-Type"] = policy.content_type
    return request


def resolve_client(policy: Policy) -> tuple[httpx.Client, bool]:
    r"""Return the client of a synchronous call.

    Args:
        policy: The policy of the call.

    Returns:
        The client and a flag indicating if the call owns it. An owned
            client is a default ``httpx.Client`` without timeouts, to be
            closed when the iteration ends.
    """
    if policy.client is not None:
        return policy.client, False
    return httpx.Client(timeout=None), True


def resolve_async_client(policy: Policy) -> tuple[httpx.AsyncClient, bool]:
    r"""Asynchronous version of ``resolve_client``."""
    if policy.client is not None:
        return policy.client, False
    return httpx.AsyncClient(timeout=None), True
