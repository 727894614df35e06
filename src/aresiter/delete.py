r"""Contains the resilient HTTP DELETE request."""

from __future__ import annotations

__all__ = ["delete"]

from typing import TYPE_CHECKING, Any

from aresiter.request import request

if TYPE_CHECKING:
    from collections.abc import Iterator

    import httpx

    from aresiter.core.config import Policy
    from aresiter.core.context import CallContext
    from aresiter.core.options import Option
    from aresiter.retry.outcome import Outcome


def delete(
    url: str | httpx.URL,
    body: Any = None,
    *options: Option,
    context: CallContext | None = None,
    policy: Policy | None = None,
) -> Iterator[Outcome]:
    r"""Send an HTTP DELETE request, retrying it according to the policy.

    A DELETE request may carry a body, although most servers ignore it.

    Args:
        url: The URL to send the DELETE request to.
        body: The request body: ``bytes``, ``str``, an iterable of
            ``bytes``, or ``None``.
        *options: Option functions applied in order onto ``policy``.
        context: The context carrying the deadline and the
            cancellation of the call.
        policy: The base policy. ``None`` starts from the defaults.

    Returns:
        The lazy sequence of ``(response, error)`` outcomes, one per
            attempt.

    Example:
        ```pycon
        >>> from aresiter import delete, with_content_type
        >>> from aresiter.content_types import APPLICATION_JSON
        >>> for response, error in delete(
        ...     "https://api.example.com/items/1",
        ...     b'{"name": "item"}',
        ...     with_content_type(APPLICATION_JSON),
        ... ):  # doctest: +SKIP
        ...     print(response.status_code if response is not None else error)
        ...

        ```
    """
    return request("DELETE", url, body, *options, context=context, policy=policy)
