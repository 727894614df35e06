r"""Contains the resilient HTTP GET request."""

from __future__ import annotations

__all__ = ["get"]

from typing import TYPE_CHECKING

from aresiter.request import request

if TYPE_CHECKING:
    from collections.abc import Iterator

    import httpx

    from aresiter.core.config import Policy
    from aresiter.core.context import CallContext
    from aresiter.core.options import Option
    from aresiter.retry.outcome import Outcome


def get(
    url: str | httpx.URL,
    *options: Option,
    context: CallContext | None = None,
    policy: Policy | None = None,
) -> Iterator[Outcome]:
    r"""Send an HTTP GET request, retrying it according to the policy.

    The content type option is not applied to GET requests.

    Args:
        url: The URL to send the GET request to.
        *options: Option functions applied in order onto ``policy``.
        context: The context carrying the deadline and the
            cancellation of the call.
        policy: The base policy. ``None`` starts from the defaults.

    Returns:
        The lazy sequence of ``(response, error)`` outcomes, one per
            attempt.

    Example:
        ```pycon
        >>> from aresiter import get, with_max_attempts
        >>> for response, error in get(
        ...     "https://api.example.com/data", with_max_attempts(3)
        ... ):  # doctest: +SKIP
        ...     print(response.status_code if response is not None else error)
        ...

        ```
    """
    return request("GET", url, None, *options, context=context, policy=policy)
