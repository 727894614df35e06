r"""Option functions building a ``Policy``.

Each ``with_*`` function returns an option: a callable taking a
``Policy`` and returning a new ``Policy`` with one field replaced. The
input policy is never mutated, so options can be shared between calls.
Options are applied in order; the last one setting a field wins.
"""

from __future__ import annotations

__all__ = [
    "Option",
    "build_policy",
    "with_aspect",
    "with_auto_close",
    "with_backoff_strategy",
    "with_client",
    "with_content_type",
    "with_headers",
    "with_interval",
    "with_max_attempts",
    "with_new_request",
    "with_period",
    "with_termination_condition",
]

from collections.abc import Callable
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from aresiter.core.config import Policy

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx

    from aresiter.backoff import BaseBackoffStrategy

Option = Callable[[Policy], Policy]


def build_policy(*options: Option, base: Policy | None = None) -> Policy:
    r"""Apply options in order onto a policy.

    Args:
        *options: The options to apply.
        base: The starting policy. If ``None``, a default ``Policy`` is
            used.

    Returns:
        The resulting policy.

    Example:
        ```pycon
        >>> from aresiter.core.options import build_policy, with_max_attempts, with_period
        >>> policy = build_policy(with_max_attempts(3), with_period(1.5), with_max_attempts(5))
        >>> policy.max_attempts, policy.period
        (5, 1.5)

        ```
    """
    policy = base if base is not None else Policy()
    for option in options:
        policy = option(policy)
    return policy


def _setting(**changes: Any) -> Option:
    def apply(policy: Policy) -> Policy:
        return replace(policy, **changes)

    return apply


def with_client(client: httpx.Client | httpx.AsyncClient) -> Option:
    r"""Use a custom transport for the requests."""
    return _setting(client=client)


def with_content_type(content_type: str) -> Option:
    r"""Set the ``Content-Type`` header of the requests.

    The header is not set on ``GET`` and ``HEAD`` requests.
    """
    return _setting(content_type=content_type)


def with_headers(headers: Mapping[str, str]) -> Option:
    r"""Replace the request headers with custom headers."""
    return _setting(headers=headers)


def with_max_attempts(max_attempts: int) -> Option:
    r"""Set the maximum number of physical calls.

    A value less than or equal to 0 means the number of calls is not
    limited.
    """
    return _setting(max_attempts=max_attempts)


def with_interval(interval: float) -> Option:
    r"""Set a fixed wait in seconds between attempts.

    By default the wait is computed by exponential backoff with jitter.
    For 429 responses a valid ``Retry-After`` header takes precedence.
    """
    return _setting(interval=interval)


def with_period(period: float) -> Option:
    r"""Set the timeout in seconds of each attempt.

    A value less than or equal to 0 disables the per-attempt timeout.
    """
    return _setting(period=period)


def with_termination_condition(
    termination_condition: Callable[[httpx.Response, Exception | None], bool],
) -> Option:
    r"""Set the predicate deciding when the iteration stops."""
    return _setting(termination_condition=termination_condition)


def with_aspect(aspect: Callable[..., Any]) -> Option:
    r"""Wrap each physical call with ``aspect(request, send)``."""
    return _setting(aspect=aspect)


def with_auto_close(auto_close: bool) -> Option:
    r"""Set whether each response is closed once the caller moved past
    it."""
    return _setting(auto_close=auto_close)


def with_new_request(new_request: Callable[..., httpx.Request]) -> Option:
    r"""Use a custom factory ``new_request(method, url, content=body)``
    to build the request."""
    return _setting(new_request=new_request)


def with_backoff_strategy(backoff_strategy: BaseBackoffStrategy) -> Option:
    r"""Replace the default exponential backoff."""
    return _setting(backoff_strategy=backoff_strategy)
