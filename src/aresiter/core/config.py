r"""Policy dataclass controlling one logical call.

A ``Policy`` is built once at the start of a logical call and is only
read while the attempts are running. Numeric fields use ``0`` as a
sentinel: no attempt limit, no fixed interval (use backoff), and no
per-attempt timeout.
"""

from __future__ import annotations

__all__ = ["METHODS_WITHOUT_CONTENT_TYPE", "Policy", "passthrough"]

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    import httpx

    from aresiter.backoff import BaseBackoffStrategy

# Methods for which the content type option is not applied
METHODS_WITHOUT_CONTENT_TYPE = ("GET", "HEAD")


def passthrough(request: httpx.Request, send: Callable[[httpx.Request], Any]) -> Any:
    r"""Identity aspect: send the request unchanged.

    The return value of ``send`` is returned as is, so the same function
    works for synchronous and asynchronous transports (for the latter it
    returns the awaitable).

    Args:
        request: The request of the current attempt.
        send: The continuation performing the physical call.

    Returns:
        Whatever ``send(request)`` returns.

    Example:
        ```pycon
        >>> from aresiter.core.config import passthrough
        >>> passthrough("request", lambda request: f"sent {request}")
        'sent request'

        ```
    """
    return send(request)


@dataclass
class Policy:
    """Options controlling how a logical call is iterated.

    Args:
        client: The transport. ``httpx.Client`` for the synchronous
            engine, ``httpx.AsyncClient`` for the asynchronous one. If
            ``None``, a default client is created for the logical call and
            closed when the iteration ends.
        content_type: Value of the ``Content-Type`` header. Not applied
            to ``GET`` and ``HEAD`` requests.
        headers: Custom headers. They replace the request headers rather
            than being merged into them.
        max_attempts: Maximum number of physical calls. ``0`` (and any
            negative value) means unbounded.
        interval: Fixed wait in seconds between attempts. ``0`` (and any
            negative value) means the wait is computed by backoff.
        period: Timeout in seconds of a single attempt. ``0`` (and any
            negative value) means no per-attempt timeout.
        termination_condition: Optional predicate called with a replayable
            copy of the response and the error of an attempt. ``True``
            stops the iteration. When set, it replaces the default rule
            "stop on any response below 400, stop with an error on 4xx".
        aspect: Optional hook ``aspect(request, send)`` wrapped around each
            physical call. ``None`` behaves as ``passthrough``.
        auto_close: If ``True``, each response is closed once the caller
            has moved past it.
        new_request: Optional factory ``new_request(method, url,
            content=body)`` building the request. Defaults to the client's
            ``build_request``.
        backoff_strategy: Optional backoff strategy replacing the default
            exponential backoff with full jitter.

    Example:
        ```pycon
        >>> from aresiter.core.config import Policy
        >>> policy = Policy()
        >>> policy.max_attempts, policy.interval, policy.period, policy.auto_close
        (0, 0.0, 0.0, True)
        >>> Policy(max_attempts=-3, interval=-1.0).max_attempts
        0

        ```
    """

    client: httpx.Client | httpx.AsyncClient | None = None
    content_type: str | None = None
    headers: Mapping[str, str] | None = None
    max_attempts: int = 0
    interval: float = 0.0
    period: float = 0.0
    termination_condition: Callable[[httpx.Response, Exception | None], bool] | None = None
    aspect: Callable[..., Any] | None = None
    auto_close: bool = True
    new_request: Callable[..., httpx.Request] | None = None
    backoff_strategy: BaseBackoffStrategy | None = None

    def __post_init__(self) -> None:
        """Clamp nonsensical numeric values to their sentinel."""
        self.max_attempts = max(0, self.max_attempts)
        self.interval = max(0.0, float(self.interval))
        self.period = max(0.0, float(self.period))

    @property
    def effective_aspect(self) -> Callable[..., Any]:
        r"""The configured aspect, or ``passthrough`` if none is set."""
        return self.aspect if self.aspect is not None else passthrough

    def applies_content_type(self, method: str) -> bool:
        r"""Indicate if the content type must be set for a method.

        Args:
            method: The HTTP method.

        Returns:
            ``True`` if a content type is configured and the method is
                neither ``GET`` nor ``HEAD``.

        Example:
            ```pycon
            >>> from aresiter.core.config import Policy
            >>> policy = Policy(content_type="application/json")
            >>> policy.applies_content_type("POST")
            True
            >>> policy.applies_content_type("get")
            False

            ```
        """
        return bool(self.content_type) and method.upper() not in METHODS_WITHOUT_CONTENT_TYPE
