r"""Synchronous iteration engine.

This module provides the ``request`` generator driving one logical call
into a sequence of physical attempts. Each attempt's ``(response,
error)`` pair is yielded to the caller before the next attempt starts,
so the caller controls the pace of the iteration and can stop it at any
time by leaving the loop.
"""

from __future__ import annotations

__all__ = ["request"]

import logging
from typing import TYPE_CHECKING, Any

from aresiter.core.context import CallContext
from aresiter.core.http_logic import build_request, resolve_client
from aresiter.core.options import build_policy
from aresiter.core.rewind import BodyRewinder
from aresiter.exceptions import BodyRewindError
from aresiter.retry.decider import RetryDecider
from aresiter.retry.executor import AttemptExecutor, prepare_attempt
from aresiter.retry.outcome import Outcome
from aresiter.retry.strategy import RetryStrategy
from aresiter.utils.response import close_response
from aresiter.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Iterator

    import httpx

    from aresiter.core.config import Policy
    from aresiter.core.options import Option

logger: logging.Logger = logging.getLogger(__name__)


def request(
    method: str,
    url: str | httpx.URL,
    body: Any = None,
    *options: Option,
    context: CallContext | None = None,
    policy: Policy | None = None,
) -> Iterator[Outcome]:
    r"""Send a request until it succeeds, fails permanently, or the
    policy says stop.

    The call is lazy: nothing is sent until the first outcome is
    requested. One outcome is yielded per physical attempt, plus at most
    one final outcome without a response when the call context is done
    while waiting between attempts. The iteration ends after:

    - a response below 400 when no termination condition is set,
    - a 4xx response other than 429, yielded with a
      ``ClientErrorResponseError``,
    - a ``True`` result of the termination condition,
    - the maximum number of attempts,
    - the cancellation or the deadline of the call context.

    Leaving the loop early (``break``, or ``close()`` on the generator)
    stops the call: no further attempt is made, the outstanding response
    is closed if ``auto_close`` is set, and a default client owned by the
    call is closed.

    Args:
        method: The HTTP method.
        url: The target URL.
        body: The request body: ``bytes``, ``str``, an iterable of
            ``bytes``, or ``None`` for no body.
        *options: Option functions applied in order onto ``policy``.
        context: The context carrying the deadline and the
            cancellation of the call. ``None`` means no deadline.
        policy: The base policy. ``None`` starts from the defaults.

    Yields:
        The ``(response, error)`` outcome of each attempt.

    Example:
        ```pycon
        >>> import httpx
        >>> from aresiter import request, with_client, with_interval, with_max_attempts
        >>> statuses = iter([503, 200])
        >>> transport = httpx.MockTransport(lambda request: httpx.Response(next(statuses)))
        >>> with httpx.Client(transport=transport) as client:
        ...     outcomes = [
        ...         (response.status_code, error)
        ...         for response, error in request(
        ...             "GET",
        ...             "https://example.com",
        ...             None,
        ...             with_client(client),
        ...             with_max_attempts(3),
        ...             with_interval(0.01),
        ...         )
        ...     ]
        ...
        >>> outcomes
        [(503, None), (200, None)]

        ```
    """
    policy = build_policy(*options, base=policy)
    context = context if context is not None else CallContext()
    client, owns_client = resolve_client(policy)
    try:
        yield from _iterate(method, url, body, policy, client, context)
    finally:
        if owns_client:
            logger.debug("Closing the default client of the call")
            client.close()


def _iterate(
    method: str,
    url: str | httpx.URL,
    body: Any,
    policy: Policy,
    client: httpx.Client,
    context: CallContext,
) -> Iterator[Outcome]:
    try:
        template = build_request(policy, method, url, body)
    except Exception as exc:  # noqa: BLE001
        log_structured(
            logger,
            logging.WARNING,
            "Failed to build the request, no attempt is made",
            method=method,
            url=str(url),
            error=repr(exc),
        )
        return

    max_attempts = policy.max_attempts
    try:
        rewinder: BodyRewinder | None = BodyRewinder.capture(template)
    except BodyRewindError as exc:
        log_structured(
            logger,
            logging.WARNING,
            "Request body cannot be rewound, falling back to a single attempt",
            method=template.method,
            url=str(template.url),
            error=str(exc),
        )
        rewinder = None
        max_attempts = 1

    executor = AttemptExecutor(client, aspect=policy.effective_aspect, period=policy.period)
    decider = RetryDecider(policy.termination_condition)
    strategy = RetryStrategy(interval=policy.interval, backoff_strategy=policy.backoff_strategy)
    stream = rewinder() if rewinder is not None else template.stream
    attempt = 0
    while True:
        outcome = executor.execute(prepare_attempt(template, stream), context)
        attempt += 1
        try:
            decision = decider.decide(outcome, context, template)
        except Exception:
            close_response(outcome.response)
            raise
        logger.debug(
            f"{template.method} request to {template.url}, attempt {attempt}: {decision.reason}"
        )
        response = decision.outcome.response
        try:
            yield decision.outcome
        finally:
            if policy.auto_close:
                close_response(response)
        if decision.stop:
            return
        if 0 < max_attempts <= attempt:
            logger.debug(
                f"{template.method} request to {template.url} stopped after "
                f"{attempt} attempt(s)"
            )
            return
        wait = strategy.calculate_delay(attempt - 1, response, url=str(template.url))
        if context.wait(wait):
            logger.debug(f"{template.method} request to {template.url} interrupted while waiting")
            yield Outcome(None, context.error())
            return
        stream = rewinder() if rewinder is not None else template.stream
