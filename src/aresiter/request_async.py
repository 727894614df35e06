r"""Asynchronous iteration engine.

This module provides ``request_async``, the async generator twin of
``request``. The attempts, the decisions, and the waits follow the same
rules; the transport is an ``httpx.AsyncClient`` and every suspension
point is awaited.
"""

from __future__ import annotations

__all__ = ["request_async"]

import logging
from contextlib import aclosing
from typing import TYPE_CHECKING, Any

from aresiter.core.context import CallContext
from aresiter.core.http_logic import build_request, resolve_async_client
from aresiter.core.options import build_policy
from aresiter.core.rewind import BodyRewinder
from aresiter.exceptions import BodyRewindError
from aresiter.retry.decider import RetryDecider
from aresiter.retry.executor import prepare_attempt
from aresiter.retry.executor_async import AsyncAttemptExecutor
from aresiter.retry.outcome import Outcome
from aresiter.retry.strategy import RetryStrategy
from aresiter.utils.response import close_response_async
from aresiter.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import httpx

    from aresiter.core.config import Policy
    from aresiter.core.options import Option

logger: logging.Logger = logging.getLogger(__name__)


async def request_async(
    method: str,
    url: str | httpx.URL,
    body: Any = None,
    *options: Option,
    context: CallContext | None = None,
    policy: Policy | None = None,
) -> AsyncIterator[Outcome]:
    r"""Send a request asynchronously until it succeeds, fails
    permanently, or the policy says stop.

    See ``request`` for the stopping rules. To stop early and release
    the outstanding response and the default client right away, iterate
    inside ``contextlib.aclosing``.

    Args:
        method: The HTTP method.
        url: The target URL.
        body: The request body: ``bytes``, ``str``, an iterable or async
            iterable of ``bytes``, or ``None`` for no body.
        *options: Option functions applied in order onto ``policy``.
        context: The context carrying the deadline and the
            cancellation of the call. ``None`` means no deadline.
        policy: The base policy. ``None`` starts from the defaults.

    Yields:
        The ``(response, error)`` outcome of each attempt.

    Example:
        ```pycon
        >>> import asyncio
        >>> from contextlib import aclosing
        >>> import httpx
        >>> from aresiter import request_async, with_client
        >>> async def main():
        ...     transport = httpx.MockTransport(lambda request: httpx.Response(404))
        ...     async with httpx.AsyncClient(transport=transport) as client:
        ...         async with aclosing(
        ...             request_async("GET", "https://example.com", None, with_client(client))
        ...         ) as outcomes:
        ...             return [(r.status_code, str(e)) async for r, e in outcomes]
        ...
        >>> asyncio.run(main())
        [(404, '4xx response: 404 Not Found')]

        ```
    """
    policy = build_policy(*options, base=policy)
    context = context if context is not None else CallContext()
    client, owns_client = resolve_async_client(policy)
    try:
        async with aclosing(_iterate(method, url, body, policy, client, context)) as outcomes:
            async for outcome in outcomes:
                yield outcome
    finally:
        if owns_client:
            logger.debug("Closing the default client of the call")
            await client.aclose()


async def _iterate(
    method: str,
    url: str | httpx.URL,
    body: Any,
    policy: Policy,
    client: httpx.AsyncClient,
    context: CallContext,
) -> AsyncIterator[Outcome]:
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
        rewinder: BodyRewinder | None = await BodyRewinder.capture_async(template)
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

    executor = AsyncAttemptExecutor(client, aspect=policy.effective_aspect, period=policy.period)
    decider = RetryDecider(policy.termination_condition)
    strategy = RetryStrategy(interval=policy.interval, backoff_strategy=policy.backoff_strategy)
    stream = rewinder() if rewinder is not None else template.stream
    attempt = 0
    while True:
        outcome = await executor.execute(prepare_attempt(template, stream), context)
        attempt += 1
        try:
            decision = await decider.decide_async(outcome, context, template)
        except Exception:
            await close_response_async(outcome.response)
            raise
        logger.debug(
            f"{template.method} request to {template.url}, attempt {attempt}: {decision.reason}"
        )
        response = decision.outcome.response
        try:
            yield decision.outcome
        finally:
            if policy.auto_close:
                await close_response_async(response)
        if decision.stop:
            return
        if 0 < max_attempts <= attempt:
            logger.debug(
                f"{template.method} request to {template.url} stopped after "
                f"{attempt} attempt(s)"
            )
            return
        wait = strategy.calculate_delay(attempt - 1, response, url=str(template.url))
        if await context.wait_async(wait):
            logger.debug(f"{template.method} request to {template.url} interrupted while waiting")
            yield Outcome(None, context.error())
            return
        stream = rewinder() if rewinder is not None else template.stream
