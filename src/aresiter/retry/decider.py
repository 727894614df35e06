r"""Decision logic classifying the outcome of an attempt.

This module provides the RetryDecider class deciding, after each
attempt, whether the iteration stops or continues. The decision is made
before the outcome is yielded, so a terminal client-error response can
be yielded together with its distinguished error.
"""

from __future__ import annotations

__all__ = ["Decision", "RetryDecider"]

import logging
from typing import TYPE_CHECKING, NamedTuple

from aresiter.exceptions import (
    ClientErrorResponseError,
    DeadlineExceededError,
    RequestCancelledError,
)
from aresiter.utils.response import replayable_copy, replayable_copy_async, status_text

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from aresiter.core.context import CallContext
    from aresiter.retry.outcome import Outcome

logger: logging.Logger = logging.getLogger(__name__)

TOO_MANY_REQUESTS = 429


class Decision(NamedTuple):
    r"""The verdict on one attempt.

    Attributes:
        outcome: The outcome to yield. It differs from the attempt's
            outcome when the error is replaced, e.g. by a client-error
            termination.
        stop: ``True`` if no further attempt must be made.
        reason: A short description, used for logging.
    """

    outcome: Outcome
    stop: bool
    reason: str


class RetryDecider:
    r"""Decides whether the iteration continues after an attempt.

    The rules, in order:

    1. If the call context is done and the attempt produced no response
       (or failed on the context itself), stop with the context error.
    2. If there is no response, continue.
    3. ``429 Too Many Requests`` always continues.
    4. If a termination condition is set, it decides for every other
       response: ``True`` stops, ``False`` continues. This includes 4xx
       responses, for which the condition overrides rule 5.
    5. A 4xx response stops with a ``ClientErrorResponseError``.
    6. A response below 400 stops; anything else continues.

    Args:
        termination_condition: Optional predicate called with a replayable
            copy of the response and the error of the attempt.

    Example:
        ```pycon
        >>> import httpx
        >>> from aresiter.core.context import CallContext
        >>> from aresiter.retry.decider import RetryDecider
        >>> from aresiter.retry.outcome import Outcome
        >>> decider = RetryDecider()
        >>> request = httpx.Request("GET", "https://example.com")
        >>> decision = decider.decide(
        ...     Outcome(httpx.Response(503, request=request), None), CallContext(), request
        ... )
        >>> decision.stop, decision.reason
        (False, 'status 503')

        ```
    """

    def __init__(
        self,
        termination_condition: Callable[[httpx.Response, Exception | None], bool] | None = None,
    ) -> None:
        self.termination_condition = termination_condition

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(termination_condition={self.termination_condition})"

    def decide(
        self, outcome: Outcome, context: CallContext, request: httpx.Request
    ) -> Decision:
        r"""Classify the outcome of an attempt.

        Args:
            outcome: The outcome of the attempt.
            context: The context of the logical call.
            request: The request of the logical call, used for messages.

        Returns:
            The decision.
        """
        decision = self._decide_without_condition(outcome, context, request)
        if decision is not None:
            return decision
        if self.termination_condition is not None:
            response, error = outcome
            return self._apply_condition(
                outcome, self.termination_condition(replayable_copy(response), error)
            )
        return self._default_rule(outcome, request)

    async def decide_async(
        self, outcome: Outcome, context: CallContext, request: httpx.Request
    ) -> Decision:
        r"""Asynchronous version of ``decide``.

        The response is copied with ``aread`` since it comes from an
        asynchronous transport.
        """
        decision = self._decide_without_condition(outcome, context, request)
        if decision is not None:
            return decision
        if self.termination_condition is not None:
            response, error = outcome
            copy = await replayable_copy_async(response)
            return self._apply_condition(outcome, self.termination_condition(copy, error))
        return self._default_rule(outcome, request)

    def _decide_without_condition(
        self, outcome: Outcome, context: CallContext, request: httpx.Request
    ) -> Decision | None:
        response, error = outcome
        if context.done() and (
            response is None or isinstance(error, (DeadlineExceededError, RequestCancelledError))
        ):
            if not isinstance(error, (DeadlineExceededError, RequestCancelledError)):
                context_error = context.error()
                if context_error is not None:
                    context_error.__cause__ = error
                    outcome = outcome._replace(error=context_error)
            return Decision(outcome, True, "call context done")
        if response is None:
            return Decision(outcome, False, type(error).__name__)
        if response.status_code == TOO_MANY_REQUESTS:
            return Decision(outcome, False, f"status {response.status_code}")
        logger.debug(
            f"{request.method} request to {request.url} returned status {response.status_code}"
        )
        return None

    def _apply_condition(self, outcome: Outcome, terminated: bool) -> Decision:
        if terminated:
            return Decision(outcome, True, "termination condition satisfied")
        return Decision(outcome, False, "termination condition not satisfied")

    def _default_rule(self, outcome: Outcome, request: httpx.Request) -> Decision:
        response, error = outcome
        status_code = response.status_code
        if 400 <= status_code < 500:
            text = status_text(response)
            logger.debug(f"{request.method} request to {request.url} terminated with {text}")
            termination = ClientErrorResponseError(
                method=request.method,
                url=str(request.url),
                message=f"4xx response: {text}",
                status_code=status_code,
                response=response,
                cause=error,
            )
            return Decision(outcome._replace(error=termination), True, f"client error {text}")
        if status_code < 400:
            return Decision(outcome, True, "success")
        return Decision(outcome, False, f"status {status_code}")
