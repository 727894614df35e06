r"""Wait computation between attempts.

This module provides the RetryStrategy class computing how long the
iteration waits before the next attempt.
"""

from __future__ import annotations

__all__ = ["RetryStrategy"]

import logging
from typing import TYPE_CHECKING

from aresiter.backoff import ConstantBackoff, ExponentialBackoff
from aresiter.retry.decider import TOO_MANY_REQUESTS
from aresiter.utils.retry_after import RETRY_AFTER_HEADER, parse_retry_after
from aresiter.utils.structured_logging import log_structured

if TYPE_CHECKING:
    import httpx

    from aresiter.backoff import BaseBackoffStrategy

logger: logging.Logger = logging.getLogger(__name__)


class RetryStrategy:
    """Strategy for computing the wait before the next attempt.

    In order of precedence:

    1. The ``Retry-After`` header of a 429 response, when it parses.
    2. The fixed ``interval``, when positive.
    3. The backoff strategy, exponential with full jitter by default.

    Args:
        interval: Fixed wait in seconds. ``0`` means backoff is used.
        backoff_strategy: Backoff strategy used without fixed interval.
            Defaults to ``ExponentialBackoff()``.

    Attributes:
        backoff_strategy: The strategy applied when there is neither a
            usable ``Retry-After`` header nor a fixed interval.

    Example:
        ```pycon
        >>> import httpx
        >>> from aresiter.retry.strategy import RetryStrategy
        >>> strategy = RetryStrategy(interval=0.5)
        >>> strategy.calculate_delay(attempt=3)
        0.5
        >>> response = httpx.Response(429, headers={"Retry-After": "2"})
        >>> strategy.calculate_delay(attempt=0, response=response)
        2.0

        ```
    """

    def __init__(
        self, interval: float = 0.0, backoff_strategy: BaseBackoffStrategy | None = None
    ) -> None:
        if interval > 0:
            self.backoff_strategy: BaseBackoffStrategy = ConstantBackoff(interval)
        elif backoff_strategy is not None:
            self.backoff_strategy = backoff_strategy
        else:
            self.backoff_strategy = ExponentialBackoff()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(backoff_strategy={self.backoff_strategy})"

    def calculate_delay(
        self,
        attempt: int,
        response: httpx.Response | None = None,
        url: str | None = None,
    ) -> float:
        """Compute the wait before the next attempt.

        Args:
            attempt: The zero-based number of the attempt that just
                finished.
            response: The response of that attempt, if any.
            url: The URL of the request, used in diagnostics.

        Returns:
            The wait in seconds.
        """
        if response is not None and response.status_code == TOO_MANY_REQUESTS:
            retry_after = self._retry_after(response, url)
            if retry_after is not None:
                logger.debug(f"Using Retry-After header value: {retry_after:.2f}s")
                return retry_after
        wait = self.backoff_strategy.calculate(attempt)
        logger.debug(f"Waiting {wait:.2f}s before attempt {attempt + 2}")
        return wait

    def _retry_after(self, response: httpx.Response, url: str | None) -> float | None:
        header = response.headers.get(RETRY_AFTER_HEADER)
        if header is None:
            return None
        retry_after = parse_retry_after(header)
        if retry_after is None:
            log_structured(
                logger,
                logging.ERROR,
                "Server returned an invalid 'Retry-After' header, falling back to backoff",
                url=url,
                retry_after=header,
            )
        return retry_after
