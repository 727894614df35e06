r"""Exponential backoff strategy with full jitter."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

import random

from aresiter.backoff.base import BaseBackoffStrategy

# Exponent cap, keeps the ceiling finite for unbounded iterations
MAX_EXPONENT = 64


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy with full jitter.

    The ceiling for a given attempt is ``base_delay * (2 ** attempt)``,
    optionally capped at ``max_delay``. With ``full_jitter`` enabled (the
    default) the wait is drawn uniformly from ``[0, ceiling]`` so that
    clients retrying at the same time spread out.

    With the default ``base_delay`` of 2 seconds, the wait after the
    first attempt is in ``[0, 2]`` seconds, after the second in ``[0, 4]``,
    after the third in ``[0, 8]``, and so on.

    Args:
        base_delay: The ceiling in seconds after the first attempt.
        max_delay: Optional cap on the ceiling, in seconds.
        full_jitter: If ``False``, the ceiling itself is returned.

    Raises:
        ValueError: if ``base_delay`` is negative or ``max_delay`` is not
            positive.

    Example:
        ```pycon
        >>> from aresiter.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(full_jitter=False)
        >>> backoff.calculate(0)
        2.0
        >>> backoff.calculate(2)
        8.0
        >>> backoff = ExponentialBackoff(base_delay=1.0, max_delay=5.0, full_jitter=False)
        >>> backoff.calculate(10)
        5.0
        >>> 0.0 <= ExponentialBackoff().calculate(3) <= 16.0
        True

        ```
    """

    def __init__(
        self, base_delay: float = 2.0, max_delay: float | None = None, full_jitter: bool = True
    ) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        if max_delay is not None and max_delay <= 0:
            msg = f"max_delay must be positive if specified, got {max_delay}"
            raise ValueError(msg)

        self.base_delay = base_delay
        self.max_delay = max_delay
        self.full_jitter = full_jitter

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_delay={self.base_delay}, "
            f"max_delay={self.max_delay}, full_jitter={self.full_jitter})"
        )

    def calculate(self, attempt: int) -> float:
        ceiling = self.base_delay * (2.0 ** min(max(attempt, 0), MAX_EXPONENT))
        if self.max_delay is not None:
            ceiling = min(ceiling, self.max_delay)
        if not self.full_jitter:
            return ceiling
        return random.uniform(0, ceiling)  # noqa: S311
