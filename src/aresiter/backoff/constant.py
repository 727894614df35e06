r"""Constant backoff strategy."""

from __future__ import annotations

__all__ = ["ConstantBackoff"]

from aresiter.backoff.base import BaseBackoffStrategy


class ConstantBackoff(BaseBackoffStrategy):
    """Constant backoff strategy.

    Returns the same wait for every attempt. The fixed ``interval`` of a
    ``Policy`` is applied through this strategy.

    Args:
        delay: The wait in seconds. Negative values are treated as 0.

    Example:
        ```pycon
        >>> from aresiter.backoff import ConstantBackoff
        >>> backoff = ConstantBackoff(delay=2.5)
        >>> backoff.calculate(0)
        2.5
        >>> backoff.calculate(10)
        2.5
        >>> ConstantBackoff(delay=-1.0).calculate(0)
        0.0

        ```
    """

    def __init__(self, delay: float = 1.0) -> None:
        self.delay = max(0.0, float(delay))

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(delay={self.delay})"

    def calculate(self, attempt: int) -> float:  # noqa: ARG002
        return self.delay
