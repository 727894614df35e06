r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy determines how long to wait before the next
    attempt, given the number of attempts already made.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Calculate the wait before the next attempt.

        Args:
            attempt: The zero-based number of the attempt that just
                finished. For example, attempt=0 is the wait between the
                first and the second physical call.

        Returns:
            The wait in seconds.
        """
