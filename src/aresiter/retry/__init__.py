r"""Retry package: the components driving the attempts of a call.

Public API:
    - Outcome: The ``(response, error)`` pair of an attempt
    - RetryDecider: Decides whether the iteration stops after an attempt
    - RetryStrategy: Computes the wait before the next attempt
    - AttemptExecutor: Performs one synchronous attempt under a timeout
    - AsyncAttemptExecutor: Performs one asynchronous attempt under a timeout
"""

from __future__ import annotations

__all__ = [
    "AsyncAttemptExecutor",
    "AttemptExecutor",
    "Decision",
    "Outcome",
    "RetryDecider",
    "RetryStrategy",
    "prepare_attempt",
]

from aresiter.retry.decider import Decision, RetryDecider
from aresiter.retry.executor import AttemptExecutor, prepare_attempt
from aresiter.retry.executor_async import AsyncAttemptExecutor
from aresiter.retry.outcome import Outcome
from aresiter.retry.strategy import RetryStrategy
