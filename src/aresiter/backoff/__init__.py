r"""Backoff strategies for computing the wait between attempts.

The default strategy is an exponential backoff with full jitter. A
fixed interval configured on the policy is expressed as a constant
backoff.
"""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ConstantBackoff", "ExponentialBackoff"]

from aresiter.backoff.base import BaseBackoffStrategy
from aresiter.backoff.constant import ConstantBackoff
from aresiter.backoff.exponential import ExponentialBackoff
