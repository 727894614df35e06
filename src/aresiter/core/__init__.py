r"""Core building blocks shared by the sync and async iterations.

This package contains the policy and its option functions, the call
context carrying the deadline and cancellation, the body rewinder, and
the construction of the request of a logical call.
"""

from __future__ import annotations

__all__ = [
    "BodyRewinder",
    "CallContext",
    "Option",
    "Policy",
    "build_policy",
    "build_request",
    "passthrough",
]

from aresiter.core.config import Policy, passthrough
from aresiter.core.context import CallContext
from aresiter.core.http_logic import build_request
from aresiter.core.options import Option, build_policy
from aresiter.core.rewind import BodyRewinder
