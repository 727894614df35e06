r"""aresiter - Resilient HTTP requests exposed as lazy iterators.

This package sends an HTTP request until it succeeds, fails
permanently, or a policy says stop, and yields the ``(response,
error)`` outcome of every attempt to the caller. Built on top of httpx,
it keeps the retry loop out of application code while leaving every
attempt visible.

Key Features:
    - One outcome per physical attempt, pulled lazily by the caller
    - Early stop by leaving the loop, releasing the outstanding response
    - Exponential backoff with full jitter, or a fixed interval
    - Retry-After header support for 429 responses (seconds, durations,
      and HTTP-dates)
    - Per-attempt timeouts and an overall deadline with cancellation
    - Request bodies replayed identically on every attempt
    - Termination conditions and wrapping hooks supplied by the caller
    - Full async support with the same semantics

Example:
    ```pycon
    >>> from aresiter import get, with_max_attempts
    >>> for response, error in get(
    ...     "https://api.example.com/data", with_max_attempts(5)
    ... ):  # doctest: +SKIP
    ...     if error is not None:
    ...         print(f"attempt failed: {error}")
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "AttemptTimeoutError",
    "CallContext",
    "ClientErrorResponseError",
    "DeadlineExceededError",
    "HttpRequestError",
    "Option",
    "Outcome",
    "Policy",
    "RequestCancelledError",
    "__version__",
    "build_policy",
    "delete",
    "delete_async",
    "get",
    "get_async",
    "head",
    "head_async",
    "is_terminated_with_client_error",
    "passthrough",
    "patch",
    "patch_async",
    "post",
    "post_async",
    "post_form",
    "post_form_async",
    "put",
    "put_async",
    "request",
    "request_async",
    "with_aspect",
    "with_auto_close",
    "with_backoff_strategy",
    "with_client",
    "with_content_type",
    "with_headers",
    "with_interval",
    "with_max_attempts",
    "with_new_request",
    "with_period",
    "with_termination_condition",
]

from importlib.metadata import PackageNotFoundError, version

from aresiter.core.config import Policy, passthrough
from aresiter.core.context import CallContext
from aresiter.core.options import (
    Option,
    build_policy,
    with_aspect,
    with_auto_close,
    with_backoff_strategy,
    with_client,
    with_content_type,
    with_headers,
    with_interval,
    with_max_attempts,
    with_new_request,
    with_period,
    with_termination_condition,
)
from aresiter.delete import delete
from aresiter.delete_async import delete_async
from aresiter.exceptions import (
    AttemptTimeoutError,
    ClientErrorResponseError,
    DeadlineExceededError,
    HttpRequestError,
    RequestCancelledError,
    is_terminated_with_client_error,
)
from aresiter.get import get
from aresiter.get_async import get_async
from aresiter.head import head
from aresiter.head_async import head_async
from aresiter.patch import patch
from aresiter.patch_async import patch_async
from aresiter.post import post
from aresiter.post_async import post_async
from aresiter.post_form import post_form
from aresiter.post_form_async import post_form_async
from aresiter.put import put
from aresiter.put_async import put_async
from aresiter.request import request
from aresiter.request_async import request_async
from aresiter.retry.outcome import Outcome

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
