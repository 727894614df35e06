r"""Shared test helpers for the HTTP verb tests.

The verb functions only differ by their method name and by whether
they take a body, so their tests are parametrized over the cases
defined here.
"""

from __future__ import annotations

__all__ = [
    "HTTP_METHODS",
    "HTTP_METHODS_ASYNC",
    "TEST_URL",
    "HttpMethodTestCase",
    "call_method",
    "recording_transport",
]

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from aresiter import (
    delete,
    delete_async,
    get,
    get_async,
    head,
    head_async,
    patch,
    patch_async,
    post,
    post_async,
    put,
    put_async,
)

if TYPE_CHECKING:
    from collections.abc import Callable

TEST_URL = "https://api.example.com/items"


@dataclass
class HttpMethodTestCase:
    """Test case definition for a verb function.

    Attributes:
        method_name: The HTTP method name (e.g., "GET", "POST").
        method_func: The verb function to test.
        supports_body: Whether the verb function takes a body.
    """

    method_name: str
    method_func: Callable[..., Any]
    supports_body: bool


HTTP_METHODS = [
    HttpMethodTestCase(method_name="GET", method_func=get, supports_body=False),
    HttpMethodTestCase(method_name="HEAD", method_func=head, supports_body=False),
    HttpMethodTestCase(method_name="POST", method_func=post, supports_body=True),
    HttpMethodTestCase(method_name="PUT", method_func=put, supports_body=True),
    HttpMethodTestCase(method_name="PATCH", method_func=patch, supports_body=True),
    HttpMethodTestCase(method_name="DELETE", method_func=delete, supports_body=True),
]

HTTP_METHODS_ASYNC = [
    HttpMethodTestCase(method_name="GET", method_func=get_async, supports_body=False),
    HttpMethodTestCase(method_name="HEAD", method_func=head_async, supports_body=False),
    HttpMethodTestCase(method_name="POST", method_func=post_async, supports_body=True),
    HttpMethodTestCase(method_name="PUT", method_func=put_async, supports_body=True),
    HttpMethodTestCase(method_name="PATCH", method_func=patch_async, supports_body=True),
    HttpMethodTestCase(method_name="DELETE", method_func=delete_async, supports_body=True),
]


def call_method(test_case: HttpMethodTestCase, body: Any, *options: Any, **kwargs: Any) -> Any:
    """Call a verb function, passing the body only if it takes one."""
    if test_case.supports_body:
        return test_case.method_func(TEST_URL, body, *options, **kwargs)
    return test_case.method_func(TEST_URL, *options, **kwargs)


def recording_transport(
    statuses: list[int], headers: dict[str, str] | None = None
) -> tuple[httpx.MockTransport, list[httpx.Request]]:
    """Create a transport answering with the given status codes in order.

    The transport keeps answering with the last status code once the
    list is exhausted, and records every request it receives with its
    body already read.
    """
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        request.read()
        seen.append(request)
        status_code = statuses[min(len(seen), len(statuses)) - 1]
        return httpx.Response(status_code, headers=headers)

    return httpx.MockTransport(handler), seen
