r"""Helpers for building request headers."""

from __future__ import annotations

__all__ = ["FRAMING_HEADERS", "copy_headers", "replace_headers"]

from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

# Headers computed from the URL and the body by request construction
FRAMING_HEADERS = ("Host", "Content-Length", "Transfer-Encoding")


def copy_headers(headers: Mapping[str, str] | httpx.Headers) -> httpx.Headers:
    r"""Return an independent copy of a set of headers.

    Multi-valued headers keep all their values.

    Example:
        ```pycon
        >>> import httpx
        >>> from aresiter.utils.headers import copy_headers
        >>> original = httpx.Headers([("Accept", "a"), ("Accept", "b")])
        >>> copy = copy_headers(original)
        >>> copy["X-Extra"] = "1"
        >>> copy.get_list("Accept"), "X-Extra" in original
        (['a', 'b'], False)

        ```
    """
    if isinstance(headers, httpx.Headers):
        return httpx.Headers(headers.multi_items())
    return httpx.Headers(headers)


def replace_headers(
    current: httpx.Headers, custom: Mapping[str, str] | httpx.Headers
) -> httpx.Headers:
    r"""Replace request headers with custom headers.

    The custom headers are not merged into the current ones: any current
    header absent from ``custom`` is dropped, except the framing headers
    (``Host``, ``Content-Length``, ``Transfer-Encoding``) which describe
    the target and the body and are required by the transport.

    Args:
        current: The headers built with the request.
        custom: The headers replacing them.

    Returns:
        The new headers.

    Example:
        ```pycon
        >>> import httpx
        >>> from aresiter.utils.headers import replace_headers
        >>> current = httpx.Headers({"Host": "example.com", "Accept": "*/*"})
        >>> headers = replace_headers(current, {"X-Token": "abc"})
        >>> sorted(headers.keys())
        ['host', 'x-token']

        ```
    """
    headers = copy_headers(custom)
    for name in FRAMING_HEADERS:
        if name in current and name not in headers:
            headers[name] = current[name]
    return headers
