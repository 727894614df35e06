r"""Helpers for URL-encoded form bodies."""

from __future__ import annotations

__all__ = ["encode_form"]

from typing import TYPE_CHECKING
from urllib.parse import urlencode

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


def encode_form(data: Mapping[str, str | Sequence[str]]) -> str:
    r"""Encode form data as ``application/x-www-form-urlencoded``.

    Keys are sorted. A key mapped to a sequence of values is repeated
    once per value, in order.

    Args:
        data: The form fields.

    Returns:
        The encoded body.

    Example:
        ```pycon
        >>> from aresiter.utils.form import encode_form
        >>> encode_form({"name": "Ada Lovelace", "tag": ["a", "b"], "id": "1"})
        'id=1&name=Ada+Lovelace&tag=a&tag=b'
        >>> encode_form({})
        ''

        ```
    """
    items: list[tuple[str, str]] = []
    for key in sorted(data):
        values = data[key]
        if isinstance(values, str):
            values = [values]
        items.extend((key, value) for value in values)
    return urlencode(items)
