r"""Retry-After header parsing utilities.

The header of a 429 response controls the wait before the next attempt.
Three forms are accepted: a delay in seconds (``"120"`` or ``"1.5"``), a
duration string (``"1m30s"``, ``"500ms"``), and an HTTP-date.
"""

from __future__ import annotations

__all__ = ["RETRY_AFTER_HEADER", "parse_duration", "parse_retry_after"]

import logging
import math
import re
from contextlib import suppress
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

logger: logging.Logger = logging.getLogger(__name__)

RETRY_AFTER_HEADER = "Retry-After"

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION = re.compile(rf"(?:{_DURATION_PART.pattern})+")


def parse_duration(value: str) -> float | None:
    """Parse a duration string such as ``"1m30s"`` into seconds.

    Args:
        value: A sequence of ``<number><unit>`` groups. Supported units
            are ``ns``, ``us`` (or ``µs``), ``ms``, ``s``, ``m`` and ``h``.

    Returns:
        The duration in seconds, or ``None`` if ``value`` is not a valid
            duration string.

    Example:
        ```pycon
        >>> from aresiter.utils.retry_after import parse_duration
        >>> parse_duration("1m30s")
        90.0
        >>> parse_duration("1.5s")
        1.5
        >>> parse_duration("250ms")
        0.25
        >>> parse_duration("5") is None
        True

        ```
    """
    value = value.strip()
    if not _DURATION.fullmatch(value):
        return None
    return sum(
        float(number) * _DURATION_UNITS[unit] for number, unit in _DURATION_PART.findall(value)
    )


def parse_retry_after(retry_after_header: str | None) -> float | None:
    """Parse the Retry-After header value of an HTTP response.

    The value is tried, in order, as a number of seconds, as a duration
    string, and as an HTTP-date (RFC 7231). Dates in the past give 0.

    Args:
        retry_after_header: The value of the header, or ``None`` if the
            response has no such header.

    Returns:
        The number of seconds to wait, or ``None`` if the header is
            absent, negative, not finite, or cannot be parsed.

    Example:
        ```pycon
        >>> from aresiter.utils import parse_retry_after
        >>> parse_retry_after("120")
        120.0
        >>> parse_retry_after("2s")
        2.0
        >>> parse_retry_after(None) is None
        True
        >>> parse_retry_after("invalid") is None
        True
        >>> parse_retry_after("-1") is None
        True

        ```
    """
    if retry_after_header is None:
        return None
    value = retry_after_header.strip()
    if not value:
        return None

    with suppress(ValueError):
        seconds = float(value)
        if math.isfinite(seconds) and seconds >= 0:
            return seconds
        return None

    seconds = parse_duration(value)
    if seconds is not None:
        return seconds

    try:
        retry_date: datetime = parsedate_to_datetime(value)
    except (ValueError, TypeError, OverflowError):
        logger.debug(f"Failed to parse Retry-After header: {retry_after_header!r}")
        return None
    if retry_date.tzinfo is None:
        retry_date = retry_date.replace(tzinfo=timezone.utc)
    delta_seconds = (retry_date - datetime.now(timezone.utc)).total_seconds()
    return max(0.0, delta_seconds)
