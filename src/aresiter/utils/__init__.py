r"""Utility functions for the resilient request iterator.

This package provides helpers for parsing the Retry-After header,
copying and closing responses, building request headers and form
bodies, and emitting structured log records.
"""

from __future__ import annotations

__all__ = [
    "close_response",
    "close_response_async",
    "copy_headers",
    "encode_form",
    "log_structured",
    "parse_duration",
    "parse_retry_after",
    "replace_headers",
    "replayable_copy",
    "replayable_copy_async",
    "status_text",
]

from aresiter.utils.form import encode_form
from aresiter.utils.headers import copy_headers, replace_headers
from aresiter.utils.response import (
    close_response,
    close_response_async,
    replayable_copy,
    replayable_copy_async,
    status_text,
)
from aresiter.utils.retry_after import parse_duration, parse_retry_after
from aresiter.utils.structured_logging import log_structured
