r"""Structured logging for machine-readable diagnostics.

The iteration reports notable events (an unusable ``Retry-After`` header,
a request body that cannot be rewound, a request that cannot be built)
through ``log_structured``, attaching attributes such as the URL or the
underlying error as ``extra`` fields. ``StructuredFormatter`` renders
those records as JSON lines. It is opt-in: the library never installs a
handler.

Example:
    Emit JSON for the aresiter loggers and tag each record with the id of
    the job that issued the requests:

    ```python
    import logging

    from aresiter.utils.structured_logging import StructuredFormatter, set_correlation_id

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.getLogger("aresiter").addHandler(handler)

    set_correlation_id("nightly-sync-42")
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

import contextvars
import json
import logging
import time
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "aresiter_correlation_id", default=None
)

# Attributes every LogRecord has; anything else was passed through ``extra``
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}

# (output field, LogRecord attribute) pairs copied into every rendered record
_RECORD_FIELDS = (
    ("level", "levelname"),
    ("logger", "name"),
    ("module", "module"),
    ("function", "funcName"),
    ("line", "lineno"),
)


def get_correlation_id() -> str | None:
    """Get the correlation id of the current context.

    Example:
        ```pycon
        >>> from aresiter.utils.structured_logging import (
        ...     clear_correlation_id,
        ...     get_correlation_id,
        ... )
        >>> clear_correlation_id()
        >>> get_correlation_id() is None
        True

        ```
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation id attached to the records of the current
    context.

    The id lives in a context variable, so each thread and each asyncio
    task sees its own value.

    Example:
        ```pycon
        >>> from aresiter.utils.structured_logging import (
        ...     get_correlation_id,
        ...     set_correlation_id,
        ... )
        >>> set_correlation_id("job-7")
        >>> get_correlation_id()
        'job-7'

        ```
    """
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    """Remove the correlation id of the current context."""
    _correlation_id.set(None)


def _jsonable(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    return str(value)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for log records.

    Each record becomes one JSON object with the fields ``timestamp``
    (ISO 8601, UTC), ``level``, ``logger``, ``message``, ``module``,
    ``function``, ``line``, the optional ``correlation_id`` and
    ``exception``, and every field passed through ``extra``. Values that
    are not JSON scalars are rendered with ``str``.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from io import StringIO
        >>> from aresiter.utils.structured_logging import StructuredFormatter
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("doctest_structured_formatter")
        >>> logger.addHandler(handler)
        >>> logger.warning("slow down", extra={"retry_after": "abc"})
        >>> record = json.loads(stream.getvalue())
        >>> record["message"], record["retry_after"], record["level"]
        ('slow down', 'abc', 'WARNING')

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "message": record.getMessage(),
        }
        fields.update((name, getattr(record, attribute)) for name, attribute in _RECORD_FIELDS)
        correlation_id = get_correlation_id()
        if correlation_id is not None:
            fields["correlation_id"] = correlation_id
        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)
        fields.update(
            (key, _jsonable(value))
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES
        )
        return json.dumps(fields)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(
    logger: logging.Logger,
    level: int,
    message: str,
    **extra: Any,
) -> None:
    """Log a message with structured fields.

    Args:
        logger: The logger to use.
        level: The log level, e.g. ``logging.WARNING``.
        message: The log message.
        **extra: Fields attached to the record.

    Example:
        ```pycon
        >>> import logging
        >>> from aresiter.utils.structured_logging import log_structured
        >>> log_structured(
        ...     logging.getLogger("doctest_log_structured"),
        ...     logging.DEBUG,
        ...     "attempt finished",
        ...     url="https://example.com",
        ...     attempt=1,
        ... )

        ```
    """
    logger.log(level, message, extra=extra)
