r"""Contains the resilient HTTP POST request with a URL-encoded form
body."""

from __future__ import annotations

__all__ = ["post_form"]

import logging
from typing import TYPE_CHECKING

from aresiter.content_types import APPLICATION_FORM_URL_ENCODED
from aresiter.core.options import with_content_type
from aresiter.request import request
from aresiter.utils.form import encode_form
from aresiter.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

    import httpx

    from aresiter.core.config import Policy
    from aresiter.core.context import CallContext
    from aresiter.core.options import Option
    from aresiter.retry.outcome import Outcome

logger: logging.Logger = logging.getLogger(__name__)


def post_form(
    url: str | httpx.URL,
    data: Mapping[str, str | Sequence[str]],
    *options: Option,
    context: CallContext | None = None,
    policy: Policy | None = None,
) -> Iterator[Outcome]:
    r"""Send a form as an HTTP POST request, retrying it according to the
    policy.

    The form is URL-encoded with sorted keys, and the content type is
    forced to ``application/x-www-form-urlencoded`` after the caller's
    options are applied.

    Args:
        url: The URL to send the form to.
        data: The form fields. A field mapped to a sequence of values is
            sent once per value.
        *options: Option functions applied in order onto ``policy``.
        context: The context carrying the deadline and the
            cancellation of the call.
        policy: The base policy. ``None`` starts from the defaults.

    The form is encoded when the iteration starts. A form that cannot
    be encoded is logged at warning level and gives an empty sequence.

    Yields:
        The ``(response, error)`` outcome of each attempt.

    Example:
        ```pycon
        >>> from aresiter import post_form
        >>> for response, error in post_form(
        ...     "https://api.example.com/login", {"user": "ada", "scope": ["read", "write"]}
        ... ):  # doctest: +SKIP
        ...     print(response.status_code if response is not None else error)
        ...

        ```
    """
    try:
        body = encode_form(data)
    except Exception as exc:  # noqa: BLE001
        log_structured(
            logger,
            logging.WARNING,
            "Failed to encode the form, no attempt is made",
            method="POST",
            url=str(url),
            error=repr(exc),
        )
        return
    yield from request(
        "POST",
        url,
        body,
        *options,
        with_content_type(APPLICATION_FORM_URL_ENCODED),
        context=context,
        policy=policy,
    )
