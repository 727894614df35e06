r"""Contains the asynchronous resilient HTTP POST request with a
URL-encoded form body."""

from __future__ import annotations

__all__ = ["post_form_async"]

import logging
from contextlib import aclosing
from typing import TYPE_CHECKING

from aresiter.content_types import APPLICATION_FORM_URL_ENCODED
from aresiter.core.options import with_content_type
from aresiter.request_async import request_async
from aresiter.utils.form import encode_form
from aresiter.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping, Sequence

    import httpx

    from aresiter.core.config import Policy
    from aresiter.core.context import CallContext
    from aresiter.core.options import Option
    from aresiter.retry.outcome import Outcome

logger: logging.Logger = logging.getLogger(__name__)


async def post_form_async(
    url: str | httpx.URL,
    data: Mapping[str, str | Sequence[str]],
    *options: Option,
    context: CallContext | None = None,
    policy: Policy | None = None,
) -> AsyncIterator[Outcome]:
    r"""Asynchronous version of ``post_form``."""
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
    outcomes = request_async(
        "POST",
        url,
        body,
        *options,
        with_content_type(APPLICATION_FORM_URL_ENCODED),
        context=context,
        policy=policy,
    )
    async with aclosing(outcomes):
        async for outcome in outcomes:
            yield outcome
