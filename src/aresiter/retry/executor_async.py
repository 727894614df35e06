r"""Asynchronous attempt executor.

This module provides the AsyncAttemptExecutor class, the asyncio twin of
``AttemptExecutor``. The call runs in its own task, raced against the
attempt's deadline and the cancellation of the call context. A task that
loses the race is cancelled without being awaited.
"""

from __future__ import annotations

__all__ = ["AsyncAttemptExecutor"]

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from aresiter.core.config import passthrough
from aresiter.retry.executor import attach_timeout
from aresiter.retry.outcome import Outcome

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    import httpx

    from aresiter.core.context import CallContext

logger: logging.Logger = logging.getLogger(__name__)


class AsyncAttemptExecutor:
    """Performs one physical asynchronous HTTP call under an optional
    timeout.

    Args:
        client: The transport; ``await send(request)`` performs the call.
        aspect: Optional async hook ``aspect(request, send)`` wrapped
            around the call. ``None`` sends the request unchanged.
        period: Timeout in seconds of the attempt. ``0`` means the attempt
            is only bounded by the call context.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from aresiter.core.context import CallContext
        >>> from aresiter.retry.executor_async import AsyncAttemptExecutor
        >>> async def main():
        ...     transport = httpx.MockTransport(lambda request: httpx.Response(204))
        ...     async with httpx.AsyncClient(transport=transport) as client:
        ...         executor = AsyncAttemptExecutor(client, period=5.0)
        ...         return await executor.execute(
        ...             httpx.Request("GET", "https://example.com"), CallContext()
        ...         )
        ...
        >>> response, error = asyncio.run(main())
        >>> response.status_code, error
        (204, None)

        ```
    """

    def __init__(
        self,
        client: Any,
        aspect: Callable[..., Awaitable[httpx.Response]] | None = None,
        period: float = 0.0,
    ) -> None:
        self.client = client
        self.aspect = aspect if aspect is not None else passthrough
        self.period = period

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(period={self.period})"

    async def execute(self, request: httpx.Request, context: CallContext) -> Outcome:
        """Perform the attempt.

        Args:
            request: The request of this attempt.
            context: The context of the logical call.

        Returns:
            The outcome produced by the aspect or the transport, or
                ``(None, error)`` with the context error if the deadline
                elapsed or the context was cancelled first.
        """
        if context.done():
            return Outcome(None, context.error())
        with context.child(self.period) as attempt_context:
            attach_timeout(request, attempt_context)
            loop = asyncio.get_running_loop()
            woken: asyncio.Future[None] = loop.create_future()

            def wake() -> None:
                loop.call_soon_threadsafe(_resolve, woken)

            attempt_context.add_done_callback(wake)
            task = asyncio.ensure_future(self._send(request))
            try:
                while not task.done() and not attempt_context.done():
                    await asyncio.wait(
                        {task, woken},
                        timeout=attempt_context.remaining(),
                        return_when=asyncio.FIRST_COMPLETED,
                    )
            except asyncio.CancelledError:
                task.cancel()
                raise
            finally:
                attempt_context.remove_done_callback(wake)
            if task.done():
                return task.result()
            task.cancel()
            logger.debug(
                f"{request.method} request to {request.url} abandoned: "
                f"{attempt_context.error()}"
            )
            return Outcome(None, attempt_context.error())

    async def _send(self, request: httpx.Request) -> Outcome:
        try:
            response = await self.aspect(request, self.client.send)
        except Exception as exc:  # noqa: BLE001
            logger.debug(
                f"{request.method} request to {request.url} raised {type(exc).__name__}: {exc}"
            )
            return Outcome.from_exception(exc)
        return Outcome(response, None)


def _resolve(future: asyncio.Future[None]) -> None:
    if not future.done():
        future.set_result(None)
