r"""Cancellation and deadline context for a logical call.

A ``CallContext`` carries an optional overall deadline and a
cancellation flag. It is checked before each attempt, raced against
each attempt, and used to sleep between attempts. A child context
derived with ``child(period)`` bounds a single attempt.

The context is thread-safe: ``cancel()`` may be called from any thread,
including while the iteration is sleeping or waiting on a transport
call, and wakes synchronous and asynchronous waiters alike.
"""

from __future__ import annotations

__all__ = ["CallContext"]

import asyncio
import logging
import threading
import time
from typing import TYPE_CHECKING

from aresiter.exceptions import (
    AttemptTimeoutError,
    DeadlineExceededError,
    RequestCancelledError,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

logger: logging.Logger = logging.getLogger(__name__)


class CallContext:
    r"""Deadline and cancellation shared by the attempts of one call.

    Args:
        timeout: Optional overall budget in seconds, counted from the
            creation of the context. A value less than or equal to 0
            creates an already expired context. ``None`` means no
            deadline.

    Example:
        ```pycon
        >>> from aresiter.core.context import CallContext
        >>> context = CallContext()
        >>> context.done()
        False
        >>> context.remaining() is None
        True
        >>> context.cancel()
        >>> context.done()
        True
        >>> type(context.error()).__name__
        'RequestCancelledError'
        >>> type(CallContext(timeout=0).error()).__name__
        'DeadlineExceededError'

        ```
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._deadline: float | None = None
        if timeout is not None:
            self._deadline = time.monotonic() + timeout
        self._parent: CallContext | None = None
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(remaining={self.remaining()}, "
            f"cancelled={self._cancelled.is_set()})"
        )

    @property
    def deadline(self) -> float | None:
        r"""The deadline as a ``time.monotonic()`` value, or ``None``."""
        return self._deadline

    def cancel(self) -> None:
        r"""Cancel this context and every child derived from it."""
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            callbacks = list(self._callbacks)
        logger.debug(f"Call context cancelled, waking {len(callbacks)} waiter(s)")
        for callback in callbacks:
            callback()

    def cancelled(self) -> bool:
        r"""Indicate if this context, or one of its parents, was
        cancelled."""
        if self._cancelled.is_set():
            return True
        return self._parent is not None and self._parent.cancelled()

    def expired(self) -> bool:
        r"""Indicate if the deadline elapsed."""
        return self._deadline is not None and time.monotonic() >= self._deadline

    def done(self) -> bool:
        r"""Indicate if the context is cancelled or past its deadline."""
        return self.cancelled() or self.expired()

    def remaining(self) -> float | None:
        r"""Return the seconds left before the deadline.

        Returns:
            The remaining time (never negative), or ``None`` if there is
                no deadline.
        """
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def error(self) -> Exception | None:
        r"""Return the error describing why the context is done.

        Cancellation and the deadline of a parent take precedence over
        the deadline of a child.

        Returns:
            ``RequestCancelledError``, ``DeadlineExceededError``, or
                ``AttemptTimeoutError`` for an expired child, or ``None``
                if the context is not done.
        """
        if self._parent is not None:
            parent_error = self._parent.error()
            if parent_error is not None:
                return parent_error
        if self._cancelled.is_set():
            return RequestCancelledError("call context was cancelled")
        if self.expired():
            if self._parent is not None:
                return AttemptTimeoutError("attempt exceeded its timeout period")
            return DeadlineExceededError("call context deadline exceeded")
        return None

    def child(self, period: float = 0.0) -> CallContext:
        r"""Derive a context bounding a single attempt.

        The child expires after ``period`` seconds or at the deadline of
        this context, whichever comes first, and is cancelled with this
        context. Use it as a context manager so it detaches from this
        context when the attempt ends.

        Args:
            period: The attempt timeout in seconds. A value less than or
                equal to 0 keeps the deadline of this context.

        Returns:
            The child context.

        Example:
            ```pycon
            >>> from aresiter.core.context import CallContext
            >>> context = CallContext(timeout=60)
            >>> with context.child(0.5) as attempt:
            ...     attempt.remaining() <= 0.5
            ...
            True

            ```
        """
        child = CallContext()
        child._parent = self
        child._deadline = self._deadline
        if period > 0:
            bound = time.monotonic() + period
            child._deadline = bound if self._deadline is None else min(self._deadline, bound)
        self.add_done_callback(child.cancel)
        return child

    def __enter__(self) -> CallContext:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._parent is not None:
            self._parent.remove_done_callback(self.cancel)

    def add_done_callback(self, callback: Callable[[], None]) -> None:
        r"""Register a callable invoked when the context is cancelled.

        The callable is invoked immediately if the context is already
        cancelled. It may be invoked from any thread.
        """
        with self._lock:
            if not self._cancelled.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_done_callback(self, callback: Callable[[], None]) -> None:
        r"""Unregister a callable added with ``add_done_callback``."""
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def _bounded(self, seconds: float | None) -> float | None:
        remaining = self.remaining()
        if seconds is None:
            return remaining
        seconds = max(0.0, seconds)
        return seconds if remaining is None else min(seconds, remaining)

    def wait(self, seconds: float | None) -> bool:
        r"""Sleep for up to ``seconds``, waking early on cancellation.

        Args:
            seconds: The time to sleep. ``None`` sleeps until the context
                is done.

        Returns:
            ``True`` if the context is done when the wait ends, ``False``
                if the full duration elapsed first.
        """
        if self.done():
            return True
        wake = threading.Event()
        self.add_done_callback(wake.set)
        try:
            wake.wait(self._bounded(seconds))
        finally:
            self.remove_done_callback(wake.set)
        return self.done()

    async def wait_async(self, seconds: float | None) -> bool:
        r"""Asynchronous version of ``wait``."""
        if self.done():
            return True
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[None] = loop.create_future()

        def resolve() -> None:
            if not waiter.done():
                waiter.set_result(None)

        def wake() -> None:
            loop.call_soon_threadsafe(resolve)

        self.add_done_callback(wake)
        try:
            await asyncio.wait_for(waiter, self._bounded(seconds))
        except asyncio.TimeoutError:
            pass
        finally:
            self.remove_done_callback(wake)
        return self.done()
