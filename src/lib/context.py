"""
Cancellable execution context and top-level timeout wrapper

A Context carries an optional deadline and a cancel flag, and may hang off
a parent whose cancellation or deadline it inherits. Code that blocks on
external work polls ``done()`` (or calls ``check()``) between short waits;
cancellation is cooperative, never preemptive.

Example:
    >>> ctx = Context.context_withTimeout(5)
    >>> ctx.check()            # raises once cancelled or past the deadline
    >>> ctx.cancel()
    >>> ctx.done()
    True
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait, FIRST_COMPLETED
from typing import Callable, Optional, TypeVar

from ..config import appsettings
from .errors import CancellationError, DeadlineExceeded
from .log import LOG, context_capture

T = TypeVar("T")


class Context:
    """
    Deadline and cancellation signal shared by one pipeline run

    Attributes:
        deadline: time.monotonic() value after which the context is done,
                  or None for no deadline
        parent: Context whose state this one inherits
    """

    def __init__(self, deadline: Optional[float] = None, parent: Optional["Context"] = None) -> None:
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline
        self.parent = parent
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "Context":
        """A context that is never done unless cancelled"""
        return cls()

    @classmethod
    def context_withTimeout(cls, seconds: float, parent: Optional["Context"] = None) -> "Context":
        """Derive a context that expires ``seconds`` from now"""
        return cls(deadline=time.monotonic() + seconds, parent=parent)

    def cancel(self) -> None:
        self._cancelled.set()

    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self.parent is not None and self.parent.cancelled()

    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def done(self) -> bool:
        return self.cancelled() or self.expired()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline (never negative), or None"""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self) -> None:
        """
        Raise if the context is done

        Raises:
            CancellationError: The context (or a parent) was cancelled
            DeadlineExceeded: The deadline has elapsed
        """
        if self.cancelled():
            raise CancellationError("context cancelled")
        if self.expired():
            raise DeadlineExceeded("context deadline exceeded")


def timeout_run(
    ctx: Optional[Context],
    seconds: Optional[float],
    fn: Callable[[Context], T],
) -> T:
    """
    Run ``fn`` under a deadline, returning as soon as either finishes

    ``fn`` runs on a worker thread with a child context expiring after
    ``seconds`` (the configured default when zero or None). Its result or
    error is returned the moment it is available. If the deadline or a
    cancellation of ``ctx`` comes first, the child context is cancelled,
    the worker is abandoned, and DeadlineExceeded/CancellationError is
    raised without waiting for it.

    Args:
        ctx: Parent context, or None for a fresh background context
        seconds: Upper bound for the whole call
        fn: Work to run; receives the child context

    Returns:
        Whatever ``fn`` returns

    Raises:
        Whatever ``fn`` raises, or DeadlineExceeded/CancellationError
    """
    if not seconds or seconds <= 0:
        seconds = appsettings.timeout
    parent = ctx or Context.background()
    child = Context.context_withTimeout(seconds, parent=parent)

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="litdown")
    future = executor.submit(context_capture().run, fn, child)
    try:
        while True:
            slice_ = min(appsettings.poll_interval, child.remaining() or 0.0)
            finished, _ = wait([future], timeout=slice_, return_when=FIRST_COMPLETED)
            if finished:
                return future.result()
            if child.done():
                child.cancel()
                if parent.cancelled():
                    raise CancellationError("cancelled while waiting for result")
                LOG(f"Timed out after {seconds}s, abandoning work", level=1)
                raise DeadlineExceeded(f"did not finish within {seconds:g}s")
    finally:
        executor.shutdown(wait=False)
