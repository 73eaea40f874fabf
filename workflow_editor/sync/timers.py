"""Cancellable timers and debouncing on top of a scheduler."""

import asyncio
from typing import Any, Callable, Generic, Optional, Protocol, TypeVar

T = TypeVar("T")


class TimerHandle(Protocol):
    """Handle returned by ``Scheduler.call_later``."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop.

    Without an explicit loop the running loop is used, so callers must be
    inside a coroutine or loop callback.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class CancellableTimer:
    """Single-slot timer; scheduling replaces any pending callback."""

    def __init__(self, scheduler: Scheduler, delay: float):
        self.delay = delay
        self._scheduler = scheduler
        self._handle: Optional[TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` after ``delay``, replacing a pending one.

        If the scheduler raises, the pending callback is left untouched.
        """
        def fire() -> None:
            self._handle = None
            callback()

        handle = self._scheduler.call_later(self.delay, fire)
        self.cancel()
        self._handle = handle

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class Debouncer(Generic[T]):
    """Collapse rapid values into one callback after a quiet period.

    Values superseded before the quiet period ends are discarded.
    """

    _EMPTY: Any = object()

    def __init__(self, scheduler: Scheduler, delay: float, callback: Callable[[T], None]):
        self._timer = CancellableTimer(scheduler, delay)
        self._callback = callback
        self._value: Any = self._EMPTY

    @property
    def pending(self) -> bool:
        return self._value is not self._EMPTY

    def push(self, value: T) -> None:
        """Record the latest value and restart the quiet period."""
        self._timer.schedule(self._fire)
        self._value = value

    def flush(self) -> bool:
        """Deliver a pending value now. Returns whether one was delivered."""
        if not self.pending:
            return False
        self._timer.cancel()
        self._fire()
        return True

    def cancel(self) -> None:
        """Drop the pending value without delivering it."""
        self._timer.cancel()
        self._value = self._EMPTY

    def _fire(self) -> None:
        value, self._value = self._value, self._EMPTY
        if value is self._EMPTY:
            return
        self._callback(value)
