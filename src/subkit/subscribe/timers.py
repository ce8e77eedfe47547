"""Timer facilities backing ``set_timeout`` and ``set_interval``.

A facility schedules one-shot and repeating calls and cancels them by
handle. Delays are in seconds. Cancelling a handle whose call already ran,
or cancelling twice, does nothing.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Callable, Optional, Protocol, Sequence

from ..util.error import format_unknown_error
from ..util.log import Log

log = Log.create({"service": "subscribe.timers"})

# Repeating calls never run more often than this.
MIN_INTERVAL = 0.001


class TimerFacility(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Any: ...

    def call_every(self, delay: float, callback: Callable[..., Any], *args: Any) -> Any: ...

    def cancel(self, handle: Any) -> None: ...


def _run_tick(callback: Callable[..., Any], args: Sequence[Any]) -> None:
    try:
        callback(*args)
    except Exception as e:
        log.error("interval handler failed", {
            "error": str(e),
            "handler": getattr(callback, "__qualname__", repr(callback)),
            "traceback": format_unknown_error(e),
        })


class LoopInterval:
    """Repeating call on an asyncio loop, rescheduled before each tick."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        delay: float,
        callback: Callable[..., Any],
        args: Sequence[Any],
    ) -> None:
        self._loop = loop
        self.delay = max(delay, MIN_INTERVAL)
        self._callback = callback
        self._args = tuple(args)
        self._handle: Optional[asyncio.TimerHandle] = None
        self._cancelled = False

    def start(self) -> None:
        self._handle = self._loop.call_later(self.delay, self._tick)

    def _tick(self) -> None:
        if self._cancelled:
            return
        self._handle = self._loop.call_later(self.delay, self._tick)
        _run_tick(self._callback, self._args)

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()

    def cancelled(self) -> bool:
        return self._cancelled


class ThreadInterval(threading.Thread):
    """Repeating call on a daemon thread."""

    def __init__(self, delay: float, callback: Callable[..., Any], args: Sequence[Any]) -> None:
        super().__init__(daemon=True, name="subkit-interval")
        self.delay = max(delay, MIN_INTERVAL)
        self._callback = callback
        self._args = tuple(args)
        self._stopped = threading.Event()

    def run(self) -> None:
        while not self._stopped.wait(self.delay):
            if self._stopped.is_set():
                break
            _run_tick(self._callback, self._args)

    def cancel(self) -> None:
        self._stopped.set()

    def cancelled(self) -> bool:
        return self._stopped.is_set()


class AsyncioTimers:
    """Timers on an asyncio event loop.

    Scheduling must happen on the loop's own thread, as with any
    ``loop.call_later`` call.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self.loop = loop

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback, *args)

    def call_every(self, delay: float, callback: Callable[..., Any], *args: Any) -> LoopInterval:
        interval = LoopInterval(self.loop, delay, callback, args)
        interval.start()
        return interval

    def cancel(self, handle: asyncio.TimerHandle | LoopInterval) -> None:
        handle.cancel()


class ThreadTimers:
    """Timers on daemon threads, usable without a running event loop."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> threading.Timer:
        timer = threading.Timer(delay, callback, args)
        timer.daemon = True
        timer.start()
        return timer

    def call_every(self, delay: float, callback: Callable[..., Any], *args: Any) -> ThreadInterval:
        interval = ThreadInterval(delay, callback, args)
        interval.start()
        return interval

    def cancel(self, handle: threading.Timer | ThreadInterval) -> None:
        handle.cancel()


_thread_timers = ThreadTimers()


def default_timers() -> TimerFacility:
    """Timers for the calling context.

    Inside a running event loop the loop is used, so handlers run on the
    loop thread; elsewhere a shared :class:`ThreadTimers`.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return _thread_timers
    return AsyncioTimers(loop)
