"""Collector of unsubscribe functions with a single flush point."""

from __future__ import annotations

import threading
from typing import Any, Callable, Iterable, Optional

from ..util.log import Log
from .subscribe import Subscribe
from .timers import TimerFacility
from .types import Emitter, EventTarget, Listener, Unsubscribe

log = Log.create({"service": "subscribe.subs"})


class Subs:
    """Collects subscriptions so they can be removed all at once.

    Each subscribe method behaves like its :class:`Subscribe` counterpart
    and also appends the returned unsubscribe to :attr:`list`. Calling
    :meth:`unsub_all` runs every collected unsubscribe, oldest first, and
    empties the list; the collector can be reused afterwards.

    Nothing is unsubscribed when a ``Subs`` is garbage collected. Use it as
    a context manager to flush on block exit.

    Attributes:
        list: Pending unsubscribe functions, in subscription order. Emptied
            in place on flush, so a list passed with ``shared=True`` is
            seen empty by its other holders too.
    """

    def __init__(
        self,
        initial: Optional[Iterable[Unsubscribe]] = None,
        *,
        shared: bool = False,
    ) -> None:
        if shared:
            if not isinstance(initial, list):
                raise TypeError("shared=True requires a list to share")
            self.list: list[Unsubscribe] = initial
        else:
            self.list = list(initial or ())
        # Reentrant: an unsubscribe may push onto or flush its own collector.
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self.list)

    def __bool__(self) -> bool:
        return len(self) > 0

    def __enter__(self) -> "Subs":
        return self

    def __exit__(self, *exc: object) -> None:
        self.unsub_all()

    def subscribe(self, subscribe: Callable[[], Unsubscribe]) -> Unsubscribe:
        return self._keep(Subscribe.subscribe(subscribe))

    def subscribe_event(self, emitter: Emitter, event_name: str, listener: Listener) -> Unsubscribe:
        return self._keep(Subscribe.subscribe_event(emitter, event_name, listener))

    def subscribe_dom_event(
        self,
        target: EventTarget,
        event_name: str,
        listener: Listener,
        options: Any = None,
    ) -> Unsubscribe:
        return self._keep(Subscribe.subscribe_dom_event(target, event_name, listener, options))

    def set_timeout(
        self,
        handler: Callable[..., Any],
        delay: Optional[float] = 0,
        *args: Any,
        timers: Optional[TimerFacility] = None,
    ) -> Unsubscribe:
        return self._keep(Subscribe.set_timeout(handler, delay, *args, timers=timers))

    def set_interval(
        self,
        handler: Callable[..., Any],
        delay: Optional[float] = 0,
        *args: Any,
        timers: Optional[TimerFacility] = None,
    ) -> Unsubscribe:
        return self._keep(Subscribe.set_interval(handler, delay, *args, timers=timers))

    def push(self, unsub: Unsubscribe) -> None:
        """Add an unsubscribe obtained elsewhere to the list."""
        with self._lock:
            self.list.append(unsub)

    def unsub_all(self) -> None:
        """Call every collected unsubscribe in order and clear the list.

        The list is taken and emptied under the lock before anything is
        called. Unsubscribes added while the batch runs, from another thread
        or from an unsubscribe itself, stay queued for the next flush.
        If a ``BaseException`` such as ``KeyboardInterrupt`` escapes, the
        unsubscribes not yet called are put back at the front of the list.
        """
        with self._lock:
            batch = self.list[:]
            del self.list[:]
        if batch:
            log.debug("unsubscribing", {"count": len(batch)})
        called = 0
        try:
            for unsub in batch:
                called += 1
                Subscribe.unsub_all(unsub)
        finally:
            if called < len(batch):
                with self._lock:
                    self.list[:0] = batch[called:]

    def create_cleanup(self) -> Callable[[], None]:
        """Return a function that calls :meth:`unsub_all` on this collector."""
        return lambda: self.unsub_all()

    def _keep(self, unsub: Unsubscribe) -> Unsubscribe:
        self.push(unsub)
        return unsub
