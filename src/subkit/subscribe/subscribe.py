"""Static helpers that turn registrations into :data:`Unsubscribe` callables.

Every helper attaches a callback to some source right away and returns a
zero-argument function that detaches it again. Failures while subscribing
through :meth:`Subscribe.subscribe`, and failures of individual
unsubscribes run through :meth:`Subscribe.unsub_all`, are logged rather
than raised, so teardown code always runs to completion.

Example:
    unsubs = [
        Subscribe.subscribe_event(emitter, "data", on_data),
        Subscribe.set_interval(poll, 500),
    ]
    ...
    Subscribe.unsub_all(unsubs)
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Union

from ..util.error import format_unknown_error
from ..util.log import Log
from .timers import TimerFacility, default_timers
from .types import Emitter, EventTarget, Listener, Unsubscribe, noop

log = Log.create({"service": "subscribe"})

Unsubs = Union[Unsubscribe, Iterable[Optional[Unsubscribe]], None]


def _seconds(delay: Optional[float]) -> float:
    if delay is None or delay < 0:
        return 0.0
    return delay / 1000


def _name(fn: Any) -> str:
    return getattr(fn, "__qualname__", None) or repr(fn)


class Subscribe:
    """Stateless subscribe/unsubscribe helpers."""

    @staticmethod
    def subscribe(subscribe: Callable[[], Unsubscribe]) -> Unsubscribe:
        """Call *subscribe* now and return the unsubscribe it produces.

        If *subscribe* raises, the error is logged and :func:`noop` is
        returned, so callers can always collect and call the result.
        """
        try:
            return subscribe()
        except Exception as e:
            log.error("subscribe failed", {
                "error": str(e),
                "subscriber": _name(subscribe),
                "traceback": format_unknown_error(e),
            })
        return noop

    @staticmethod
    def subscribe_event(emitter: Emitter, event_name: str, listener: Listener) -> Unsubscribe:
        """Add *listener* for *event_name* on a node-style emitter."""
        emitter.add_listener(event_name, listener)

        def unsubscribe() -> None:
            emitter.remove_listener(event_name, listener)

        return unsubscribe

    @staticmethod
    def subscribe_dom_event(
        target: EventTarget,
        event_name: str,
        listener: Listener,
        options: Any = None,
    ) -> Unsubscribe:
        """Add *listener* for *event_name* on a DOM-style event target.

        *options* (a capture flag or an options mapping) is passed unchanged
        to both ``add_event_listener`` and ``remove_event_listener``, since
        some options take part in identifying the registration. ``None``
        means the argument is omitted entirely.
        """
        extra = () if options is None else (options,)
        target.add_event_listener(event_name, listener, *extra)

        def unsubscribe() -> None:
            target.remove_event_listener(event_name, listener, *extra)

        return unsubscribe

    @staticmethod
    def set_timeout(
        handler: Callable[..., Any],
        delay: Optional[float] = 0,
        *args: Any,
        timers: Optional[TimerFacility] = None,
    ) -> Unsubscribe:
        """Call ``handler(*args)`` once after *delay* milliseconds.

        The returned unsubscribe cancels the call if it has not run yet.
        *timers* defaults to :func:`default_timers`.
        """
        facility = timers or default_timers()
        handle = facility.call_later(_seconds(delay), handler, *args)
        return lambda: facility.cancel(handle)

    @staticmethod
    def set_interval(
        handler: Callable[..., Any],
        delay: Optional[float] = 0,
        *args: Any,
        timers: Optional[TimerFacility] = None,
    ) -> Unsubscribe:
        """Call ``handler(*args)`` every *delay* milliseconds until unsubscribed."""
        facility = timers or default_timers()
        handle = facility.call_every(_seconds(delay), handler, *args)
        return lambda: facility.cancel(handle)

    @staticmethod
    def unsub_all(unsubs: Unsubs) -> None:
        """Call one unsubscribe, or each of a sequence in order.

        A failing unsubscribe is logged and the remaining ones still run;
        this never raises an ``Exception``. ``None`` entries are skipped, and
        a value that is neither callable nor iterable is logged and ignored.
        """
        if unsubs is None:
            return
        if callable(unsubs):
            _call_logged(unsubs)
            return
        try:
            items = iter(unsubs)
        except TypeError as e:
            log.error("unsubscribe failed", {
                "error": str(e),
                "unsubscribe": repr(unsubs),
            })
            return
        for index, unsub in enumerate(items):
            if unsub is not None:
                _call_logged(unsub, index)

    @staticmethod
    def create_cleanup(unsubs: Unsubs) -> Callable[[], None]:
        """Return a function that calls :meth:`unsub_all` on *unsubs*.

        A sequence is copied now, so later changes to it are not seen.
        The cleanup does not guard against being called more than once.
        """
        if unsubs is None or callable(unsubs):
            captured: Unsubs = unsubs
        else:
            captured = tuple(unsubs)
        return lambda: Subscribe.unsub_all(captured)


def _call_logged(unsub: Unsubscribe, index: Optional[int] = None) -> None:
    try:
        unsub()
    except Exception as e:
        log.error("unsubscribe failed", {
            "error": str(e),
            "index": index,
            "unsubscribe": _name(unsub),
            "traceback": format_unknown_error(e),
        })
