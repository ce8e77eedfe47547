"""Shared types for subscriptions.

Event sources are duck-typed: anything with the matching methods works,
the protocols below only document the shapes that are called.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

# Call this function to remove the subscription it was returned for.
Unsubscribe = Callable[[], None]

Listener = Callable[..., Any]


@runtime_checkable
class Emitter(Protocol):
    """Node-style emitter, e.g. ``pyee.EventEmitter``."""

    def add_listener(self, event: str, listener: Listener) -> Any: ...

    def remove_listener(self, event: str, listener: Listener) -> Any: ...


@runtime_checkable
class EventTarget(Protocol):
    """DOM-style target accepting a capture/passive options descriptor."""

    def add_event_listener(self, event: str, listener: Listener, *options: Any) -> Any: ...

    def remove_event_listener(self, event: str, listener: Listener, *options: Any) -> Any: ...


def noop() -> None:
    """Unsubscribe that does nothing, returned when a subscription failed."""
