"""Shared test helpers: duck-typed event sources and a manual clock."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional


class FakeEmitter:
    """Node-style emitter removing listeners by identity."""

    def __init__(self) -> None:
        self.listeners: dict[str, list[Callable[..., Any]]] = {}

    def add_listener(self, event: str, listener: Callable[..., Any]) -> "FakeEmitter":
        self.listeners.setdefault(event, []).append(listener)
        return self

    def remove_listener(self, event: str, listener: Callable[..., Any]) -> "FakeEmitter":
        handlers = self.listeners.get(event, [])
        for index, handler in enumerate(handlers):
            if handler is listener:
                del handlers[index]
                break
        return self

    def emit(self, event: str, *args: Any) -> None:
        for handler in list(self.listeners.get(event, [])):
            handler(*args)

    def count(self, event: str) -> int:
        return len(self.listeners.get(event, []))


def _capture(options: Any) -> bool:
    if isinstance(options, dict):
        return bool(options.get("capture", False))
    return bool(options)


class FakeTarget:
    """DOM-style target: a registration is keyed by (event, listener, capture)."""

    def __init__(self) -> None:
        self.registrations: list[tuple[str, Callable[..., Any], bool]] = []
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def add_event_listener(self, event: str, listener: Callable[..., Any], *options: Any) -> None:
        self.calls.append(("add", options))
        key = (event, listener, _capture(options[0] if options else None))
        if key not in self.registrations:
            self.registrations.append(key)

    def remove_event_listener(self, event: str, listener: Callable[..., Any], *options: Any) -> None:
        self.calls.append(("remove", options))
        key = (event, listener, _capture(options[0] if options else None))
        if key in self.registrations:
            self.registrations.remove(key)

    def dispatch(self, event: str, *args: Any) -> None:
        for name, listener, _ in list(self.registrations):
            if name == event:
                listener(*args)


@dataclass
class ManualHandle:
    when: float
    callback: Callable[..., Any]
    args: tuple[Any, ...]
    every: Optional[float] = None
    cancelled: bool = False


@dataclass
class ManualTimers:
    """Timer facility driven by :meth:`advance` instead of wall time."""

    now: float = 0.0
    pending: list[ManualHandle] = field(default_factory=list)

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ManualHandle:
        handle = ManualHandle(self.now + delay, callback, args)
        self.pending.append(handle)
        return handle

    def call_every(self, delay: float, callback: Callable[..., Any], *args: Any) -> ManualHandle:
        handle = ManualHandle(self.now + delay, callback, args, every=delay)
        self.pending.append(handle)
        return handle

    def cancel(self, handle: ManualHandle) -> None:
        handle.cancelled = True

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [h for h in self.pending if not h.cancelled and h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self.now = handle.when
            if handle.every is None:
                self.pending.remove(handle)
            else:
                handle.when += handle.every
            handle.callback(*handle.args)
        self.now = target
