"""Subscribe to emitters, event targets and timers; unsubscribe in one call."""

from .subs import Subs
from .subscribe import Subscribe
from .timers import AsyncioTimers, ThreadTimers, TimerFacility, default_timers
from .types import Emitter, EventTarget, Unsubscribe, noop

__all__ = [
    "AsyncioTimers",
    "Emitter",
    "EventTarget",
    "Subs",
    "Subscribe",
    "ThreadTimers",
    "TimerFacility",
    "Unsubscribe",
    "default_timers",
    "noop",
]
