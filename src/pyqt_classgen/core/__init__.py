"""
Core runtime helpers.

Qt event-loop combinators usable on any object, independent of class
registration: scheduling, debounce, change notification and signal-to-future
bridges.
"""

from .scheduling import idle_add, timeout_add, source_remove, pending_source_count
from .debounce import Debouncer, debounce, debounced
from .notify import notify, canonical_name
from .async_bridge import QtLoopPump, connect_async, next_idle, timeout_ms, bound_signal, spawn

__all__ = [
    "idle_add",
    "timeout_add",
    "source_remove",
    "pending_source_count",
    "Debouncer",
    "debounce",
    "debounced",
    "notify",
    "canonical_name",
    "connect_async",
    "next_idle",
    "timeout_ms",
    "bound_signal",
    "spawn",
    "QtLoopPump",
]
