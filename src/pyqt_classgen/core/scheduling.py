"""Idle and timeout scheduling on the Qt event loop."""

import logging
from typing import Callable, Set

from PyQt6.QtCore import QTimer

logger = logging.getLogger(__name__)

# Timers are kept referenced until they fire or are removed, otherwise an
# unparented QTimer is collected before it runs.
_live_sources: Set[QTimer] = set()


def timeout_add(interval_ms: int, callback: Callable[[], None]) -> QTimer:
    """
    Run callback once after interval_ms on the Qt event loop.

    Returns:
        Handle accepted by source_remove
    """
    timer = QTimer()
    timer.setSingleShot(True)

    def on_timeout():
        _live_sources.discard(timer)
        callback()

    timer.timeout.connect(on_timeout)
    _live_sources.add(timer)
    timer.start(max(0, int(interval_ms)))
    return timer


def idle_add(callback: Callable[[], None]) -> QTimer:
    """Run callback once on the next pass of the event loop, after pending events."""
    return timeout_add(0, callback)


def source_remove(handle: QTimer) -> None:
    """Cancel a pending timeout or idle callback. No-op if it already ran."""
    handle.stop()
    _live_sources.discard(handle)


def pending_source_count() -> int:
    """Number of scheduled callbacks that have not run yet."""
    return len(_live_sources)
