"""
Awaitable bridges between Qt signals/timers and asyncio.

The future helpers return ``asyncio.Future`` objects bound to the running
loop, so they must be called from a coroutine. ``spawn`` starts one: on the
running asyncio loop when there is one, otherwise on a loop that the Qt event
loop steps from a timer, so awaiting Qt timers and signals never blocks it.
"""

import asyncio
import logging
from typing import Any, Awaitable, List, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtBoundSignal

from pyqt_classgen.descriptors.signal import signal_attribute_name
from pyqt_classgen.exceptions import AsyncBridgeRejection
from .scheduling import idle_add, timeout_add

logger = logging.getLogger(__name__)

PUMP_INTERVAL_MS = 1


def bound_signal(obj: QObject, name: str) -> pyqtBoundSignal:
    """Look up a signal by name ('value-changed' and 'value_changed' both work)."""
    candidate = getattr(obj, signal_attribute_name(name), None)
    if not isinstance(candidate, pyqtBoundSignal):
        raise AttributeError(f"{type(obj).__name__} has no signal '{name}'")
    return candidate


def connect_async(obj: QObject, resolve_signal: str,
                  reject_signal: Optional[str] = None) -> "asyncio.Future[List[Any]]":
    """
    Resolve a future with the arguments of the first emission of resolve_signal.

    If reject_signal is given and fires first, the future fails with
    AsyncBridgeRejection. Either way both handlers are disconnected before the
    future settles, so later emissions have no effect.

    Example:
        [value] = await connect_async(worker, "finished", "failed")
    """
    loop = asyncio.get_running_loop()
    future: "asyncio.Future[List[Any]]" = loop.create_future()

    resolve = bound_signal(obj, resolve_signal)
    reject = bound_signal(obj, reject_signal) if reject_signal else None
    connected = True

    def cleanup() -> None:
        nonlocal connected
        if not connected:
            return
        connected = False
        resolve.disconnect(on_resolve)
        if reject is not None:
            reject.disconnect(on_reject)

    def on_resolve(*args: Any) -> None:
        cleanup()
        if not future.done():
            future.set_result(list(args))

    def on_reject(*args: Any) -> None:
        cleanup()
        if not future.done():
            future.set_exception(AsyncBridgeRejection(reject_signal, args))

    resolve.connect(on_resolve)
    if reject is not None:
        reject.connect(on_reject)

    future.add_done_callback(lambda _: cleanup())
    return future


def next_idle() -> "asyncio.Future[None]":
    """
    Future resolved on the next idle pass of the Qt event loop.

    Example:
        await next_idle()
    """
    future = asyncio.get_running_loop().create_future()

    def on_idle() -> None:
        if not future.done():
            future.set_result(None)

    idle_add(on_idle)
    return future


def timeout_ms(duration: int) -> "asyncio.Future[None]":
    """Future resolved after duration milliseconds of Qt event loop time."""
    future = asyncio.get_running_loop().create_future()

    def on_timeout() -> None:
        if not future.done():
            future.set_result(None)

    timeout_add(duration, on_timeout)
    return future


class QtLoopPump:
    """
    asyncio loop stepped by the Qt event loop.

    Used when no asyncio loop is running. Each timer tick runs one iteration
    of the loop and returns, so Qt keeps processing events between steps. The
    timer only runs while the loop has unfinished tasks.
    """

    def __init__(self, interval_ms: int = PUMP_INTERVAL_MS):
        self._interval_ms = interval_ms
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._timer: Optional[QTimer] = None

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None or self._loop.is_closed():
            self._loop = asyncio.new_event_loop()
        return self._loop

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def spawn(self, awaitable: Awaitable[Any]) -> "asyncio.Future[Any]":
        task = asyncio.ensure_future(awaitable, loop=self.loop)
        if self._timer is None:
            self._timer = QTimer()
            self._timer.setInterval(self._interval_ms)
            self._timer.timeout.connect(self.step)
        if not self._timer.isActive():
            self._timer.start()
        return task

    def _run_once(self) -> None:
        loop = self.loop
        loop.call_soon(loop.stop)
        loop.run_forever()

    def step(self) -> None:
        """Run one loop iteration; stop the timer once no task is left."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            # Qt events are being processed inside another asyncio loop; wait for the next tick
            return

        self._run_once()
        if not asyncio.all_tasks(self.loop):
            # done callbacks of the last finished task are queued for the next iteration
            self._run_once()
            self._timer.stop()
            logger.debug("Qt loop pump idle")


_pump = QtLoopPump()


def spawn(awaitable: Awaitable[Any]) -> "asyncio.Future[Any]":
    """
    Run awaitable as a task without blocking the Qt event loop.

    Returns:
        The task, on the running asyncio loop if there is one, otherwise on
        the shared loop stepped from the Qt event loop

    Example:
        async def load(self):
            await timeout_ms(100)
            ...

        spawn(self.load())
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return _pump.spawn(awaitable)
    return asyncio.ensure_future(awaitable, loop=loop)
