"""Leading/trailing debounce for methods and plain callables."""

import functools
import logging
import weakref
from typing import Any, Callable, Dict, Optional, Tuple

from PyQt6.QtCore import QTimer

from pyqt_classgen.protocols.classgen_config import get_classgen_config
from .scheduling import source_remove, timeout_add

logger = logging.getLogger(__name__)

TRIGGERS = ("leading", "trailing", "leading+trailing")


def _parse_trigger(trigger: Optional[str]) -> Tuple[bool, bool]:
    if trigger is None:
        trigger = get_classgen_config().default_debounce_trigger
    if trigger not in TRIGGERS:
        raise ValueError(f"Unknown debounce trigger {trigger!r}; expected one of {TRIGGERS}")
    return "leading" in trigger, "trailing" in trigger


class Debouncer:
    """
    Rate limiter around a single handler.

    Every call restarts the interval timer. With a leading trigger the handler
    runs immediately when no timer is pending; otherwise the arguments are
    kept and, with a trailing trigger, the handler runs with the latest ones
    once the interval passes without further calls.

    Usage:
        self._debounce = Debouncer(200, self._do_update)

        def on_text_changed(self, text):
            self._debounce.call(text)  # Restarts timer
    """

    def __init__(self, interval_ms: int, handler: Callable[..., Any], trigger: Optional[str] = None):
        self._interval_ms = interval_ms
        self._handler = handler
        self._leading, self._trailing = _parse_trigger(trigger)
        self._timer: Optional[QTimer] = None
        self._last_args: Tuple[Any, ...] = ()
        self._last_kwargs: Dict[str, Any] = {}
        self._trailing_pending = False

    @property
    def scheduled(self) -> bool:
        """True while an interval timer is running."""
        return self._timer is not None

    @property
    def pending(self) -> bool:
        """True when a trailing invocation is waiting for the timer."""
        return self._trailing_pending

    def call(self, *args: Any, **kwargs: Any) -> None:
        """Register a call. Exceptions from a leading invocation reach the caller."""
        if self._leading and self._timer is None:
            self._handler(*args, **kwargs)
        else:
            self._last_args, self._last_kwargs = args, kwargs
            self._trailing_pending = True

        if self._timer is not None:
            source_remove(self._timer)
        self._timer = timeout_add(self._interval_ms, self._on_timeout)

    __call__ = call

    def _on_timeout(self) -> None:
        self._timer = None
        run = self._trailing and self._trailing_pending
        self._trailing_pending = False
        args, kwargs = self._take_args()
        if run:
            self._handler(*args, **kwargs)

    def _take_args(self) -> Tuple[Tuple[Any, ...], Dict[str, Any]]:
        args, kwargs = self._last_args, self._last_kwargs
        self._last_args, self._last_kwargs = (), {}
        return args, kwargs

    def cancel(self) -> None:
        """Drop the pending timer and any stashed trailing call."""
        if self._timer is not None:
            source_remove(self._timer)
            self._timer = None
        self._trailing_pending = False
        self._last_args, self._last_kwargs = (), {}

    def force(self) -> None:
        """Cancel the timer and run a pending trailing call immediately."""
        run = self._trailing_pending
        args, kwargs = self._last_args, self._last_kwargs
        self.cancel()
        if run:
            self._handler(*args, **kwargs)


def debounced(function: Callable[..., Any], interval_ms: int, trigger: Optional[str] = None) -> Debouncer:
    """Wrap a plain callable; the returned Debouncer is called like the function."""
    return Debouncer(interval_ms, function, trigger)


def debounce(interval_ms: int, trigger: Optional[str] = None) -> Callable[[Callable[..., Any]], Callable[..., None]]:
    """
    Method decorator that debounces calls per instance.

    Each instance gets its own Debouncer for each decorated method, so two
    debounced methods on one object never share timers or arguments.

    Args:
        interval_ms: Quiet interval in milliseconds
        trigger: "leading", "trailing" or "leading+trailing"
            (defaults to ClassGenConfig.default_debounce_trigger)

    Example:
        class Search(QWidget):
            @debounce(250)
            def run_query(self, text):
                ...
    """
    _parse_trigger(trigger)

    def decorator(method: Callable[..., Any]) -> Callable[..., None]:
        slots: "weakref.WeakKeyDictionary[Any, Debouncer]" = weakref.WeakKeyDictionary()

        @functools.wraps(method)
        def wrapper(self, *args: Any, **kwargs: Any) -> None:
            debouncer = slots.get(self)
            if debouncer is None:
                # self is passed per call; the slot must not keep the instance alive
                debouncer = Debouncer(interval_ms, method, trigger)
                slots[self] = debouncer
            debouncer.call(self, *args, **kwargs)

        wrapper.debouncer_for = slots.get
        return wrapper

    return decorator
