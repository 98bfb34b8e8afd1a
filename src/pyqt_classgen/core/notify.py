"""Property change notification for setters."""

import functools
from typing import Any, Callable, TypeVar

from pyqt_classgen.protocols.classgen_config import get_classgen_config

T = TypeVar("T")


def canonical_name(field_name: str) -> str:
    """Python attribute name to the external property name: 'a_count' -> 'a-count'."""
    return field_name.replace("_", "-")


def notify(setter: Callable[[Any, T], None]) -> Callable[[Any, T], None]:
    """
    Wrap a property setter so it emits a change notification after it runs.

    The notification is emitted on the instance's notify signal
    (``property_changed`` by default, added by ``qclass``) with the canonical
    property name. Instances without that signal raise AttributeError before
    the setter runs.

    Example:
        @property
        def a_count(self):
            return self._count

        @a_count.setter
        @notify
        def a_count(self, value):
            self._count = value

        widget.a_count = 42  # emits property_changed("a-count")
    """
    name = canonical_name(setter.__name__)

    @functools.wraps(setter)
    def wrapper(self, value: T) -> None:
        signal_name = get_classgen_config().notify_signal_name
        changed = getattr(self, signal_name, None)
        if changed is None:
            raise AttributeError(
                f"{type(self).__name__} has no '{signal_name}' signal; register it with @qclass to use @notify"
            )
        setter(self, value)
        changed.emit(name)

    return wrapper
