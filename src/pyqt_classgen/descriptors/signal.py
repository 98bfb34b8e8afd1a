"""
Signal descriptors and the per-class signal side table.

Signals can be declared two ways:
- as ``Signal(...)`` entries in a template mapping
- with the ``signal`` class decorator, stacked below ``qclass``

The decorator records declarations in a side table keyed by the decorated
class. ``qclass`` drains the entry for exactly that class when it registers
it, so declarations never leak onto another class.
"""

import logging
import weakref
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from pyqt_classgen.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=type)


@dataclass(frozen=True)
class SignalDescriptor:
    """
    Declarative description of a Qt signal.

    ``flags``, ``return_type`` and ``accumulator`` are recorded for parity with
    other object systems; Qt signals deliver no return value so registration
    warns when they are set.
    """

    param_types: Tuple[Any, ...] = ()
    flags: Optional[int] = None
    return_type: Optional[type] = None
    accumulator: Optional[Callable] = None
    arguments: Optional[Tuple[str, ...]] = None

    @property
    def has_unsupported_options(self) -> bool:
        return self.flags is not None or self.return_type is not None or self.accumulator is not None


def Signal(*param_types: Any, flags: Optional[int] = None, return_type: Optional[type] = None,
           accumulator: Optional[Callable] = None, arguments: Optional[Tuple[str, ...]] = None) -> SignalDescriptor:
    """Declare a signal carrying values of param_types."""
    if arguments is not None and len(arguments) != len(param_types):
        raise ConfigurationError(
            f"Signal declares {len(param_types)} parameter types but {len(arguments)} argument names"
        )
    return SignalDescriptor(
        tuple(param_types), flags, return_type, accumulator,
        tuple(arguments) if arguments is not None else None,
    )


def signal_attribute_name(name: str) -> str:
    """'value-changed' -> 'value_changed'."""
    return name.replace("-", "_")


_pending_signals: "weakref.WeakKeyDictionary[type, Dict[str, SignalDescriptor]]" = weakref.WeakKeyDictionary()


def signal(name: str, *param_types: Any, **options: Any) -> Callable[[C], C]:
    """
    Class decorator declaring a signal for a class registered with ``qclass``.

    The class itself is not modified; the signal is added when ``qclass``
    registers it.

    Example:
        @qclass()
        @signal("clicked")
        @signal("moved", int, int)
        class BoxButton(QWidget):
            pass
    """
    descriptor = Signal(*param_types, **options)

    def decorator(cls: C) -> C:
        signals = _pending_signals.setdefault(cls, {})
        signals[signal_attribute_name(name)] = descriptor
        logger.debug(f"Declared signal '{name}' on {cls.__name__}")
        return cls

    return decorator


def take_signals(cls: type) -> Dict[str, SignalDescriptor]:
    """Remove and return the signals declared for cls."""
    return _pending_signals.pop(cls, {})


def pending_signals(cls: type) -> Dict[str, SignalDescriptor]:
    """Signals declared for cls that have not been registered yet."""
    return dict(_pending_signals.get(cls, {}))
