"""Exceptions raised by class generation."""

from typing import Any, Sequence


class ClassGenError(Exception):
    """Base class for all pyqt-classgen errors."""


class ConfigurationError(ClassGenError):
    """Raised when a descriptor or class option cannot be turned into a Qt class.

    Always raised at template or registration time and aborts registering the
    offending class.
    """


class AccessorContractError(ClassGenError):
    """Raised on instantiation when a writable property has no getter/setter pair."""

    def __init__(self, class_name: str, property_name: str):
        self.class_name = class_name
        self.property_name = property_name
        super().__init__(
            f"Writable property '{property_name}' on qclass '{class_name}' "
            f"is not configured with a getter and a setter"
        )


class RuntimeCallbackError(ClassGenError):
    """Wraps a failure raised by a scheduled ready hook. Logged, never raised into the loop."""

    def __init__(self, class_name: str, original: BaseException):
        self.class_name = class_name
        self.original = original
        super().__init__(f"Error in ready hook for {class_name}: {original!r}")


class AsyncBridgeRejection(ClassGenError):
    """Set on a connect_async future when its reject signal fires first."""

    def __init__(self, signal_name: str, args: Sequence[Any]):
        self.signal_name = signal_name
        self.args_emitted = list(args)
        super().__init__(
            f"Rejection signal '{signal_name}' triggered with args: {self.args_emitted}"
        )
