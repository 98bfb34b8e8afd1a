"""Base configuration for class generation.

Provides hooks for applications to customize how registered classes behave.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ClassGenConfig:
    """Configuration for class registration and the runtime helpers.

    Attributes:
        ready_hook_name: Method looked up on registered classes and run once on
            the next idle pass after construction
        notify_signal_name: Signal added to registered classes and emitted by
            the ``notify`` setter wrapper
        style_property_name: Dynamic Qt property that receives the ``css_name``
            styling key
        warn_unsupported_signal_options: Log a warning when a signal declares
            options Qt signals cannot honour
        log_ready_tracebacks: Include the traceback when a ready hook fails
        default_debounce_trigger: Trigger mode used when ``debounce`` is called
            without one
    """

    ready_hook_name: str = "ready"
    notify_signal_name: str = "property_changed"
    style_property_name: str = "css_name"
    warn_unsupported_signal_options: bool = True
    log_ready_tracebacks: bool = True
    default_debounce_trigger: str = "trailing"


# Global config instance (set by application)
_classgen_config: Optional[ClassGenConfig] = None


def set_classgen_config(config: Optional[ClassGenConfig]) -> None:
    """Set the global class generation configuration.

    Args:
        config: ClassGenConfig instance, or None to restore the defaults
    """
    global _classgen_config
    _classgen_config = config


def get_classgen_config() -> ClassGenConfig:
    """Get the current class generation configuration.

    Returns:
        Current ClassGenConfig or default if not set
    """
    if _classgen_config is None:
        return ClassGenConfig()
    return _classgen_config
