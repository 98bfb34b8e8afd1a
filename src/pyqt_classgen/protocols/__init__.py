"""
Contracts shared by the registration engine and applications.

Configuration, action host capabilities and the metaclass used for classes
that implement ABC interfaces.
"""

from .classgen_config import ClassGenConfig, set_classgen_config, get_classgen_config
from .action_hosts import (
    ActionHost,
    ApplicationActionHost,
    WindowActionHost,
    WidgetActionHost,
    resolve_action_host,
    build_action,
)
from .interfaces import QtABCMeta, metaclass_for

__all__ = [
    "ClassGenConfig",
    "set_classgen_config",
    "get_classgen_config",
    "ActionHost",
    "ApplicationActionHost",
    "WindowActionHost",
    "WidgetActionHost",
    "resolve_action_host",
    "build_action",
    "QtABCMeta",
    "metaclass_for",
]
