"""
pyqt-classgen: declarative class registration for PyQt6.

Declare Qt subclasses as data: typed properties, Designer template children,
QActions and signals are listed once and the class is assembled and
registered with the Qt meta-object system.

Architecture:
- Tier 1 (Descriptors): Immutable Property/Child/Action/Signal descriptions
- Tier 2 (Registration): template() + @qclass two-phase builder
- Tier 3 (Core): Event-loop helpers (idle/timeout, debounce, notify, async bridge)
- Tier 4 (Protocols): Configuration, action hosts, ABC interface support

Key Features:
- Clamped and truncated numeric properties with validated accessors
- Construct-only and constant properties
- Template children bound by object name
- Actions routed to the application, main window or a widget action group
- Ready hook run once after construction
"""

from pyqt_classgen.descriptors import (
    Action,
    Child,
    ParamFlags,
    Property,
    PropertyFlags,
    PropertyKind,
    PropertySpec,
    Signal,
    make_properties,
    make_property,
    signal,
)
from pyqt_classgen.registration import ClassRegistration, TypeFlags, on_action, on_signal, qclass, template
from pyqt_classgen.core import (
    Debouncer,
    connect_async,
    debounce,
    idle_add,
    next_idle,
    notify,
    source_remove,
    timeout_add,
    timeout_ms,
)
from pyqt_classgen.protocols import ClassGenConfig, get_classgen_config, set_classgen_config
from pyqt_classgen.exceptions import (
    AccessorContractError,
    AsyncBridgeRejection,
    ClassGenError,
    ConfigurationError,
    RuntimeCallbackError,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Action",
    "Child",
    "ParamFlags",
    "Property",
    "PropertyFlags",
    "PropertyKind",
    "PropertySpec",
    "Signal",
    "make_properties",
    "make_property",
    "signal",
    "ClassRegistration",
    "TypeFlags",
    "on_action",
    "on_signal",
    "qclass",
    "template",
    "Debouncer",
    "connect_async",
    "debounce",
    "idle_add",
    "next_idle",
    "notify",
    "source_remove",
    "timeout_add",
    "timeout_ms",
    "ClassGenConfig",
    "get_classgen_config",
    "set_classgen_config",
    "AccessorContractError",
    "AsyncBridgeRejection",
    "ClassGenError",
    "ConfigurationError",
    "RuntimeCallbackError",
]
