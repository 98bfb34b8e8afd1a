"""
Descriptor model.

Immutable data describing the members a declarative class gets: properties,
template children, actions and signals. Descriptors have no side effects;
``template`` and ``qclass`` consume them.
"""

from typing import Union

from .property import (
    FLAG_PRESETS,
    NUMERIC_RANGES,
    ParamFlags,
    Property,
    PropertyDescriptor,
    PropertyFlags,
    PropertyKind,
    PropertySpec,
    clamp,
)
from .property_helpers import make_properties, make_property
from .child import Child, ChildDescriptor, child_object_name
from .action import Action, ActionDescriptor
from .signal import Signal, SignalDescriptor, pending_signals, signal, take_signals

Descriptor = Union[PropertyDescriptor, ChildDescriptor, ActionDescriptor, SignalDescriptor]
DESCRIPTOR_TYPES = (PropertyDescriptor, ChildDescriptor, ActionDescriptor, SignalDescriptor)

__all__ = [
    "Descriptor",
    "DESCRIPTOR_TYPES",
    "FLAG_PRESETS",
    "NUMERIC_RANGES",
    "ParamFlags",
    "Property",
    "PropertyDescriptor",
    "PropertyFlags",
    "PropertyKind",
    "PropertySpec",
    "clamp",
    "make_property",
    "make_properties",
    "Child",
    "ChildDescriptor",
    "child_object_name",
    "Action",
    "ActionDescriptor",
    "Signal",
    "SignalDescriptor",
    "signal",
    "take_signals",
    "pending_signals",
]
