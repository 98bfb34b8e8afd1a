"""
Two-phase class declaration.

``template(base, descriptors, *interfaces)`` builds the class to subclass;
``qclass`` registers the subclass with its properties, children, actions,
signals and ready hook.
"""

from .template import TemplateMetadata, template, template_metadata
from .accessors import AccessorPair, build_accessors, find_accessor_pair
from .lifecycle import run_ready, schedule_ready
from .engine import ClassRegistration, TypeFlags, on_action, on_signal, qclass

__all__ = [
    "TemplateMetadata",
    "template",
    "template_metadata",
    "AccessorPair",
    "build_accessors",
    "find_accessor_pair",
    "run_ready",
    "schedule_ready",
    "ClassRegistration",
    "TypeFlags",
    "on_action",
    "on_signal",
    "qclass",
]
