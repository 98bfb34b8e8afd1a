"""
Validated accessors for registered properties.

Accessors are built once per class, from the resolved PropertySpecs and the
getter/setter pairs the class defines:

- CONSTANT: a static getter returning the default, no setter
- CONSTRUCT_ONLY: per-instance storage filled during construction, no setter
- READWRITE / CONSTRUCT: wraps the class's own property; reads go straight to
  its getter, writes go through PropertySpec.coerce (clamp, then truncate
  integer kinds) before reaching the original setter

A writable property without a getter/setter pair still gets a read-only
accessor here; the engine reports it when the class is instantiated.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from PyQt6.QtCore import pyqtProperty

from pyqt_classgen.descriptors import PropertySpec

logger = logging.getLogger(__name__)

VALUES_ATTR = "_classgen_values"


@dataclass(frozen=True)
class AccessorPair:
    """The getter/setter a class defines for a property."""
    fget: Callable[[Any], Any]
    fset: Callable[[Any, Any], None]


def find_accessor_pair(cls: type, name: str) -> Optional[AccessorPair]:
    """Find a property-like attribute with both a getter and a setter on cls."""
    attr = inspect.getattr_static(cls, name, None)
    fget = getattr(attr, "fget", None)
    fset = getattr(attr, "fset", None)
    if callable(fget) and callable(fset):
        return AccessorPair(fget, fset)
    return None


def stored_value(instance: Any, spec: PropertySpec) -> Any:
    return instance.__dict__.get(VALUES_ATTR, {}).get(spec.name, spec.default)


def store_value(instance: Any, spec: PropertySpec, value: Any) -> None:
    """Write a construct-only value into the instance's property storage."""
    instance.__dict__.setdefault(VALUES_ATTR, {})[spec.name] = spec.coerce(value)


def _constant_property(spec: PropertySpec) -> pyqtProperty:
    default = spec.default

    def fget(self):
        return default

    return pyqtProperty(spec.qt_type, fget=fget, constant=True, doc=spec.blurb)


def _construct_only_property(spec: PropertySpec) -> pyqtProperty:
    def fget(self):
        return stored_value(self, spec)

    return pyqtProperty(spec.qt_type, fget=fget, doc=spec.blurb)


def _wrapped_property(spec: PropertySpec, pair: AccessorPair) -> pyqtProperty:
    original_set = pair.fset

    if spec.is_numeric:
        def fset(self, value):
            original_set(self, spec.coerce(value))
    else:
        fset = original_set

    return pyqtProperty(spec.qt_type, fget=pair.fget, fset=fset, doc=spec.blurb)


def _unbacked_property(spec: PropertySpec) -> pyqtProperty:
    def fget(self):
        return spec.default

    return pyqtProperty(spec.qt_type, fget=fget, doc=spec.blurb)


def build_accessors(cls: type, specs: Mapping[str, PropertySpec]) -> Tuple[Dict[str, pyqtProperty], List[str]]:
    """
    Build the pyqtProperty for every spec.

    Args:
        cls: Class being registered; its own getter/setter pairs are wrapped
        specs: Resolved property specs keyed by name

    Returns:
        (name -> pyqtProperty, names of writable properties with no accessor pair)
    """
    accessors: Dict[str, pyqtProperty] = {}
    missing: List[str] = []
    for name, spec in specs.items():
        if spec.is_constant:
            accessors[name] = _constant_property(spec)
        elif spec.is_construct_only:
            accessors[name] = _construct_only_property(spec)
        else:
            pair = find_accessor_pair(cls, name)
            if pair is None:
                missing.append(name)
                accessors[name] = _unbacked_property(spec)
            else:
                accessors[name] = _wrapped_property(spec, pair)
    if missing:
        logger.debug(f"{cls.__name__}: no accessor pair for {missing}")
    return accessors, missing
