"""Build PropertySpecs directly, for properties declared outside a template."""

import logging
from enum import Enum
from typing import Any, Dict, Iterable, Union

from PyQt6.QtCore import QObject

from pyqt_classgen.exceptions import ConfigurationError
from .property import Property, PropertyKind, PropertySpec

logger = logging.getLogger(__name__)

_FACTORIES = {
    PropertyKind.STRING: Property.string,
    PropertyKind.BOOL: Property.bool,
    PropertyKind.INT32: Property.int32,
    PropertyKind.UINT32: Property.uint32,
    PropertyKind.DOUBLE: Property.double,
    PropertyKind.PYOBJECT: Property.pyobject,
}


def make_property(name: str, kind: Union[str, PropertyKind, type], **config: Any) -> PropertySpec:
    """
    Resolve a property spec from a kind and factory keyword arguments.

    Args:
        name: Registered property name
        kind: A kind name ("int32", "string", ...), a QObject subclass or an Enum subclass
        **config: Keyword arguments of the matching Property factory

    Returns:
        PropertySpec with nick/blurb defaults derived from the name

    Raises:
        ConfigurationError: If the kind is not supported

    Example:
        spec = make_property("volume", "double", minimum=0.0, maximum=1.0)
    """
    if isinstance(kind, type) and issubclass(kind, QObject):
        return Property.qobject(kind, **config).create(name)
    if isinstance(kind, type) and issubclass(kind, Enum):
        return Property.enum(kind, **config).create(name)

    try:
        factory = _FACTORIES[PropertyKind(kind)]
    except (ValueError, KeyError):
        raise ConfigurationError(
            f"make_property: unsupported property type {kind!r} for '{name}'"
        ) from None
    return factory(**config).create(name)


def make_properties(specs: Iterable[PropertySpec]) -> Dict[str, PropertySpec]:
    """Key a list of specs by name, for the ``properties`` option of ``qclass``."""
    return {spec.name: spec for spec in specs}
