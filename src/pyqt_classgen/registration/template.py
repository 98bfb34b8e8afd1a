"""
Template builder: phase one of declaring a class.

``template(base, descriptors, *interfaces)`` returns an intermediate class to
subclass. It carries an explicit TemplateMetadata value that ``qclass``
consumes when it registers the subclass.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from PyQt6.QtCore import QObject

from pyqt_classgen.descriptors import (
    DESCRIPTOR_TYPES,
    ChildDescriptor,
    Descriptor,
)
from pyqt_classgen.descriptors.child import CHILD_PREFIX
from pyqt_classgen.exceptions import ConfigurationError
from pyqt_classgen.protocols.interfaces import metaclass_for

logger = logging.getLogger(__name__)

TEMPLATE_ATTR = "__template__"
REGISTRATION_ATTR = "__classgen__"


@dataclass
class TemplateMetadata:
    """
    The descriptor mapping a template class hands to its registered subclass.

    Attributes:
        base: The Qt class being extended
        descriptors: Read-only mapping of member name to descriptor
        interfaces: Interface classes mixed into the template class
        consumer: Name of the class that registered from this template
    """

    base: type
    descriptors: Mapping[str, Descriptor]
    interfaces: Tuple[type, ...] = ()
    consumer: Optional[str] = field(default=None, compare=False)

    def claim(self, cls: type) -> None:
        """
        Mark this template as consumed by cls.

        Raises:
            ConfigurationError: If another class already registered from it
        """
        if self.consumer is not None:
            raise ConfigurationError(
                f"Template of {self.base.__name__} was already consumed by '{self.consumer}'; "
                f"'{cls.__name__}' needs its own template(...) call"
            )
        self.consumer = cls.__qualname__


def template_metadata(cls: type) -> Optional[TemplateMetadata]:
    """Metadata defined directly on cls (not inherited), if any."""
    metadata = cls.__dict__.get(TEMPLATE_ATTR)
    return metadata if isinstance(metadata, TemplateMetadata) else None


def _validate(base: type, descriptors: Mapping[str, Any]) -> None:
    for name, value in descriptors.items():
        if not isinstance(name, str) or not name.isidentifier():
            raise ConfigurationError(f"Descriptor key {name!r} is not a valid attribute name")
        if not isinstance(value, DESCRIPTOR_TYPES):
            raise ConfigurationError(
                f"'{name}' maps to {type(value).__name__}; expected Property, Child, Action or Signal"
            )
        is_child = isinstance(value, ChildDescriptor)
        if is_child and not name.startswith(CHILD_PREFIX):
            raise ConfigurationError(f"Child '{name}' must start with '{CHILD_PREFIX}'")
        if not is_child and name.startswith(CHILD_PREFIX):
            raise ConfigurationError(f"'{name}' cannot start with '{CHILD_PREFIX}'; only children can")
        if hasattr(base, name):
            raise ConfigurationError(f"'{name}' would shadow {base.__name__}.{name}")


def template(base: type, descriptors: Mapping[str, Descriptor], *interfaces: type) -> type:
    """
    Create the base class for a declarative Qt class.

    Subclass the result and decorate the subclass with ``qclass``; members
    declared here are added to the registered class. Do not instantiate the
    returned class, or an unregistered subclass of it.

    Args:
        base: QObject subclass being extended
        descriptors: Member name -> Property/Child/Action/Signal descriptor.
            Children's names must start with '_', other members' must not,
            and no name may shadow an attribute of base.
        *interfaces: Interface classes the registered class implements

    Returns:
        Template class carrying the metadata

    Example:
        @qclass(css_name="my-widget")
        class MyWidget(template(QWidget, {
            "title": Property.string(default="My Awesome Widget!"),
        })):
            def ready(self):
                print(f"{self.title} is ready!")
    """
    if not (isinstance(base, type) and issubclass(base, QObject)):
        raise ConfigurationError(f"template() expects a QObject subclass, got {base!r}")
    _validate(base, descriptors)

    metadata = TemplateMetadata(
        base=base,
        descriptors=MappingProxyType(dict(descriptors)),
        interfaces=tuple(interfaces),
    )
    bases = (base, *interfaces)
    name = f"{base.__name__}Template"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        if not _is_registered(type(self)):
            raise ConfigurationError(
                f"{type(self).__name__} is built from a template but was never registered with @qclass"
            )
        super(template_cls, self).__init__(*args, **kwargs)

    template_cls = metaclass_for(bases)(name, bases, {
        "__module__": __name__,
        "__qualname__": name,
        "__init__": __init__,
        TEMPLATE_ATTR: metadata,
    })
    logger.debug(f"Built {name} with {len(descriptors)} descriptors")
    return template_cls


def _is_registered(cls: type) -> bool:
    return any(REGISTRATION_ATTR in klass.__dict__ for klass in cls.__mro__)
