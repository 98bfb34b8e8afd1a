"""
Registration engine: phase two of declaring a class.

``qclass`` turns a class (usually a subclass of a ``template(...)`` class)
into a registered Qt class. It:

1. consumes the template metadata of the immediate base class
2. sorts the descriptors into properties, children, actions and signals
3. merges properties and children declared through the decorator options
4. builds validated accessors and wraps ``__init__`` for the
   post-construction phase (accessor contract, template children, construct
   values, actions, declarative handlers, ready hook)
5. creates the final class through the Qt metaclass so every pyqtSignal and
   pyqtProperty reaches the QMetaObject

The final class is a subclass of the decorated class with the registered
type name.
"""

import io
import logging
import warnings
from dataclasses import dataclass, field
from enum import Flag, auto
from os import PathLike
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar, Union

from PyQt6 import uic
from PyQt6.QtCore import QObject, pyqtSignal

from pyqt_classgen.descriptors import (
    ActionDescriptor,
    ChildDescriptor,
    PropertyDescriptor,
    PropertySpec,
    SignalDescriptor,
    child_object_name,
    take_signals,
)
from pyqt_classgen.descriptors.signal import signal_attribute_name
from pyqt_classgen.exceptions import AccessorContractError, ConfigurationError
from pyqt_classgen.protocols.action_hosts import build_action, resolve_action_host
from pyqt_classgen.protocols.classgen_config import get_classgen_config
from .accessors import build_accessors, store_value
from .lifecycle import schedule_ready
from .template import REGISTRATION_ATTR, template_metadata

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=type)

SIGNAL_HANDLER_ATTR = "__classgen_on_signal__"
ACTION_HANDLER_ATTR = "__classgen_on_action__"

TemplateSource = Union[str, bytes, PathLike]


class TypeFlags(Flag):
    """Class-level flags applied at registration."""
    NONE = 0
    ABSTRACT = auto()
    FINAL = auto()
    DEPRECATED = auto()


@dataclass
class ClassRegistration:
    """Everything registered for one class. Attached to it as ``__classgen__``."""

    type_name: str
    interfaces: Tuple[type, ...] = ()
    properties: Dict[str, PropertySpec] = field(default_factory=dict)
    children: Dict[str, Optional[type]] = field(default_factory=dict)
    actions: Dict[str, ActionDescriptor] = field(default_factory=dict)
    signals: Dict[str, SignalDescriptor] = field(default_factory=dict)
    template: Optional[TemplateSource] = None
    css_name: Optional[str] = None
    type_flags: TypeFlags = TypeFlags.NONE
    signal_handlers: Dict[str, str] = field(default_factory=dict)
    action_handlers: Dict[str, str] = field(default_factory=dict)
    missing_accessors: List[str] = field(default_factory=list)

    @property
    def child_names(self) -> List[str]:
        """Object names looked up in the template (leading '_' stripped)."""
        return [child_object_name(name) for name in self.children]


def on_signal(signal_name: str) -> Callable[[Callable], Callable]:
    """
    Connect a method to one of the instance's signals at construction.

    Example:
        @qclass
        class MyButton(QPushButton):
            @on_signal("clicked")
            def handle_click(self):
                print("I have been clicked!")
    """
    def decorator(method: Callable) -> Callable:
        setattr(method, SIGNAL_HANDLER_ATTR, signal_name)
        return method
    return decorator


def on_action(action_name: str) -> Callable[[Callable], Callable]:
    """
    Connect a method to the ``triggered`` signal of a declared action field.

    Example:
        class Editor(template(QWidget, {"save": Action(text="Save")})):
            @on_action("save")
            def on_save(self):
                ...
    """
    def decorator(method: Callable) -> Callable:
        setattr(method, ACTION_HANDLER_ATTR, action_name)
        return method
    return decorator


def _collect_handlers(cls: type, marker: str) -> Dict[str, str]:
    # Stop at the nearest registered ancestor; its own __init__ connects its handlers.
    own: List[type] = []
    for klass in cls.__mro__:
        if REGISTRATION_ATTR in klass.__dict__:
            break
        own.append(klass)

    handlers: Dict[str, str] = {}
    for klass in reversed(own):
        for attr_name, value in vars(klass).items():
            target = getattr(value, marker, None)
            if isinstance(target, str):
                handlers[attr_name] = target
    return handlers


def _build_registration(cls: type, *, template: Optional[TemplateSource], css_name: Optional[str],
                        type_flags: Optional[TypeFlags], type_name: Optional[str],
                        properties: Optional[Mapping[str, Union[PropertySpec, PropertyDescriptor]]],
                        internal_children: Optional[List[str]]) -> ClassRegistration:
    registration = ClassRegistration(
        type_name=type_name or cls.__name__,
        template=template,
        css_name=css_name,
        type_flags=type_flags or TypeFlags.NONE,
    )

    base = cls.__bases__[0] if cls.__bases__ else None
    metadata = template_metadata(base) if base is not None else None
    if metadata is not None:
        metadata.claim(cls)
        registration.interfaces = metadata.interfaces
        for name, value in metadata.descriptors.items():
            if isinstance(value, PropertyDescriptor):
                registration.properties[name] = value.create(name)
            elif isinstance(value, ChildDescriptor):
                registration.children[name] = value.expected_type
            elif isinstance(value, ActionDescriptor):
                registration.actions[name] = value
            elif isinstance(value, SignalDescriptor):
                registration.signals[signal_attribute_name(name)] = value
            else:
                raise ConfigurationError(f"{cls.__name__}: unsupported descriptor for '{name}': {value!r}")

    for name, value in (properties or {}).items():
        if isinstance(value, PropertyDescriptor):
            value = value.create(name)
        if not isinstance(value, PropertySpec):
            raise ConfigurationError(f"{cls.__name__}: manual property '{name}' must be a PropertySpec")
        if name in registration.properties:
            logger.debug(f"{cls.__name__}: manual property '{name}' replaces the template one")
        registration.properties[name] = value

    for name in internal_children or []:
        if name in registration.children:
            logger.debug(f"{cls.__name__}: manual child '{name}' replaces the template one")
        registration.children[name] = None

    registration.signals.update(take_signals(cls))
    registration.signal_handlers = _collect_handlers(cls, SIGNAL_HANDLER_ATTR)
    registration.action_handlers = _collect_handlers(cls, ACTION_HANDLER_ATTR)
    return registration


def _qt_signals(cls: type, registration: ClassRegistration) -> Dict[str, Any]:
    config = get_classgen_config()
    signals: Dict[str, Any] = {}
    for name, descriptor in registration.signals.items():
        if descriptor.has_unsupported_options and config.warn_unsupported_signal_options:
            logger.warning(
                f"{registration.type_name}: signal '{name}' sets flags/return_type/accumulator, "
                f"which Qt signals do not support; they are ignored"
            )
        if descriptor.arguments is not None:
            signals[name] = pyqtSignal(*descriptor.param_types, name=name, arguments=list(descriptor.arguments))
        else:
            signals[name] = pyqtSignal(*descriptor.param_types, name=name)

    notify_name = config.notify_signal_name
    if notify_name not in signals and not hasattr(cls, notify_name):
        signals[notify_name] = pyqtSignal(str, name=notify_name)
    return signals


def _load_template(instance: QObject, source: TemplateSource) -> None:
    if isinstance(source, (bytes, bytearray)):
        uic.loadUi(io.BytesIO(bytes(source)), instance)
    else:
        uic.loadUi(source, instance)


def _bind_children(instance: QObject, registration: ClassRegistration) -> None:
    for field_name, expected_type in registration.children.items():
        object_name = child_object_name(field_name)
        child = instance.findChild(QObject, object_name)
        if child is None:
            logger.warning(f"{registration.type_name}: template child '{object_name}' not found")
        elif expected_type is not None and not isinstance(child, expected_type):
            raise ConfigurationError(
                f"{registration.type_name}: child '{object_name}' is a {type(child).__name__}, "
                f"expected {expected_type.__name__}"
            )
        setattr(instance, field_name, child)


def _split_property_kwargs(registration: ClassRegistration, kwargs: Dict[str, Any]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for name, spec in registration.properties.items():
        if name not in kwargs:
            continue
        if spec.is_constant:
            raise TypeError(f"{registration.type_name}: '{name}' is a constant property and cannot be set")
        values[name] = kwargs.pop(name)
    return values


def _apply_construct_values(instance: QObject, registration: ClassRegistration, values: Dict[str, Any]) -> None:
    for name, spec in registration.properties.items():
        if spec.is_construct_only:
            store_value(instance, spec, values.get(name, spec.default))
        elif spec.is_construct:
            setattr(instance, name, values.get(name, spec.default))
        elif name in values:
            setattr(instance, name, values[name])


def _wire_actions(instance: QObject, registration: ClassRegistration) -> None:
    if not registration.actions:
        return
    host = resolve_action_host(instance, registration.type_name)
    if host is None:
        logger.debug(f"{registration.type_name}: instance cannot host actions, skipping {list(registration.actions)}")
        return
    for name, descriptor in registration.actions.items():
        action = build_action(name, descriptor, instance)
        host.add_action(action, descriptor.accels)
        setattr(instance, name, action)


def _connect_handlers(instance: QObject, registration: ClassRegistration) -> None:
    for method_name, signal_name in registration.signal_handlers.items():
        bound = getattr(instance, signal_attribute_name(signal_name), None)
        if bound is None:
            logger.warning(f"{registration.type_name}: no signal '{signal_name}' for {method_name}()")
            continue
        bound.connect(getattr(instance, method_name))
    for method_name, action_name in registration.action_handlers.items():
        action = getattr(instance, action_name, None)
        if action is None:
            logger.warning(f"{registration.type_name}: no action '{action_name}' for {method_name}()")
            continue
        action.triggered.connect(getattr(instance, method_name))


def _most_derived_registration(cls: type) -> Optional[type]:
    for klass in cls.__mro__:
        if REGISTRATION_ATTR in klass.__dict__:
            return klass
    return None


def _register(cls: C, **options: Any) -> C:
    if not (isinstance(cls, type) and issubclass(cls, QObject)):
        raise ConfigurationError(f"@qclass can only register QObject subclasses, got {cls!r}")

    registration = _build_registration(cls, **options)
    accessors, registration.missing_accessors = build_accessors(cls, registration.properties)
    config = get_classgen_config()
    original_init = cls.__init__
    final_cls: Optional[type] = None

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        flags = registration.type_flags
        if TypeFlags.ABSTRACT in flags and type(self) is final_cls:
            raise TypeError(f"Cannot instantiate abstract qclass '{registration.type_name}'")
        if TypeFlags.DEPRECATED in flags:
            warnings.warn(f"{registration.type_name} is deprecated", DeprecationWarning, stacklevel=2)

        values = _split_property_kwargs(registration, kwargs)
        original_init(self, *args, **kwargs)

        if registration.missing_accessors:
            raise AccessorContractError(registration.type_name, registration.missing_accessors[0])

        if registration.template is not None:
            _load_template(self, registration.template)
        _bind_children(self, registration)
        if registration.css_name:
            self.setProperty(config.style_property_name, registration.css_name)

        _apply_construct_values(self, registration, values)
        _wire_actions(self, registration)
        _connect_handlers(self, registration)

        hook = getattr(type(self), config.ready_hook_name, None)
        if callable(hook) and _most_derived_registration(type(self)) is final_cls:
            schedule_ready(self, type(self).__name__, hook)

    namespace: Dict[str, Any] = {
        "__module__": cls.__module__,
        "__qualname__": registration.type_name,
        "__doc__": cls.__doc__,
        "__init__": __init__,
        REGISTRATION_ATTR: registration,
    }
    namespace.update(_qt_signals(cls, registration))
    namespace.update(accessors)

    if TypeFlags.FINAL in registration.type_flags:
        def __init_subclass__(subclass, **kwargs):
            raise ConfigurationError(f"qclass '{registration.type_name}' is final and cannot be subclassed")
        namespace["__init_subclass__"] = classmethod(__init_subclass__)

    final_cls = type(cls)(registration.type_name, (cls,), namespace)
    logger.debug(
        f"Registered {registration.type_name}: properties={list(registration.properties)}, "
        f"children={registration.child_names}, actions={list(registration.actions)}, "
        f"signals={list(registration.signals)}"
    )
    return final_cls


def qclass(cls: Optional[C] = None, *, template: Optional[TemplateSource] = None,
           css_name: Optional[str] = None, type_flags: Optional[TypeFlags] = None,
           type_name: Optional[str] = None,
           properties: Optional[Mapping[str, Union[PropertySpec, PropertyDescriptor]]] = None,
           internal_children: Optional[List[str]] = None) -> Any:
    """
    Class decorator registering a declarative Qt class.

    Handles:
    - the class name as Qt type name (override with ``type_name``)
    - signals declared with ``signal`` or as template ``Signal`` entries
    - a ``ready`` method run once on the next idle pass after construction
    - an optional Designer template, CSS name and type flags
    - properties from the template base and/or ``properties``
    - template children from the template base and/or ``internal_children``
    - QActions from the template base

    Args:
        template: .ui file path, or its contents as bytes
        css_name: Styling key, set as a dynamic property on each instance
        type_flags: TypeFlags for the class
        type_name: Registered name instead of the class name
        properties: Extra properties (name -> PropertySpec/PropertyDescriptor);
            they win over template properties with the same name
        internal_children: Extra child field names ('_name')

    Example:
        @qclass(css_name="my-widget", template="ui/my_widget.ui")
        class MyWidget(template(QWidget, {
            "title": Property.string(default="My Awesome Widget!"),
        })):
            def ready(self):
                print(f"{self.title} is ready!")
    """
    options = dict(
        template=template,
        css_name=css_name,
        type_flags=type_flags,
        type_name=type_name,
        properties=properties,
        internal_children=internal_children,
    )
    if cls is not None:
        return _register(cls, **options)

    def decorator(target: C) -> C:
        return _register(target, **options)
    return decorator
