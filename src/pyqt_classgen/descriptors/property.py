"""
Property descriptors for declarative Qt classes.

A PropertyDescriptor is pure data: the kind of value, its flags, optional
numeric bounds and a default. ``create(name)`` resolves it into a named
PropertySpec, which is what the registration engine turns into a
``pyqtProperty``.

Flag presets map onto the underlying capability flags:
- CONSTANT -> READABLE
- READWRITE -> READWRITE
- CONSTRUCT -> READWRITE | CONSTRUCT
- CONSTRUCT_ONLY -> READWRITE | CONSTRUCT_ONLY
"""

import logging
import math
import sys
from dataclasses import dataclass
from enum import Enum, Flag, auto
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple, Union

from PyQt6.QtCore import QObject

from pyqt_classgen.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ParamFlags(Flag):
    """Capabilities of a registered property."""
    READABLE = auto()
    WRITABLE = auto()
    CONSTRUCT = auto()
    CONSTRUCT_ONLY = auto()
    READWRITE = READABLE | WRITABLE


class PropertyFlags(str, Enum):
    """Flag presets accepted by the Property factories."""
    CONSTANT = "CONSTANT"
    READWRITE = "READWRITE"
    CONSTRUCT = "CONSTRUCT"
    CONSTRUCT_ONLY = "CONSTRUCT_ONLY"


FLAG_PRESETS: Mapping[PropertyFlags, ParamFlags] = MappingProxyType({
    PropertyFlags.CONSTANT: ParamFlags.READABLE,
    PropertyFlags.READWRITE: ParamFlags.READWRITE,
    PropertyFlags.CONSTRUCT: ParamFlags.READWRITE | ParamFlags.CONSTRUCT,
    PropertyFlags.CONSTRUCT_ONLY: ParamFlags.READWRITE | ParamFlags.CONSTRUCT_ONLY,
})


class PropertyKind(str, Enum):
    """Value kinds a property can hold."""
    STRING = "string"
    BOOL = "bool"
    INT32 = "int32"
    UINT32 = "uint32"
    DOUBLE = "double"
    QOBJECT = "qobject"
    ENUM = "enum"
    PYOBJECT = "pyobject"


NUMERIC_RANGES: Mapping[PropertyKind, Tuple[Union[int, float], Union[int, float]]] = MappingProxyType({
    PropertyKind.INT32: (-2**31, 2**31 - 1),
    PropertyKind.UINT32: (0, 2**32 - 1),
    PropertyKind.DOUBLE: (-sys.float_info.max, sys.float_info.max),
})

INTEGER_KINDS = frozenset({PropertyKind.INT32, PropertyKind.UINT32})

# Types handed to pyqtProperty. QOBJECT uses the descriptor's value_type.
_QT_TYPES: Mapping[PropertyKind, Any] = MappingProxyType({
    PropertyKind.STRING: str,
    PropertyKind.BOOL: bool,
    PropertyKind.INT32: int,
    PropertyKind.UINT32: "uint",
    PropertyKind.DOUBLE: float,
    PropertyKind.ENUM: object,
    PropertyKind.PYOBJECT: object,
})

FlagsArg = Union[PropertyFlags, str]
Number = Union[int, float]


def resolve_flags(flags: FlagsArg) -> PropertyFlags:
    """Normalize a flag preset given as enum member or string name."""
    if isinstance(flags, PropertyFlags):
        return flags
    try:
        return PropertyFlags(flags)
    except ValueError:
        raise ConfigurationError(
            f"Unknown property flags {flags!r}; expected one of {[f.value for f in PropertyFlags]}"
        ) from None


def clamp(value: Number, minimum: Number, maximum: Number) -> Number:
    """Constrain value to the closed range [minimum, maximum]."""
    if value > maximum:
        return maximum
    if value < minimum:
        return minimum
    return value


def title_case(name: str) -> str:
    """'item_count' -> 'Item Count'."""
    words = name.replace("-", " ").replace("_", " ").split()
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


@dataclass(frozen=True)
class PropertySpec:
    """A fully resolved, named property ready to be registered on a class."""

    name: str
    kind: PropertyKind
    flags: PropertyFlags
    nick: str
    blurb: str
    default: Any = None
    minimum: Optional[Number] = None
    maximum: Optional[Number] = None
    value_type: Optional[type] = None

    @property
    def param_flags(self) -> ParamFlags:
        return FLAG_PRESETS[self.flags]

    @property
    def is_numeric(self) -> bool:
        return self.kind in NUMERIC_RANGES

    @property
    def is_constant(self) -> bool:
        flags = self.param_flags
        return bool(flags & ParamFlags.READABLE) and not flags & ParamFlags.WRITABLE

    @property
    def is_writable(self) -> bool:
        return bool(self.param_flags & ParamFlags.WRITABLE)

    @property
    def is_construct(self) -> bool:
        return bool(self.param_flags & ParamFlags.CONSTRUCT)

    @property
    def is_construct_only(self) -> bool:
        return bool(self.param_flags & ParamFlags.CONSTRUCT_ONLY)

    @property
    def needs_accessors(self) -> bool:
        """Writable after construction, so the class must supply a getter/setter pair."""
        return self.is_writable and not self.is_construct_only

    @property
    def qt_type(self) -> Any:
        """Type passed to pyqtProperty for this spec."""
        if self.kind is PropertyKind.QOBJECT:
            return self.value_type or QObject
        try:
            return _QT_TYPES[self.kind]
        except KeyError:
            raise ConfigurationError(
                f"Unsupported property kind {self.kind!r} for property '{self.name}'"
            ) from None

    def coerce(self, value: Any) -> Any:
        """Apply the write policy: clamp numerics, then truncate integer kinds."""
        if not self.is_numeric:
            return value
        value = clamp(value, self.minimum, self.maximum)
        if self.kind in INTEGER_KINDS:
            value = math.trunc(value)
        return value


@dataclass(frozen=True)
class PropertyDescriptor:
    """Declarative description of a property; see the Property factories."""

    kind: PropertyKind
    flags: PropertyFlags = PropertyFlags.READWRITE
    nick: Optional[str] = None
    blurb: Optional[str] = None
    default: Any = None
    minimum: Optional[Number] = None
    maximum: Optional[Number] = None
    value_type: Optional[type] = None

    def create(self, name: str) -> PropertySpec:
        """Resolve this descriptor into a PropertySpec registered under name."""
        if not isinstance(self.kind, PropertyKind):
            raise ConfigurationError(f"Unsupported property kind {self.kind!r} for property '{name}'")
        nick = self.nick or title_case(name)
        return PropertySpec(
            name=name,
            kind=self.kind,
            flags=self.flags,
            nick=nick,
            blurb=self.blurb or f"{nick} property",
            default=self.default,
            minimum=self.minimum,
            maximum=self.maximum,
            value_type=self.value_type,
        )


def _numeric(kind: PropertyKind, default: Optional[Number], minimum: Optional[Number],
             maximum: Optional[Number], nick: Optional[str], blurb: Optional[str],
             flags: FlagsArg) -> PropertyDescriptor:
    range_min, range_max = NUMERIC_RANGES[kind]
    minimum = range_min if minimum is None else minimum
    maximum = range_max if maximum is None else maximum
    if kind in INTEGER_KINDS:
        minimum, maximum = math.trunc(minimum), math.trunc(maximum)
    if minimum > maximum:
        raise ConfigurationError(f"{kind.value} property minimum {minimum} is greater than maximum {maximum}")
    if minimum < range_min or maximum > range_max:
        raise ConfigurationError(
            f"{kind.value} property bounds [{minimum}, {maximum}] exceed [{range_min}, {range_max}]"
        )

    if default is None:
        default = clamp(0, minimum, maximum)
    elif not minimum <= default <= maximum:
        raise ConfigurationError(
            f"{kind.value} property default {default} is outside [{minimum}, {maximum}]"
        )
    if kind in INTEGER_KINDS:
        default = math.trunc(default)
    elif isinstance(default, int):
        default = float(default)

    return PropertyDescriptor(
        kind=kind,
        flags=resolve_flags(flags),
        nick=nick,
        blurb=blurb,
        default=default,
        minimum=minimum,
        maximum=maximum,
    )


class Property:
    """
    Factories for property descriptors used with ``template`` and ``qclass``.

    Every factory accepts ``nick``, ``blurb`` and ``flags`` (a PropertyFlags
    member or its name, default ``"READWRITE"``).

    Example:
        class Counter(template(QObject, {
            "count": Property.int32(minimum=0, maximum=10),
            "label": Property.string(default="clicks"),
        })):
            ...
    """

    @staticmethod
    def int32(*, default: Optional[int] = None, minimum: Optional[int] = None,
              maximum: Optional[int] = None, nick: Optional[str] = None,
              blurb: Optional[str] = None, flags: FlagsArg = PropertyFlags.READWRITE) -> PropertyDescriptor:
        """Signed 32-bit integer property. Writes are clamped then truncated toward zero."""
        return _numeric(PropertyKind.INT32, default, minimum, maximum, nick, blurb, flags)

    @staticmethod
    def uint32(*, default: Optional[int] = None, minimum: Optional[int] = None,
               maximum: Optional[int] = None, nick: Optional[str] = None,
               blurb: Optional[str] = None, flags: FlagsArg = PropertyFlags.READWRITE) -> PropertyDescriptor:
        """Unsigned 32-bit integer property. Writes are clamped then truncated toward zero."""
        return _numeric(PropertyKind.UINT32, default, minimum, maximum, nick, blurb, flags)

    @staticmethod
    def double(*, default: Optional[float] = None, minimum: Optional[float] = None,
               maximum: Optional[float] = None, nick: Optional[str] = None,
               blurb: Optional[str] = None, flags: FlagsArg = PropertyFlags.READWRITE) -> PropertyDescriptor:
        """Double precision property. Writes are clamped, never truncated."""
        return _numeric(PropertyKind.DOUBLE, default, minimum, maximum, nick, blurb, flags)

    @staticmethod
    def string(*, default: str = "", nick: Optional[str] = None, blurb: Optional[str] = None,
               flags: FlagsArg = PropertyFlags.READWRITE) -> PropertyDescriptor:
        return PropertyDescriptor(PropertyKind.STRING, resolve_flags(flags), nick, blurb, default)

    @staticmethod
    def bool(*, default: bool = False, nick: Optional[str] = None, blurb: Optional[str] = None,
             flags: FlagsArg = PropertyFlags.READWRITE) -> PropertyDescriptor:
        return PropertyDescriptor(PropertyKind.BOOL, resolve_flags(flags), nick, blurb, bool(default))

    @staticmethod
    def qobject(kind: type, *, nick: Optional[str] = None, blurb: Optional[str] = None,
                flags: FlagsArg = PropertyFlags.READWRITE) -> PropertyDescriptor:
        """
        Reference to another QObject.

        Object properties are always nullable since Qt cannot guarantee a
        foreign reference stays alive, so their default is always None.
        """
        if not (isinstance(kind, type) and issubclass(kind, QObject)):
            raise ConfigurationError(f"Property.qobject expects a QObject subclass, got {kind!r}")
        return PropertyDescriptor(PropertyKind.QOBJECT, resolve_flags(flags), nick, blurb,
                                  None, value_type=kind)

    @staticmethod
    def enum(kind: type, *, default: Optional[Enum] = None, nick: Optional[str] = None,
             blurb: Optional[str] = None, flags: FlagsArg = PropertyFlags.READWRITE) -> PropertyDescriptor:
        """Enum property. The default falls back to the first member of the enum."""
        if not (isinstance(kind, type) and issubclass(kind, Enum)):
            raise ConfigurationError(f"Property.enum expects an Enum subclass, got {kind!r}")
        if default is None:
            default = next(iter(kind), None)
        elif not isinstance(default, kind):
            raise ConfigurationError(f"Default {default!r} is not a member of {kind.__name__}")
        return PropertyDescriptor(PropertyKind.ENUM, resolve_flags(flags), nick, blurb,
                                  default, value_type=kind)

    @staticmethod
    def pyobject(*, nick: Optional[str] = None, blurb: Optional[str] = None,
                 flags: FlagsArg = PropertyFlags.READWRITE) -> PropertyDescriptor:
        """Arbitrary Python value. Nullable, default None."""
        return PropertyDescriptor(PropertyKind.PYOBJECT, resolve_flags(flags), nick, blurb, None)
