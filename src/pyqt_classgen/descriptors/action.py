"""QAction descriptors."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Tuple

from PyQt6.QtGui import QAction

from pyqt_classgen.exceptions import ConfigurationError


@dataclass(frozen=True)
class ActionDescriptor:
    """Construction arguments and accelerators for a QAction bound to each instance."""

    args: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    accels: Tuple[str, ...] = ()


def Action(accels: Iterable[str] = (), **args: Any) -> ActionDescriptor:
    """
    Declare a QAction for classes whose instances can host actions
    (QGuiApplication, QMainWindow or QWidget subclasses).

    Args:
        accels: Key sequences ("Ctrl+Q"); only honoured on application instances
        **args: QAction Qt properties (text, checkable, checked, enabled, toolTip, ...).
            The action name is the field name and cannot be passed here.

    Raises:
        ConfigurationError: If an argument is not a QAction property

    Example:
        class Editor(template(QWidget, {"save": Action(text="Save", accels=["Ctrl+S"])})):
            ...
    """
    meta = QAction.staticMetaObject
    for key in args:
        if key in ("name", "objectName"):
            raise ConfigurationError("Action name comes from the field name and cannot be passed as an argument")
        if meta.indexOfProperty(key) < 0:
            raise ConfigurationError(f"'{key}' is not a QAction property")
    if isinstance(accels, str):
        accels = [accels]
    return ActionDescriptor(MappingProxyType(dict(args)), tuple(accels))
