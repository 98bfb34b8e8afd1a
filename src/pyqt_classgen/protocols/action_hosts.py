"""
Action host contracts and adapters.

Decides which container receives the QActions declared for a class, based on
what the instance is:

- QGuiApplication: actions are parented to the application and their
  accelerators are registered application-wide
- QMainWindow: actions are added to the window, accelerators are not set
- QWidget: actions go into a private QActionGroup named after the class,
  created on first use and cached on the instance
- anything else: no host, actions are skipped
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from PyQt6.QtCore import QObject, Qt
from PyQt6.QtGui import QAction, QActionGroup, QGuiApplication, QKeySequence
from PyQt6.QtWidgets import QMainWindow, QWidget

from pyqt_classgen.descriptors.action import ActionDescriptor

logger = logging.getLogger(__name__)

ACTION_GROUP_ATTR = "_classgen_action_group"


class ActionHost(ABC):
    """
    ABC for containers that can hold QActions.

    Concrete hosts wrap one instance; the registration engine asks
    resolve_action_host() for the right one.
    """

    supports_accels: bool = False

    @abstractmethod
    def add_action(self, action: QAction, accels: Iterable[str] = ()) -> None:
        """
        Install action in the container.

        Args:
            action: The action to install
            accels: Key sequences; ignored by hosts without accelerator support
        """
        pass


class ApplicationActionHost(ActionHost):
    """Application-wide actions with application-wide shortcuts."""

    supports_accels = True

    def __init__(self, app: QGuiApplication):
        self._app = app

    def add_action(self, action: QAction, accels: Iterable[str] = ()) -> None:
        action.setParent(self._app)
        self.set_accels_for_action(action, accels)

    @staticmethod
    def set_accels_for_action(action: QAction, accels: Iterable[str]) -> None:
        sequences = [QKeySequence(accel) for accel in accels]
        if not sequences:
            return
        action.setShortcuts(sequences)
        action.setShortcutContext(Qt.ShortcutContext.ApplicationShortcut)
        logger.debug(f"Set accels {[s.toString() for s in sequences]} for app.{action.objectName()}")


class WindowActionHost(ActionHost):
    """Actions added directly to a main window."""

    def __init__(self, window: QMainWindow):
        self._window = window

    def add_action(self, action: QAction, accels: Iterable[str] = ()) -> None:
        self._window.addAction(action)


class WidgetActionHost(ActionHost):
    """Actions collected in a private action group owned by the widget."""

    def __init__(self, widget: QWidget, group_name: str):
        self._widget = widget
        self._group = self.group_for(widget, group_name)

    @property
    def group(self) -> QActionGroup:
        return self._group

    @staticmethod
    def group_for(widget: QWidget, group_name: str) -> QActionGroup:
        """Return the widget's action group, creating it on first use."""
        group = widget.__dict__.get(ACTION_GROUP_ATTR)
        if group is None:
            group = QActionGroup(widget)
            group.setObjectName(group_name)
            group.setExclusionPolicy(QActionGroup.ExclusionPolicy.None_)
            widget.__dict__[ACTION_GROUP_ATTR] = group
            logger.debug(f"Created action group '{group_name}' for {type(widget).__name__}")
        return group

    def add_action(self, action: QAction, accels: Iterable[str] = ()) -> None:
        self._group.addAction(action)
        self._widget.addAction(action)


def resolve_action_host(instance: QObject, group_name: str) -> Optional[ActionHost]:
    """
    Pick the action container for instance.

    Args:
        instance: Object being constructed
        group_name: Name of the action group created for plain widgets

    Returns:
        ActionHost, or None when the instance cannot hold actions
    """
    if isinstance(instance, QGuiApplication):
        return ApplicationActionHost(instance)
    if isinstance(instance, QMainWindow):
        return WindowActionHost(instance)
    if isinstance(instance, QWidget):
        return WidgetActionHost(instance, group_name)
    return None


def build_action(name: str, descriptor: ActionDescriptor, parent: QObject) -> QAction:
    """Construct the QAction for a declared action field."""
    action = QAction(name, parent)
    action.setObjectName(name)
    for key, value in descriptor.args.items():
        action.setProperty(key, value)
    return action
