"""
Metaclass support for classes mixing Qt bases with capability interfaces.

Qt classes use sip's wrapper metaclass; ABC interfaces use ABCMeta. A class
inheriting from both needs a metaclass deriving from both.
"""

from abc import ABCMeta
from typing import Sequence

from PyQt6.QtCore import QObject

_QtMetaclass = type(QObject)


class QtABCMeta(_QtMetaclass, ABCMeta):
    """Metaclass for Qt classes that implement ABC interfaces."""
    pass


def metaclass_for(bases: Sequence[type]) -> type:
    """Metaclass to create a class with the given bases."""
    if any(isinstance(base, ABCMeta) for base in bases):
        return QtABCMeta
    return type(bases[0])
