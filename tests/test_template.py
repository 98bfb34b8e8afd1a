"""Tests for the template builder."""

from abc import ABC, abstractmethod

import pytest


def test_template_carries_metadata(qapp):
    """The template class exposes a read-only descriptor mapping."""
    from PyQt6.QtCore import QObject
    from pyqt_classgen import Property
    from pyqt_classgen.registration import template, template_metadata

    descriptors = {"title": Property.string(default="hi")}
    base = template(QObject, descriptors)

    metadata = template_metadata(base)
    assert metadata.base is QObject
    assert dict(metadata.descriptors) == descriptors
    assert metadata.consumer is None
    assert base.__name__ == "QObjectTemplate"
    assert issubclass(base, QObject)

    with pytest.raises(TypeError):
        metadata.descriptors["other"] = Property.bool()


def test_metadata_is_not_inherited(qapp):
    from PyQt6.QtCore import QObject
    from pyqt_classgen.registration import template, template_metadata

    base = template(QObject, {})

    class Sub(base):
        pass

    assert template_metadata(base) is not None
    assert template_metadata(Sub) is None


@pytest.mark.parametrize("descriptors", [
    {"_title": "Property"},
    {"title": "Child"},
    {"objectName": "Property"},
    {"title": 42},
    {"not an identifier": "Property"},
])
def test_template_rejects_malformed_mappings(qapp, descriptors):
    """Prefix rules, shadowing and non-descriptor values are configuration errors."""
    from PyQt6.QtCore import QObject
    from pyqt_classgen import Child, Property
    from pyqt_classgen.exceptions import ConfigurationError
    from pyqt_classgen.registration import template

    factories = {"Property": Property.string(), "Child": Child()}
    resolved = {key: factories.get(value, value) for key, value in descriptors.items()}

    with pytest.raises(ConfigurationError):
        template(QObject, resolved)


def test_template_requires_qobject_base():
    from pyqt_classgen.exceptions import ConfigurationError
    from pyqt_classgen.registration import template

    with pytest.raises(ConfigurationError):
        template(object, {})


def test_unregistered_template_cannot_be_instantiated(qapp):
    """Both the template class and an undecorated subclass refuse construction."""
    from PyQt6.QtCore import QObject
    from pyqt_classgen.exceptions import ConfigurationError
    from pyqt_classgen.registration import template

    base = template(QObject, {})

    class Plain(base):
        pass

    with pytest.raises(ConfigurationError):
        base()
    with pytest.raises(ConfigurationError, match="never registered"):
        Plain()


def test_second_consumer_is_rejected(qapp):
    """A template belongs to the first class registered from it."""
    from PyQt6.QtCore import QObject
    from pyqt_classgen import Property, qclass
    from pyqt_classgen.exceptions import ConfigurationError
    from pyqt_classgen.registration import template, template_metadata

    base = template(QObject, {"flag": Property.bool(flags="CONSTRUCT_ONLY")})

    @qclass
    class FirstUser(base):
        pass

    assert template_metadata(base).consumer.endswith("FirstUser")

    with pytest.raises(ConfigurationError, match="already consumed"):
        @qclass
        class SecondUser(base):
            pass

    assert FirstUser().flag is False


def test_template_with_abc_interface(qapp):
    """Interfaces that are ABCs are mixed in through a combined metaclass."""
    from PyQt6.QtCore import QObject
    from pyqt_classgen import qclass
    from pyqt_classgen.protocols import QtABCMeta
    from pyqt_classgen.registration import template

    class Resettable(ABC):
        @abstractmethod
        def reset(self):
            pass

    @qclass
    class Gauge(template(QObject, {}, Resettable)):
        def __init__(self):
            super().__init__()
            self.value = 5

        def reset(self):
            self.value = 0

    assert isinstance(type(Gauge), QtABCMeta)
    assert Gauge.__classgen__.interfaces == (Resettable,)

    gauge = Gauge()
    assert isinstance(gauge, Resettable)
    gauge.reset()
    assert gauge.value == 0
