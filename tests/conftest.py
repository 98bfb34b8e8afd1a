"""pytest configuration and fixtures for pyqt-classgen tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture
def classgen_config():
    """Install a fresh ClassGenConfig for one test and restore the defaults after."""
    from pyqt_classgen.protocols import ClassGenConfig, set_classgen_config

    config = ClassGenConfig()
    set_classgen_config(config)
    yield config
    set_classgen_config(None)
