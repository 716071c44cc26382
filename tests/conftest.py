import os

# Must be set before the first PySide6 import
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from Forest.registry import Forest


@pytest.fixture
def forest():
    """A forest on a headless surface."""
    return Forest()


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app
