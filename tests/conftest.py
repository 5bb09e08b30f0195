# tests/conftest.py

import os
import time

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QCoreApplication, QLocale  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from services.persistence import PreferenceStore  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """One Qt application for the whole run (offscreen, reused if present)."""
    app = QCoreApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture
def store(tmp_path):
    return PreferenceStore(base_dir=tmp_path / "store")


@pytest.fixture
def en_us():
    return QLocale("en_US")


def wait_until(predicate, timeout_ms=2000):
    """Pump the Qt event loop until predicate() is true or the timeout passes."""
    deadline = time.monotonic() + timeout_ms / 1000
    while time.monotonic() < deadline:
        QCoreApplication.processEvents()
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()
