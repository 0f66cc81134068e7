import os

import pytest

# Widget tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="module")
def qt_app():
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture(autouse=True)
def utc_timezone():
    from pagecal_core.timezone_utils import get_timezone_name, set_timezone
    previous = get_timezone_name()
    set_timezone("UTC")
    yield
    set_timezone(previous)
