"""
Shared pytest fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from PySide6.QtCore import QCoreApplication


@pytest.fixture(scope="session")
def qapp():
    """Ensure a Qt application exists for QObject/QThread tests"""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(sys.argv)
    yield app
