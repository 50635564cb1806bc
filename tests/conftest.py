"""Root-level pytest fixtures for all tests.

This module provides fixtures that are available to all tests in the project.
"""

import pytest
from test_helpers import RecordingView, reset_all_globals


@pytest.fixture(autouse=True)
def reset_global_state():
    """Automatically reset all global service and repository instances after each test."""
    yield
    reset_all_globals()


@pytest.fixture
def view():
    """View double recording delivery notifications."""
    return RecordingView()
