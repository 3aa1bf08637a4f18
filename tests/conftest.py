"""Pytest fixtures for pygant tests."""

import pytest

from pygant.state import run_state


@pytest.fixture(autouse=True)
def reset_run_state():
    """Every test starts (and leaves) the process-wide run state at its defaults."""
    run_state.reset()
    yield
    run_state.reset()
