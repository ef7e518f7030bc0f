"""
Shared pytest fixtures for palettex tests.
"""

import pytest

from palettex import Action, PaletteStore


@pytest.fixture
def empty_store():
    """A store with no actions registered."""
    return PaletteStore(actions=[])


@pytest.fixture
def store():
    """A store with a small two-level action tree: theme > theme.dark/theme.light."""
    return PaletteStore(
        actions=[
            Action("theme", name="Change theme"),
            Action("theme.dark", name="Dark", parent="theme"),
            Action("theme.light", name="Light", parent="theme"),
            Action("search", name="Search docs"),
        ]
    )


@pytest.fixture
def recorder():
    """Callback that records every value it is called with."""

    class Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, value):
            self.calls.append(value)

    return Recorder()
