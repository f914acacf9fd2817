"""Shared fixtures for ComfyUI-Koshi-Tween test suite."""

import sys
import os
import pytest

# Ensure the package root is importable
PACKAGE_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PACKAGE_ROOT not in sys.path:
    sys.path.insert(0, PACKAGE_ROOT)

from koshi_tween.core import Animation, ManualFrameClock


class OutputRecorder:
    """Output callback that keeps every delivered value."""

    def __init__(self):
        self.values = []

    def __call__(self, value):
        self.values.append(value)

    @property
    def last(self):
        return self.values[-1]

    def __len__(self):
        return len(self.values)


# ---------------------------------------------------------------------------
# Clock / output fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def clock():
    """Manual frame clock starting at t=0ms."""
    return ManualFrameClock()


@pytest.fixture
def recorder():
    """Fresh output recorder."""
    return OutputRecorder()


@pytest.fixture
def make_animation(clock, recorder):
    """Factory: build an Animation wired to the shared clock and recorder."""
    def _make(keyframes=(0.0, 1.0), **options):
        return Animation(recorder, keyframes, options, clock=clock)
    return _make
