import pytest

from waveview import ManualTicker, WaveAnimator


class RecordingContext(object):

    """Stands in for a cairo.Context, recording every call made on it."""

    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        def record(*args):
            self.calls.append((name,) + args)
        return record

    def named(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def cr():
    return RecordingContext()


@pytest.fixture
def redraws():
    """A list that grows by one entry per invalidate() call."""
    return []


@pytest.fixture
def animator(redraws):
    """An animator sized to a 100x90 surface (capacity 10, quadrant 30)."""
    animator = WaveAnimator(invalidate=lambda: redraws.append(True))
    animator.resize(100, 90)
    return animator


@pytest.fixture
def ticker():
    return ManualTicker()
