import numpy as np
import pytest

from particle import Particle, ParticleField


class RecordingRenderer:
    """Keeps every frame it is asked to draw."""

    def __init__(self):
        self.frames = []

    def draw(self, field, edges):
        self.frames.append((field, edges))


class FailingRenderer(RecordingRenderer):
    """Raises on the frames listed in fail_on (1-based)."""

    def __init__(self, fail_on):
        super().__init__()
        self.fail_on = set(fail_on)
        self.calls = 0

    def draw(self, field, edges):
        self.calls += 1
        if self.calls in self.fail_on:
            raise RuntimeError(f"frame {self.calls} failed")
        super().draw(field, edges)


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def renderer():
    return RecordingRenderer()


def make_field(*particles):
    """Builds a field from (x, y, vx, vy) tuples with size 2 and opacity 0.3."""
    return ParticleField.from_particles(
        Particle(x, y, vx, vy, 2.0, 0.3) for x, y, vx, vy in particles
    )
