import os

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
pygame = pytest.importorskip("pygame")

from proximity import ProximityGraphBuilder
from visualization import Visualizer
from conftest import make_field


@pytest.fixture
def visualizer():
    vis = Visualizer({"fullscreen": False, "window_size": [200, 100]})
    yield vis
    vis.close()


def test_viewport_bounds_report_window_size(visualizer):
    assert visualizer.viewport_bounds() == (200.0, 100.0)


def test_draw_renders_particles_and_lines(visualizer):
    field = make_field((20, 20, 0, 0), (60, 20, 0, 0))
    edges = ProximityGraphBuilder().build_edges(field)

    visualizer.draw(field, edges)

    assert visualizer.frames_drawn == 1
    background = tuple(visualizer.background_color)[:3]
    assert tuple(visualizer.screen.get_at((20, 20)))[:3] != background
    assert tuple(visualizer.screen.get_at((150, 80)))[:3] == background


def test_quit_event_ends_event_loop(visualizer):
    assert visualizer.process_events()
    pygame.event.post(pygame.event.Event(pygame.QUIT))
    assert not visualizer.process_events()


def test_invalid_color_falls_back_to_default():
    vis = Visualizer({"window_size": [50, 50], "particle_color": "not-a-colour"})
    try:
        assert tuple(vis.particle_color)[:3] == (99, 102, 241)
    finally:
        vis.close()
