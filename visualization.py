# visualization.py
"""
Handles the visualization of the particle field using Pygame.
"""
import logging
import pygame
from typing import Dict, Any, Optional, Tuple
from particle import ParticleField
from proximity import Edges
from scene import Scene
from constants import (
    BACKGROUND_COLOR, PARTICLE_COLOR, FULLSCREEN, DEFAULT_WINDOW_SIZE,
    WINDOW_TITLE, LINE_WIDTH
)

# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, vis_params: Optional[dict] = None):
#     - Inputs:
#       - vis_params: The "visualization" section of config.json.
#         - "fullscreen": bool
#         - "window_size": [int, int]
#         - "background_color", "particle_color": [r, g, b]
#     - Side Effects: Initializes Pygame and creates a resizable display.
#
#   - viewport_bounds(self) -> Tuple[float, float]:
#     - Outputs: The current drawable size. Changes when the window is resized.
#
#   - process_events(self) -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#
#   - draw(self, field: ParticleField, edges: Edges) -> None:
#     - Side Effects: Renders the edges as lines and the particles as circles,
#       each with its own opacity, and flips the display.


def _alpha(opacity: float) -> int:
    return max(0, min(255, int(round(opacity * 255))))


class Visualizer:
    """
    Renders the particle field and its proximity lines.
    """
    def __init__(self, vis_params: Optional[Dict[str, Any]] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params if vis_params is not None else {}
        pygame.init()

        if vis_params.get('fullscreen', FULLSCREEN):
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width, height = vis_params.get('window_size', DEFAULT_WINDOW_SIZE)
            self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)

        self.background_color = self._parse_color(vis_params.get('background_color'), BACKGROUND_COLOR)
        self.particle_color = self._parse_color(vis_params.get('particle_color'), PARTICLE_COLOR)

        # Lines and circles are drawn with per-element alpha onto this overlay,
        # which is then blitted onto the opaque background.
        self.overlay = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)

        pygame.display.set_caption(WINDOW_TITLE)
        self.clock = pygame.time.Clock()
        self.frames_drawn = 0

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    @staticmethod
    def _parse_color(value, default: Tuple[int, int, int]) -> pygame.Color:
        if value is None:
            return pygame.Color(default)
        try:
            return pygame.Color(value)
        except (ValueError, TypeError) as e:
            logging.error(f"Could not parse color {value!r} from config: {e}. Falling back to {default}.")
            return pygame.Color(default)

    def viewport_bounds(self) -> Tuple[float, float]:
        width, height = self.screen.get_size()
        return float(width), float(height)

    def process_events(self) -> bool:
        """
        Handles Pygame events.

        Returns:
            bool: False if the animation should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False

            if event.type == pygame.VIDEORESIZE:
                logging.info(f"Window resized to {event.w}x{event.h}.")
        return True

    def draw(self, field: ParticleField, edges: Edges) -> None:
        """
        Draws one frame: proximity lines first, particles on top.
        """
        scene = Scene.from_field(field, edges)

        if self.overlay.get_size() != self.screen.get_size():
            self.overlay = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)
        self.overlay.fill((0, 0, 0, 0))

        r, g, b = self.particle_color.r, self.particle_color.g, self.particle_color.b
        for line in scene.edges:
            pygame.draw.line(
                self.overlay,
                (r, g, b, _alpha(line["opacity"])),
                (line["x1"], line["y1"]),
                (line["x2"], line["y2"]),
                LINE_WIDTH
            )

        for particle in scene.particles:
            pygame.draw.circle(
                self.overlay,
                (r, g, b, _alpha(particle["opacity"])),
                (particle["x"], particle["y"]),
                particle["size"]
            )

        self.screen.fill(self.background_color)
        self.screen.blit(self.overlay, (0, 0))
        pygame.display.flip()
        self.frames_drawn += 1

    def close(self):
        """Shuts down Pygame."""
        pygame.quit()
