# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They provide the
defaults for every option of the `particle_field` configuration section and
the fixed properties of the rendering window.
"""

# --- Particle Field Defaults ---
DEFAULT_PARTICLE_COUNT = 50
DEFAULT_TICK_INTERVAL_MS = 50
DEFAULT_CONNECTION_THRESHOLD = 100.0
# Velocity components are drawn from [-range, +range] pixels per tick.
DEFAULT_VELOCITY_RANGE = 0.25
DEFAULT_SIZE_RANGE = (1.0, 5.0)
DEFAULT_OPACITY_RANGE = (0.1, 0.6)

# Opacity of an edge between two coincident particles. Falls off linearly
# to 0 at the connection threshold.
EDGE_MAX_OPACITY = 0.2

# Fields at least this large are scanned with the spatial grid instead of
# the all-pairs scan. Both produce identical edges.
SPATIAL_GRID_MIN_PARTICLES = 400

# --- Run Control ---
DEFAULT_LOG_THROTTLE_TICKS = 100

# --- Visualization settings ---
# Set to True to run in borderless fullscreen mode.
FULLSCREEN = False
DEFAULT_WINDOW_SIZE = (1280, 720)
# Upper bound for the event loop; ticks themselves run at the tick interval.
FPS = 60
WINDOW_TITLE = "Particle Field"
BACKGROUND_COLOR = (15, 23, 42)  # Slate
PARTICLE_COLOR = (99, 102, 241)  # Indigo "primary"
LINE_WIDTH = 1
