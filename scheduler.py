# scheduler.py
"""
Drives the particle field animation.

The AnimationScheduler owns the only mutable state of the engine: the current
field. While running, it fires one tick per interval (simulate, build edges,
render). Scheduling is cooperative and single-threaded: the host loop calls
run_pending() (or run()) and at most one tick executes at a time. A tick that
overruns the interval causes the missed ticks to be skipped, never replayed.
"""
import enum
import logging
import time
import numpy as np
from typing import Callable, Dict, Any, Optional, Sequence, Tuple
from particle import ParticleFactory, ParticleField, RandomSource
from simulation import ParticleSimulator
from proximity import ProximityGraphBuilder, Edges
from scene import SceneRenderer
from constants import (
    DEFAULT_PARTICLE_COUNT, DEFAULT_TICK_INTERVAL_MS, DEFAULT_LOG_THROTTLE_TICKS
)
from utils import InvalidArgument, reject, validate_bounds, validate_count

# --- Data Contracts ---
#
# class AnimationScheduler:
#   - __init__(self, params, bounds_provider, renderer, rng=None, clock=time.monotonic):
#     - Inputs:
#       - params: The "particle_field" section of config.json.
#         - "particle_count": int >= 0
#         - "tick_interval_ms": float > 0
#         - "seed": Optional[int]
#       - bounds_provider: Zero-argument callable returning (width, height).
#         Polled on start and on every tick.
#       - renderer: A SceneRenderer.
#   - start() / stop(): Idempotent state transitions.
#   - tick() -> bool: One cycle. Returns False if stopped or the tick was skipped.
#   - run_pending() -> bool: Fires a tick if one is due.
#     - Invariants: Never fires while STOPPED. Never fires twice for the same
#       deadline.

BoundsProvider = Callable[[], Sequence[float]]


class SchedulerState(enum.Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class AnimationScheduler:
    """
    Runs the simulate -> build edges -> render cycle at a fixed tick rate.
    """
    def __init__(
        self,
        params: Optional[Dict[str, Any]],
        bounds_provider: BoundsProvider,
        renderer: SceneRenderer,
        rng: RandomSource = None,
        clock: Callable[[], float] = time.monotonic,
        log_throttle_ticks: int = DEFAULT_LOG_THROTTLE_TICKS,
    ):
        params = params if params is not None else {}
        self.particle_count = validate_count(
            'particle_count', params.get('particle_count', DEFAULT_PARTICLE_COUNT)
        )
        tick_interval_ms = float(params.get('tick_interval_ms', DEFAULT_TICK_INTERVAL_MS))
        if not tick_interval_ms > 0:
            reject(f"Configuration error: tick_interval_ms must be > 0, got {tick_interval_ms}.")
        self.interval = tick_interval_ms / 1000.0

        self.factory = ParticleFactory(params)
        self.simulator = ParticleSimulator()
        self.graph_builder = ProximityGraphBuilder(params)

        self.bounds_provider = bounds_provider
        self.renderer = renderer
        self.clock = clock
        self.log_throttle_ticks = max(1, int(log_throttle_ticks))
        self.rng = np.random.default_rng(rng if rng is not None else params.get('seed'))

        self.state = SchedulerState.STOPPED
        self.field: Optional[ParticleField] = None
        self.edges: Edges = Edges.empty()
        self.tick_count = 0
        self.frame_failures = 0
        self.skipped_ticks = 0
        self._next_tick: Optional[float] = None

        logging.info(
            f"Animation scheduler initialized: {self.particle_count} particles, "
            f"tick every {tick_interval_ms:.0f}ms."
        )

    @property
    def running(self) -> bool:
        return self.state is SchedulerState.RUNNING

    def start(self) -> None:
        """Transitions to RUNNING, creating the field on first start."""
        if self.running:
            return
        if self.field is None:
            self.field = self.factory.create(self.particle_count, self.bounds_provider(), self.rng)
        self.state = SchedulerState.RUNNING
        self._next_tick = self.clock() + self.interval
        logging.info("Animation started.")

    def stop(self) -> None:
        """Transitions to STOPPED. No further tick fires until start()."""
        if not self.running:
            return
        self.state = SchedulerState.STOPPED
        self._next_tick = None
        logging.info(f"Animation stopped after {self.tick_count} ticks.")

    def reset(self) -> None:
        """Stops and discards the field. The next start() creates a fresh one."""
        self.stop()
        self.field = None
        self.edges = Edges.empty()
        logging.info("Particle field discarded.")

    def _current_bounds(self) -> Optional[Tuple[float, float]]:
        try:
            return validate_bounds(self.bounds_provider())
        except InvalidArgument as e:
            logging.warning(f"Skipping tick, viewport is not drawable: {e}")
            return None

    def tick(self) -> bool:
        """
        Executes one simulate -> build edges -> render cycle.

        Returns:
            bool: False if the scheduler is stopped or the viewport had no
            valid size, True otherwise.
        """
        if not self.running:
            return False

        bounds = self._current_bounds()
        if bounds is None:
            return False

        self.field = self.simulator.step(self.field, bounds)
        self.edges = self.graph_builder.build_edges(self.field)
        self.tick_count += 1

        # A failed frame must never stop the animation; the next tick
        # continues from the already advanced field.
        try:
            self.renderer.draw(self.field, self.edges)
        except Exception as e:
            self.frame_failures += 1
            logging.error(f"Renderer failed on tick {self.tick_count}: {e}", exc_info=True)

        if self.tick_count % self.log_throttle_ticks == 0:
            logging.info(f"Animation tick {self.tick_count}")
            if len(self.field) > 0:
                avg_speed = np.mean(np.linalg.norm(self.field.velocities, axis=1))
                logging.debug(
                    f"Tick {self.tick_count} | Edges: {len(self.edges)} | "
                    f"Average Speed: {avg_speed:.4f} | Frame failures: {self.frame_failures}"
                )
        return True

    def run_pending(self) -> bool:
        """
        Fires one tick if its deadline has passed.

        Returns:
            bool: True if a tick was executed.
        """
        if not self.running or self._next_tick is None:
            return False
        now = self.clock()
        if now < self._next_tick:
            return False

        self.tick()

        # The renderer may have stopped the scheduler during the tick.
        if not self.running:
            return True

        self._next_tick += self.interval
        now = self.clock()
        if self._next_tick <= now:
            missed = int((now - self._next_tick) // self.interval) + 1
            self.skipped_ticks += missed
            self._next_tick += missed * self.interval
            logging.debug(f"Tick {self.tick_count} overran the interval, skipping {missed} tick(s).")
        return True

    def seconds_until_next_tick(self) -> Optional[float]:
        if not self.running or self._next_tick is None:
            return None
        return max(0.0, self._next_tick - self.clock())

    def run(self, max_ticks: Optional[int] = None, sleep: Callable[[float], None] = time.sleep) -> None:
        """
        Starts the scheduler and blocks until it is stopped or has executed
        max_ticks ticks.
        """
        self.start()
        executed = 0
        while self.running:
            if self.run_pending():
                executed += 1
                if max_ticks is not None and executed >= max_ticks:
                    logging.info(f"Reached max_ticks ({max_ticks}). Stopping animation.")
                    self.stop()
                    break
            delay = self.seconds_until_next_tick()
            if delay:
                sleep(delay)
