# particle.py
"""
Manages the state of all particles in the field.

This module defines the ParticleField container, which stores particle data
(position, velocity, size, opacity) in NumPy arrays, and the ParticleFactory,
which seeds a new field with randomized particles inside the viewport.
"""
import logging
import numpy as np
from typing import Dict, Any, Iterable, Iterator, NamedTuple, Optional, Sequence, Union
from constants import (
    DEFAULT_VELOCITY_RANGE, DEFAULT_SIZE_RANGE, DEFAULT_OPACITY_RANGE
)
from utils import reject, validate_bounds, validate_count, validate_range

# --- Data Contracts ---
#
# class ParticleField:
#   - __init__(self, positions, velocities, sizes, opacities):
#     - Inputs: array-likes of shape (N, 2), (N, 2), (N,), (N,).
#     - Invariants:
#       - All arrays are float64 and share the same length N.
#       - self.sizes and self.opacities are read-only. Fields derived from
#         this one (see with_motion) share them instead of copying.
#
# class ParticleFactory:
#   - __init__(self, params: Dict[str, Any]):
#     - Inputs:
#       - params: The "particle_field" section of config.json.
#         - "velocity_range": float
#         - "size_range": [float, float]
#         - "opacity_range": [float, float]
#   - create(self, count: int, bounds, rng) -> ParticleField:
#     - Outputs: A new field of `count` particles inside bounds.
#     - Invariants: Same seed and arguments produce an identical field.

RandomSource = Union[np.random.Generator, int, None]


class Particle(NamedTuple):
    """Read-only view of a single particle."""
    x: float
    y: float
    vx: float
    vy: float
    size: float
    opacity: float


def _frozen(values) -> np.ndarray:
    array = np.asarray(values, dtype=np.float64)
    if array.flags.writeable:
        array = array.copy()
        array.flags.writeable = False
    return array


class ParticleField:
    """
    A fixed-size, ordered collection of particles backed by NumPy arrays.

    Index i identifies the same particle in every field derived from this one.
    """
    def __init__(self, positions, velocities, sizes, opacities):
        self.positions = np.array(positions, dtype=np.float64).reshape(-1, 2)
        self.velocities = np.array(velocities, dtype=np.float64).reshape(-1, 2)
        self.sizes = _frozen(sizes)
        self.opacities = _frozen(opacities)

        count = self.positions.shape[0]
        lengths = (self.velocities.shape[0], self.sizes.shape[0], self.opacities.shape[0])
        if any(length != count for length in lengths):
            reject(
                f"Particle arrays disagree on length: positions={count}, "
                f"velocities={lengths[0]}, sizes={lengths[1]}, opacities={lengths[2]}."
            )

    @classmethod
    def from_particles(cls, particles: Iterable[Particle]) -> "ParticleField":
        """Builds a field from explicit particles, in order."""
        rows = [tuple(p) for p in particles]
        if not rows:
            return cls.empty()
        data = np.array(rows, dtype=np.float64)
        return cls(data[:, 0:2], data[:, 2:4], data[:, 4], data[:, 5])

    @classmethod
    def empty(cls) -> "ParticleField":
        return cls(np.empty((0, 2)), np.empty((0, 2)), np.empty(0), np.empty(0))

    def with_motion(self, positions: np.ndarray, velocities: np.ndarray) -> "ParticleField":
        """Returns a field with new positions and velocities and the same sizes and opacities."""
        return ParticleField(positions, velocities, self.sizes, self.opacities)

    def __len__(self) -> int:
        return self.positions.shape[0]

    def __getitem__(self, index: int) -> Particle:
        x, y = self.positions[index]
        vx, vy = self.velocities[index]
        return Particle(float(x), float(y), float(vx), float(vy),
                        float(self.sizes[index]), float(self.opacities[index]))

    def __iter__(self) -> Iterator[Particle]:
        for i in range(len(self)):
            yield self[i]

    def __repr__(self) -> str:
        return f"ParticleField(count={len(self)})"


class ParticleFactory:
    """
    Creates the initial particle field with randomized state.
    """
    def __init__(self, params: Optional[Dict[str, Any]] = None):
        """
        Initializes the factory with the particle ranges.

        Args:
            params (Dict[str, Any]): The "particle_field" config section.
        """
        params = params if params is not None else {}
        self.velocity_range = float(params.get('velocity_range', DEFAULT_VELOCITY_RANGE))
        if self.velocity_range < 0:
            reject(f"Configuration error: velocity_range must be >= 0, got {self.velocity_range}.")
        self.size_range = validate_range('size_range', params.get('size_range', DEFAULT_SIZE_RANGE))
        self.opacity_range = validate_range('opacity_range', params.get('opacity_range', DEFAULT_OPACITY_RANGE))
        if self.opacity_range[1] > 1.0:
            reject(f"Configuration error: opacity_range must not exceed 1.0, got {list(self.opacity_range)}.")

    def create(self, count: int, bounds: Sequence[float], rng: RandomSource = None) -> ParticleField:
        """
        Creates `count` particles uniformly distributed inside bounds.

        Args:
            count (int): Number of particles, >= 0.
            bounds: (width, height) of the viewport.
            rng: A numpy Generator, an integer seed, or None for system entropy.
        """
        count = validate_count('count', count)
        width, height = validate_bounds(bounds)

        # All randomness flows through a single generator so that the same
        # seed reproduces the same field.
        rng = np.random.default_rng(rng)

        positions = rng.uniform(low=[0, 0], high=[width, height], size=(count, 2))
        sizes = rng.uniform(self.size_range[0], self.size_range[1], size=count)
        velocities = rng.uniform(-self.velocity_range, self.velocity_range, size=(count, 2))
        opacities = rng.uniform(self.opacity_range[0], self.opacity_range[1], size=count)

        field = ParticleField(positions, velocities, sizes, opacities)
        logging.info(f"ParticleField created with {count} particles in {width:.0f}x{height:.0f}.")
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {field.positions.shape}, "
            f"Velocities shape: {field.velocities.shape}"
        )
        return field
