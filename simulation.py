# simulation.py
"""
Handles the motion of the particle field.

This module defines the ParticleSimulator, which advances a field by one
tick: every particle moves by its velocity, bounces off the viewport edges
and is wrapped back inside when it would otherwise leave it.
"""
import numpy as np
from typing import Sequence
from numba import jit
from particle import ParticleField
from utils import validate_bounds

# --- Data Contracts ---
#
# class ParticleSimulator:
#   - step(self, field: ParticleField, bounds) -> ParticleField:
#     - Inputs:
#       - field: The field at the previous tick. Not modified.
#       - bounds: (width, height) read for this tick.
#     - Outputs: A new field. Sizes and opacities are the same arrays.
#     - Invariants: Particle count and order are unchanged. Every position
#       lies within [0, width] x [0, height].

@jit(nopython=True)
def _step_numba(positions, velocities, width, height):
    """
    Numba-jitted per-particle update, applied in place.

    A velocity component is reflected whenever the tentative coordinate
    leaves the viewport on that axis; the coordinate itself is then moved to
    the opposite edge. Both happen in the same tick.
    """
    for i in range(positions.shape[0]):
        x = positions[i, 0] + velocities[i, 0]
        y = positions[i, 1] + velocities[i, 1]

        if x < 0.0 or x > width:
            velocities[i, 0] = -velocities[i, 0]
        if y < 0.0 or y > height:
            velocities[i, 1] = -velocities[i, 1]

        if x < 0.0:
            x = width
        elif x > width:
            x = 0.0
        if y < 0.0:
            y = height
        elif y > height:
            y = 0.0

        positions[i, 0] = x
        positions[i, 1] = y


class ParticleSimulator:
    """
    Advances a particle field by one tick. Holds no state.
    """
    def step(self, field: ParticleField, bounds: Sequence[float]) -> ParticleField:
        """
        Executes one time step and returns the resulting field.
        """
        width, height = validate_bounds(bounds)
        positions = field.positions.copy()
        velocities = field.velocities.copy()
        _step_numba(positions, velocities, np.float64(width), np.float64(height))
        return field.with_motion(positions, velocities)
