# proximity.py
"""
Builds the proximity graph drawn between nearby particles.

Every pair of particles closer than the connection threshold is joined by an
edge whose opacity fades linearly from EDGE_MAX_OPACITY at distance 0 to 0 at
the threshold. Small fields use a vectorized all-pairs scan; large fields use
a spatial grid with cells at least one threshold wide, so that only the 3x3
neighbourhood of each particle has to be searched. Both scans compute the
distance with the same arithmetic and return identical edges.
"""
import logging
import numpy as np
from typing import Dict, Any, Iterator, NamedTuple, Optional, Tuple
from numba import jit
from numba.core import types
from numba.typed import List
from particle import ParticleField
from constants import (
    DEFAULT_CONNECTION_THRESHOLD, EDGE_MAX_OPACITY, SPATIAL_GRID_MIN_PARTICLES
)
from utils import reject

# --- Data Contracts ---
#
# class ProximityGraphBuilder:
#   - __init__(self, params: Dict[str, Any]):
#     - Inputs:
#       - params: The "particle_field" section of config.json.
#         - "connection_threshold": float > 0
#         - "spatial_grid_min_particles": int
#   - build_edges(self, field: ParticleField, threshold: float = None) -> Edges:
#     - Outputs: One edge per pair i < j at distance d < threshold, with
#       opacity EDGE_MAX_OPACITY * (1 - d / threshold), sorted by (i, j).
#     - Side Effects: None besides the cached grid.


class Edge(NamedTuple):
    i: int
    j: int
    opacity: float


class Edges:
    """
    The edges of one tick, stored as a (M, 2) index array and an (M,)
    opacity array. Behaves as a read-only sequence of Edge.
    """
    def __init__(self, pairs: np.ndarray, opacities: np.ndarray):
        self.pairs = np.asarray(pairs, dtype=np.int64).reshape(-1, 2)
        self.opacities = np.asarray(opacities, dtype=np.float64)

    @classmethod
    def empty(cls) -> "Edges":
        return cls(np.empty((0, 2), dtype=np.int64), np.empty(0))

    def __len__(self) -> int:
        return self.pairs.shape[0]

    def __getitem__(self, index: int) -> Edge:
        i, j = self.pairs[index]
        return Edge(int(i), int(j), float(self.opacities[index]))

    def __iter__(self) -> Iterator[Edge]:
        for k in range(len(self)):
            yield self[k]

    def __repr__(self) -> str:
        return f"Edges(count={len(self)})"


def _all_pairs_edges(positions: np.ndarray, threshold: float) -> Tuple[np.ndarray, np.ndarray]:
    """Vectorized O(n^2) scan over every pair i < j."""
    ii, jj = np.triu_indices(positions.shape[0], k=1)
    dx = positions[jj, 0] - positions[ii, 0]
    dy = positions[jj, 1] - positions[ii, 1]
    distance = np.sqrt(dx * dx + dy * dy)
    close = distance < threshold
    pairs = np.stack((ii[close], jj[close]), axis=1)
    opacities = EDGE_MAX_OPACITY * (1.0 - distance[close] / threshold)
    return pairs, opacities


@jit(nopython=True)
def _update_grid_numba(positions, grid, grid_width, origin_x, origin_y, cell_size):
    """
    Numba-jitted function to populate the spatial grid.
    """
    for cell in grid:
        cell.clear()

    for i in range(positions.shape[0]):
        cell_x = int((positions[i, 0] - origin_x) / cell_size)
        cell_y = int((positions[i, 1] - origin_y) / cell_size)
        grid[cell_x + cell_y * grid_width].append(i)


@jit(nopython=True)
def _scan_grid_numba(positions, grid, grid_width, grid_height, origin_x, origin_y, cell_size,
                     threshold, max_opacity, pairs, opacities, fill):
    """
    Numba-jitted neighbourhood scan. Returns the number of edges found.

    With fill=False only counts, so the caller can size the output arrays
    before a second pass with fill=True.
    """
    count = 0
    for i in range(positions.shape[0]):
        x_i = positions[i, 0]
        y_i = positions[i, 1]
        cell_x = int((x_i - origin_x) / cell_size)
        cell_y = int((y_i - origin_y) / cell_size)

        for dx in [-1, 0, 1]:
            for dy in [-1, 0, 1]:
                nx, ny = cell_x + dx, cell_y + dy
                if 0 <= nx < grid_width and 0 <= ny < grid_height:
                    for j in grid[nx + ny * grid_width]:
                        if j <= i:
                            continue
                        delta_x = positions[j, 0] - x_i
                        delta_y = positions[j, 1] - y_i
                        distance = np.sqrt(delta_x * delta_x + delta_y * delta_y)
                        if distance < threshold:
                            if fill:
                                pairs[count, 0] = i
                                pairs[count, 1] = j
                                opacities[count] = max_opacity * (1.0 - distance / threshold)
                            count += 1
    return count


class ProximityGraphBuilder:
    """
    Computes the edges between particles closer than the connection threshold.
    """
    def __init__(self, params: Optional[Dict[str, Any]] = None):
        params = params if params is not None else {}
        self.threshold = self._validate_threshold(
            params.get('connection_threshold', DEFAULT_CONNECTION_THRESHOLD)
        )
        self.spatial_grid_min_particles = int(
            params.get('spatial_grid_min_particles', SPATIAL_GRID_MIN_PARTICLES)
        )

        # Reused across ticks, grown when the layout needs more cells.
        self._grid = None

        logging.info(
            f"Proximity graph builder initialized: threshold {self.threshold:.1f}px, "
            f"spatial grid from {self.spatial_grid_min_particles} particles."
        )

    @staticmethod
    def _validate_threshold(threshold) -> float:
        threshold = float(threshold)
        if not threshold > 0:
            reject(f"Connection threshold must be > 0, got {threshold}.")
        return threshold

    def build_edges(self, field: ParticleField, threshold: Optional[float] = None) -> Edges:
        """
        Returns the edges of the current field, sorted by (i, j).
        """
        threshold = self.threshold if threshold is None else self._validate_threshold(threshold)
        if len(field) < 2:
            return Edges.empty()

        if len(field) >= self.spatial_grid_min_particles:
            pairs, opacities = self._grid_edges(field.positions, threshold)
        else:
            pairs, opacities = _all_pairs_edges(field.positions, threshold)

        order = np.lexsort((pairs[:, 1], pairs[:, 0]))
        return Edges(pairs[order], opacities[order])

    def _grid_edges(self, positions: np.ndarray, threshold: float) -> Tuple[np.ndarray, np.ndarray]:
        count = positions.shape[0]
        origin_x, origin_y = positions.min(axis=0)
        extent_x, extent_y = positions.max(axis=0) - (origin_x, origin_y)

        # Cells must be at least one threshold wide for the 3x3 search to
        # find every edge. Widening them keeps the cell count within a small
        # multiple of the particle count however small the threshold is.
        cell_size = max(
            threshold,
            np.sqrt(extent_x * extent_y / count),
            extent_x / count,
            extent_y / count,
        )
        grid_width = int(extent_x / cell_size) + 1
        grid_height = int(extent_y / cell_size) + 1
        cell_count = grid_width * grid_height

        # The grid only grows; a smaller layout reuses the leading cells.
        if self._grid is None or len(self._grid) < cell_count:
            # Numba requires typed data structures for JIT compilation.
            self._grid = List([List.empty_list(types.int64) for _ in range(cell_count)])
            logging.debug(
                f"Spatial grid resized to {grid_width}x{grid_height} cells of {cell_size:.1f}px."
            )

        _update_grid_numba(positions, self._grid, grid_width, origin_x, origin_y, cell_size)

        pairs = np.empty((0, 2), dtype=np.int64)
        opacities = np.empty(0, dtype=np.float64)
        found = _scan_grid_numba(
            positions, self._grid, grid_width, grid_height, origin_x, origin_y,
            cell_size, threshold, EDGE_MAX_OPACITY, pairs, opacities, False
        )
        pairs = np.empty((found, 2), dtype=np.int64)
        opacities = np.empty(found, dtype=np.float64)
        _scan_grid_numba(
            positions, self._grid, grid_width, grid_height, origin_x, origin_y,
            cell_size, threshold, EDGE_MAX_OPACITY, pairs, opacities, True
        )
        return pairs, opacities
