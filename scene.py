# scene.py
"""
The rendering contract between the engine and whatever draws it.

A renderer receives the field and its edges once per tick. Scene flattens
them into plain circles and lines for renderers that do not want to deal with
the NumPy-backed containers.
"""
from dataclasses import dataclass, field as dataclass_field
from typing import Any, Dict, List, Protocol
from particle import ParticleField
from proximity import Edges


class SceneRenderer(Protocol):
    """Anything that can draw one frame of the particle field."""

    def draw(self, field: ParticleField, edges: Edges) -> None:
        ...


@dataclass(frozen=True)
class Scene:
    particles: List[Dict[str, float]] = dataclass_field(default_factory=list)
    edges: List[Dict[str, float]] = dataclass_field(default_factory=list)

    @classmethod
    def from_field(cls, field: ParticleField, edges: Edges) -> "Scene":
        positions = field.positions
        particles = [
            {"x": float(x), "y": float(y), "size": float(size), "opacity": float(opacity)}
            for (x, y), size, opacity in zip(positions, field.sizes, field.opacities)
        ]
        lines = [
            {
                "x1": float(positions[i, 0]), "y1": float(positions[i, 1]),
                "x2": float(positions[j, 0]), "y2": float(positions[j, 1]),
                "opacity": float(opacity),
            }
            for (i, j), opacity in zip(edges.pairs, edges.opacities)
        ]
        return cls(particles=particles, edges=lines)

    def to_dict(self) -> Dict[str, Any]:
        return {"particles": list(self.particles), "edges": list(self.edges)}
