"""Summary statistics for decoded meshes."""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from meshdecode.core.mesh import MeshBuffer


@dataclass
class MeshSummary:
    """Counts and bounding box of a decoded mesh."""

    format: str
    vertex_count: int
    triangle_count: int
    has_normals: bool
    has_colors: bool
    indexed: bool
    bounds_min: Optional[np.ndarray]
    bounds_max: Optional[np.ndarray]
    warnings: tuple[str, ...]

    @property
    def extents(self) -> Optional[np.ndarray]:
        """Width, height and depth of the bounding box."""
        if self.bounds_min is None:
            return None
        return self.bounds_max - self.bounds_min

    def to_dict(self) -> dict:
        extents = self.extents
        return {
            "format": self.format,
            "vertices": self.vertex_count,
            "triangles": self.triangle_count,
            "normals": self.has_normals,
            "colors": self.has_colors,
            "indexed": self.indexed,
            "bounds": {
                "min": self.bounds_min.tolist() if self.bounds_min is not None else None,
                "max": self.bounds_max.tolist() if self.bounds_max is not None else None,
            },
            "extents": extents.tolist() if extents is not None else None,
            "warnings": list(self.warnings),
        }


def summarize(mesh: MeshBuffer) -> MeshSummary:
    """Compute counts and an axis-aligned bounding box.

    NaN coordinates are ignored. A mesh with no finite vertex has no
    bounds.
    """
    bounds_min = bounds_max = None
    vertices = mesh.vertices()
    finite = vertices[np.isfinite(vertices).all(axis=1)]
    if len(finite):
        bounds_min = finite.min(axis=0)
        bounds_max = finite.max(axis=0)

    return MeshSummary(
        format=mesh.format.value,
        vertex_count=mesh.vertex_count,
        triangle_count=mesh.triangle_count,
        has_normals=mesh.normals is not None,
        has_colors=mesh.colors is not None,
        indexed=mesh.indices is not None,
        bounds_min=bounds_min,
        bounds_max=bounds_max,
        warnings=mesh.warnings,
    )
