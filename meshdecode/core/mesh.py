"""Normalized mesh buffer shared by all decoders."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np


class MeshFormat(str, Enum):
    """Tag identifying which decoder produced a buffer."""

    STL_ASCII = "stl-ascii"
    STL_BINARY = "stl-binary"
    PLY_ASCII = "ply-ascii"

    @property
    def is_stl(self) -> bool:
        return self in (MeshFormat.STL_ASCII, MeshFormat.STL_BINARY)


def _frozen(array: Optional[np.ndarray], dtype) -> Optional[np.ndarray]:
    if array is None:
        return None
    array = np.ascontiguousarray(np.asarray(array, dtype=dtype).reshape(-1))
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class MeshBuffer:
    """Flat, immutable triangle-mesh buffers.

    ``positions``, ``normals`` and ``colors`` are flat ``float32`` arrays
    holding one (x, y, z) or (r, g, b) triple per vertex. ``indices`` is a
    flat ``uint32`` array with three entries per triangle and is only set
    for indexed (PLY) meshes; STL meshes own three private vertices per
    triangle.

    Raises:
        ValueError: If the arrays violate the buffer invariants
    """

    positions: np.ndarray
    format: MeshFormat
    normals: Optional[np.ndarray] = None
    colors: Optional[np.ndarray] = None
    indices: Optional[np.ndarray] = None
    warnings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        positions = _frozen(self.positions, np.float32)
        object.__setattr__(self, "positions", positions)
        object.__setattr__(self, "normals", _frozen(self.normals, np.float32))
        object.__setattr__(self, "colors", _frozen(self.colors, np.float32))
        object.__setattr__(self, "indices", _frozen(self.indices, np.uint32))
        object.__setattr__(self, "format", MeshFormat(self.format))
        object.__setattr__(self, "warnings", tuple(self.warnings))

        if positions.size % 3:
            raise ValueError(
                f"positions length {positions.size} is not a multiple of 3"
            )
        for name in ("normals", "colors"):
            values = getattr(self, name)
            if values is not None and values.size != positions.size:
                raise ValueError(
                    f"{name} length {values.size} does not match "
                    f"positions length {positions.size}"
                )
        if self.indices is not None:
            if self.indices.size % 3:
                raise ValueError(
                    f"indices length {self.indices.size} is not a multiple of 3"
                )
            if self.indices.size and int(self.indices.max()) >= self.vertex_count:
                raise ValueError(
                    f"indices out of range [0, {self.vertex_count})"
                )
        elif self.format.is_stl and positions.size % 9:
            raise ValueError(
                f"STL positions length {positions.size} is not a multiple of 9"
            )

    @property
    def vertex_count(self) -> int:
        return self.positions.size // 3

    @property
    def triangle_count(self) -> int:
        if self.indices is not None:
            return self.indices.size // 3
        return self.positions.size // 9

    @property
    def is_empty(self) -> bool:
        return self.triangle_count == 0

    def vertices(self) -> np.ndarray:
        """Return positions as a read-only ``(N, 3)`` view."""
        return self.positions.reshape(-1, 3)

    def faces(self) -> np.ndarray:
        """Return triangle vertex indices as an ``(M, 3)`` array.

        Non-indexed meshes get the implicit ``0, 1, 2, 3, ...`` ordering.
        """
        if self.indices is not None:
            return self.indices.reshape(-1, 3)
        return np.arange(self.vertex_count, dtype=np.uint32).reshape(-1, 3)

    def to_trimesh(self):
        """Hand the buffers to :mod:`trimesh` without merging vertices.

        Returns:
            trimesh.Trimesh sharing this mesh's geometry
        """
        import trimesh

        vertex_colors = None
        if self.colors is not None:
            rgb = np.clip(np.nan_to_num(self.colors.reshape(-1, 3)), 0.0, 1.0)
            alpha = np.ones((self.vertex_count, 1), dtype=np.float32)
            vertex_colors = np.round(np.hstack([rgb, alpha]) * 255).astype(np.uint8)

        vertex_normals = None
        if self.normals is not None:
            vertex_normals = self.normals.reshape(-1, 3)

        return trimesh.Trimesh(
            vertices=self.vertices(),
            faces=self.faces().astype(np.int64),
            vertex_normals=vertex_normals,
            vertex_colors=vertex_colors,
            process=False,
        )
