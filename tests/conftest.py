"""Shared test fixtures and configuration."""

import shutil
import struct
import tempfile
from pathlib import Path
from typing import Callable, Generator, Optional, Sequence

import numpy as np
import pytest
import trimesh

from meshdecode.core import Config

Triangle = tuple[Sequence[float], Sequence[Sequence[float]]]


def pack_binary_stl(
    triangles: Sequence[Triangle],
    header: bytes = b"meshdecode test",
    declared: Optional[int] = None,
) -> bytes:
    """Pack (normal, (v0, v1, v2)) tuples into a binary STL buffer."""
    count = len(triangles) if declared is None else declared
    data = header.ljust(80, b"\0")[:80] + struct.pack("<I", count)
    for normal, vertices in triangles:
        data += struct.pack("<3f", *normal)
        for vertex in vertices:
            data += struct.pack("<3f", *vertex)
        data += struct.pack("<H", 0)
    return data


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path)


@pytest.fixture
def test_config() -> Config:
    """Create a test configuration."""
    return Config(
        decoder={"strict_ply": False},
        logging={"level": "DEBUG", "format": "plain", "colorize": False},
    )


@pytest.fixture
def binary_stl_factory() -> Callable[..., bytes]:
    """Return the binary STL packing helper."""
    return pack_binary_stl


@pytest.fixture
def two_triangles() -> list[Triangle]:
    """Two triangles forming a unit square in the z=0 plane."""
    return [
        ((0.0, 0.0, 1.0), ((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0))),
        ((0.0, 0.0, 1.0), ((0.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0))),
    ]


@pytest.fixture
def simple_box_mesh() -> trimesh.Trimesh:
    """Create a simple box mesh for testing."""
    return trimesh.creation.box(extents=[1, 1, 1])


@pytest.fixture
def ascii_stl_text() -> str:
    """Three facets with irregular spacing and line breaks."""
    return (
        "solid irregular\n"
        "facet normal 0 0 1\n  outer loop\n"
        "    vertex 0 0 0\n    vertex 1 0 0\n    vertex 1 1 0\n"
        "  endloop\nendfacet\n"
        "facet   normal\t0.0 0.0 -1.0 outer loop vertex 0 0 0\n"
        "vertex 1 1 0 vertex 0 1 0 endloop endfacet\n"
        "\n\n   facet normal -1.5e-3 +2.0 .5\n\touter\n\tloop\n"
        "vertex   1E2 -2.5e+1 3\r\n"
        "vertex 4 5 6\r\n"
        "vertex 7 8 9\r\n"
        "endloop\n endfacet\n"
        "endsolid irregular\n"
    )


@pytest.fixture
def quad_ply_text() -> str:
    """Unit square as four vertices and two triangles, no colors."""
    return (
        "ply\n"
        "format ascii 1.0\n"
        "comment square\n"
        "element vertex 4\n"
        "property float x\n"
        "property float y\n"
        "property float z\n"
        "element face 2\n"
        "property list uchar int vertex_indices\n"
        "end_header\n"
        "0 0 0\n"
        "1 0 0\n"
        "1 1 0\n"
        "0 1 0\n"
        "3 0 1 2\n"
        "3 0 2 3\n"
    )


@pytest.fixture
def color_ply_text() -> str:
    """Single colored triangle."""
    return (
        "ply\n"
        "format ascii 1.0\n"
        "element vertex 3\n"
        "property float x\n"
        "property float y\n"
        "property float z\n"
        "property uchar red\n"
        "property uchar green\n"
        "property uchar blue\n"
        "element face 1\n"
        "property list uchar int vertex_indices\n"
        "end_header\n"
        "0 0 0 255 0 0\n"
        "1 0 0 0 255 0\n"
        "0 1 0 0 0 51\n"
        "3 0 1 2\n"
    )


@pytest.fixture
def sample_stl_path(temp_dir: Path, simple_box_mesh: trimesh.Trimesh) -> Path:
    """Create a binary STL file."""
    stl_path = temp_dir / "test_box.stl"
    simple_box_mesh.export(stl_path)
    return stl_path


@pytest.fixture
def sample_ply_path(temp_dir: Path, quad_ply_text: str) -> Path:
    """Create an ASCII PLY file."""
    ply_path = temp_dir / "square.ply"
    ply_path.write_text(quad_ply_text)
    return ply_path


@pytest.fixture
def box_triangles(simple_box_mesh: trimesh.Trimesh) -> np.ndarray:
    """Flat float32 vertex coordinates of every box triangle."""
    return simple_box_mesh.triangles.astype(np.float32).reshape(-1)


# Markers for different test categories
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 1 second"
    )
