"""Binary STL decoding."""

import numpy as np

from meshdecode.core.exceptions import FormatError
from meshdecode.core.mesh import MeshBuffer, MeshFormat
from meshdecode.decoders.sniffer import STL_HEADER_SIZE
from meshdecode.utils.logging import get_logger

logger = get_logger(__name__)

# Header (80 bytes) + triangle count (uint32)
DATA_OFFSET = STL_HEADER_SIZE + 4

# One 50-byte record per triangle, little-endian
RECORD_DTYPE = np.dtype(
    [
        ("normal", "<f4", (3,)),
        ("vertices", "<f4", (3, 3)),
        ("attributes", "<u2"),
    ]
)


def read_triangle_count(buffer: bytes) -> int:
    """Read the declared triangle count from a binary STL buffer.

    Raises:
        FormatError: If the buffer is too small to hold the count
    """
    if len(buffer) < DATA_OFFSET:
        raise FormatError(
            f"buffer of {len(buffer)} bytes is smaller than the "
            f"{DATA_OFFSET}-byte binary STL header"
        )
    return int(np.frombuffer(buffer, dtype="<u4", count=1, offset=STL_HEADER_SIZE)[0])


def decode_stl_binary(buffer: bytes) -> MeshBuffer:
    """Decode a binary STL buffer.

    Args:
        buffer: Raw file contents

    Returns:
        Non-indexed MeshBuffer with positions and per-vertex normals

    Raises:
        FormatError: If the buffer is shorter than its declared size
    """
    count = read_triangle_count(buffer)
    expected = DATA_OFFSET + RECORD_DTYPE.itemsize * count

    if len(buffer) < expected:
        available = (len(buffer) - DATA_OFFSET) // RECORD_DTYPE.itemsize
        raise FormatError(
            f"header declares {count} triangles ({expected} bytes) but only "
            f"{len(buffer)} bytes are present ({available} complete triangles)",
            declared_triangles=count,
            available_triangles=available,
        )
    if len(buffer) > expected:
        logger.debug("stl_trailing_bytes", count=len(buffer) - expected)

    if count:
        records = np.frombuffer(
            buffer, dtype=RECORD_DTYPE, count=count, offset=DATA_OFFSET
        )
    else:
        records = np.empty(0, dtype=RECORD_DTYPE)

    positions = records["vertices"].reshape(-1)
    normals = np.repeat(records["normal"], 3, axis=0).reshape(-1)

    logger.debug("stl_binary_decoded", triangles=count)
    return MeshBuffer(
        positions=positions,
        normals=normals,
        format=MeshFormat.STL_BINARY,
    )
