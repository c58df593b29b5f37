"""STL encoding detection.

An STL file is treated as ASCII when its 80-byte header, decoded as text
and trimmed, starts with ``solid`` and does not mention ``binary``.
Everything else is binary.

The rule is ambiguous: binary exporters are free to write ``solid ...``
into their header, and such files are classified as ASCII. This matches
the classification the three.js loaders use, so it is kept as is rather
than refined with file-size checks that would reclassify existing files.
"""

from meshdecode.core.exceptions import FormatError
from meshdecode.core.mesh import MeshFormat
from meshdecode.utils.logging import get_logger

logger = get_logger(__name__)

STL_HEADER_SIZE = 80


def read_stl_header(buffer: bytes) -> str:
    """Return the trimmed text of the 80-byte STL header.

    Raises:
        FormatError: If the buffer is shorter than the header
    """
    if len(buffer) < STL_HEADER_SIZE:
        raise FormatError(
            f"buffer of {len(buffer)} bytes is smaller than the "
            f"{STL_HEADER_SIZE}-byte STL header"
        )
    return bytes(buffer[:STL_HEADER_SIZE]).decode("utf-8", errors="replace").strip()


def sniff_stl(buffer: bytes) -> MeshFormat:
    """Classify an STL buffer as ASCII or binary.

    Args:
        buffer: Raw file contents

    Returns:
        MeshFormat.STL_ASCII or MeshFormat.STL_BINARY

    Raises:
        FormatError: If the buffer is shorter than 80 bytes
    """
    header = read_stl_header(buffer)
    if header.startswith("solid") and "binary" not in header:
        fmt = MeshFormat.STL_ASCII
    else:
        fmt = MeshFormat.STL_BINARY
    logger.debug("stl_sniffed", format=fmt.value, size=len(buffer))
    return fmt
