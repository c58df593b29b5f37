"""ASCII STL decoding.

The text is tokenized on whitespace and fed to a small state machine that
walks one facet block at a time::

    facet normal nx ny nz
      outer loop
        vertex x y z
        vertex x y z
        vertex x y z
      endloop
    endfacet

A block that deviates from this shape is dropped and scanning resumes at
the next ``facet`` token. The ``solid``/``endsolid`` wrapper and any other
text outside a block are ignored.
"""

import re
from typing import Optional

import numpy as np

from meshdecode.core.mesh import MeshBuffer, MeshFormat
from meshdecode.decoders.base import CancelToken, WarningCollector, check_cancelled
from meshdecode.utils.logging import get_logger

logger = get_logger(__name__)

_TOKEN = re.compile(r"\S+")
_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# None marks a numeric slot
_VERTEX = ("vertex", None, None, None)
FACET_GRAMMAR = (
    ("facet", "normal", None, None, None, "outer", "loop")
    + _VERTEX * 3
    + ("endloop", "endfacet")
)
VALUES_PER_FACET = 12


def iter_facets(text: str, cancel: Optional[CancelToken] = None):
    """Yield the 12 floats (normal then 3 vertices) of each complete facet.

    Args:
        text: ASCII STL text
        cancel: Optional token checked at the start of every facet

    Raises:
        DecodeCancelled: If the token is set during the scan
    """
    state = 0
    values: list[float] = []
    found = 0

    for match in _TOKEN.finditer(text):
        token = match.group()

        if state:
            expected = FACET_GRAMMAR[state]
            if expected is None:
                if _NUMBER.fullmatch(token):
                    values.append(float(token))
                    state += 1
                    continue
            elif token.lower() == expected:
                state += 1
                if state == len(FACET_GRAMMAR):
                    found += 1
                    yield values
                    state = 0
                    values = []
                continue
            # Partial block; drop it and resynchronize
            state = 0
            values = []

        if token.lower() == "facet":
            check_cancelled(cancel, "stl_ascii_decode", found)
            state = 1


def decode_stl_ascii(
    text: str,
    cancel: Optional[CancelToken] = None,
    warn_on_empty: bool = True,
) -> MeshBuffer:
    """Decode ASCII STL text.

    Malformed blocks are skipped rather than rejected, so this never fails
    on content. Text with no complete facet yields an empty mesh.

    Args:
        text: ASCII STL text
        cancel: Optional cancellation token, e.g. a ``threading.Event``
        warn_on_empty: Issue a ParseWarning when no facet was found

    Returns:
        Non-indexed MeshBuffer with positions and per-vertex normals

    Raises:
        DecodeCancelled: If ``cancel`` is set while scanning
    """
    collector = WarningCollector("stl-ascii")
    flat: list[float] = []
    for facet in iter_facets(text, cancel):
        flat.extend(facet)

    facets = np.asarray(flat, dtype=np.float32).reshape(-1, VALUES_PER_FACET)
    if not len(facets) and warn_on_empty:
        collector.warn("no_facets", "ASCII STL contains no complete facet blocks")

    positions = facets[:, 3:].reshape(-1)
    normals = np.repeat(facets[:, :3], 3, axis=0).reshape(-1)

    logger.debug("stl_ascii_decoded", triangles=len(facets))
    return MeshBuffer(
        positions=positions,
        normals=normals,
        format=MeshFormat.STL_ASCII,
        warnings=collector.finalize(),
    )
