"""ASCII PLY decoding.

The decoder is a single forward pass over the lines of the file: the
header is read up to ``end_header``, then the body rows of each declared
element are consumed in declaration order. ``vertex`` rows provide
positions (and colors when a vertex property name contains ``red``),
``face`` rows provide triangle indices, and rows of any other element are
skipped. Blank lines in the body are not rows: they are skipped
without counting toward an element's declared row count.

Row-level problems are handled according to ``strict``. In lenient mode
they are repaired or skipped and reported as :class:`ParseWarning`; in
strict mode they raise :class:`DataError`. Header problems always raise
:class:`HeaderError`.
"""

import math
from dataclasses import dataclass, field
from typing import Iterator, Optional

import numpy as np

from meshdecode.core.exceptions import DataError, HeaderError
from meshdecode.core.mesh import MeshBuffer, MeshFormat
from meshdecode.decoders.base import WarningCollector
from meshdecode.utils.logging import get_logger

logger = get_logger(__name__)

# Neutral color for vertices whose row lacks r, g, b fields
DEFAULT_COLOR = (1.0, 1.0, 1.0)


@dataclass
class PlyElement:
    """An ``element`` declaration and the properties that follow it."""

    name: str
    count: int
    properties: list[str] = field(default_factory=list)


@dataclass
class PlyHeader:
    """Parsed PLY header."""

    elements: list[PlyElement]
    body_start: int
    encoding: str = "ascii"

    def element(self, name: str) -> Optional[PlyElement]:
        for element in self.elements:
            if element.name == name:
                return element
        return None

    @property
    def vertex_count(self) -> int:
        vertex = self.element("vertex")
        return vertex.count if vertex else 0

    @property
    def face_count(self) -> int:
        face = self.element("face")
        return face.count if face else 0

    @property
    def has_colors(self) -> bool:
        """True when any vertex property line contains ``red``.

        This matches ``red`` as well as names such as ``diffuse_red``.
        """
        vertex = self.element("vertex")
        if vertex is None:
            return False
        return any("red" in prop for prop in vertex.properties)


def _parse_count(tokens: list[str], line: str) -> int:
    if len(tokens) < 3:
        raise HeaderError(f"element {tokens[1]!r} is missing its count", line)
    try:
        count = int(tokens[2])
    except ValueError:
        raise HeaderError(
            f"element {tokens[1]!r} has a non-integer count", line
        ) from None
    if count < 0:
        raise HeaderError(f"element {tokens[1]!r} has a negative count", line)
    return count


def parse_ply_header(lines: list[str]) -> PlyHeader:
    """Parse the header section of an ASCII PLY file.

    Args:
        lines: All lines of the file

    Returns:
        PlyHeader with element declarations in file order

    Raises:
        HeaderError: If ``end_header`` is missing, an element line lacks a
            valid count, or the file is not ASCII encoded
    """
    elements: list[PlyElement] = []
    encoding = "ascii"

    for index, raw in enumerate(lines):
        line = raw.strip()
        tokens = line.split()
        if not tokens:
            continue
        keyword = tokens[0]

        if keyword == "end_header":
            return PlyHeader(elements=elements, body_start=index + 1, encoding=encoding)
        if keyword == "format":
            encoding = tokens[1] if len(tokens) > 1 else ""
            if encoding != "ascii":
                raise HeaderError(
                    f"unsupported PLY encoding {encoding!r}; only ascii is accepted",
                    line,
                )
        elif keyword == "element":
            if len(tokens) < 2:
                raise HeaderError("element declaration is missing its name", line)
            elements.append(PlyElement(name=tokens[1], count=_parse_count(tokens, line)))
        elif keyword == "property" and elements:
            elements[-1].properties.append(line)

    raise HeaderError("end_header was never encountered")


def _body_rows(lines: list[str], start: int) -> Iterator[str]:
    for raw in lines[start:]:
        line = raw.strip()
        if line:
            yield line


class _PlyBodyReader:
    """Consumes body rows for one decode call."""

    def __init__(self, header: PlyHeader, strict: bool, collector: WarningCollector):
        self.header = header
        self.strict = strict
        self.collector = collector
        self.has_colors = header.has_colors
        self.positions: list[float] = []
        self.colors: list[float] = []
        self.indices: list[int] = []
        self.vertex_count = 0
        self.row = 0

    def _fail(self, key: str, reason: str) -> None:
        """Raise in strict mode, otherwise record a warning."""
        if self.strict:
            raise DataError(reason, self.row)
        self.collector.warn(key, reason, row=self.row)

    def _float(self, token: str) -> float:
        try:
            return float(token)
        except ValueError:
            self._fail("non_numeric", f"non-numeric vertex field {token!r}")
            return math.nan

    def _channel(self, token: str) -> float:
        value = self._float(token)
        if math.isnan(value):
            return 1.0
        if not 0.0 <= value <= 255.0:
            self._fail("color_range", f"color channel {token!r} outside [0, 255]")
            value = min(max(value, 0.0), 255.0)
        return value / 255.0

    def read_vertex(self, fields: list[str]) -> None:
        coords = [self._float(token) for token in fields[:3]]
        if len(coords) < 3:
            self._fail("short_vertex", f"vertex row has {len(fields)} of 3 coordinates")
            coords.extend([math.nan] * (3 - len(coords)))
        self.positions.extend(coords)

        if self.has_colors:
            if len(fields) >= 6:
                self.colors.extend(self._channel(token) for token in fields[3:6])
            else:
                self._fail("missing_color", "vertex row is missing r, g, b fields")
                self.colors.extend(DEFAULT_COLOR)
        self.vertex_count += 1

    def read_face(self, fields: list[str]) -> None:
        try:
            size = float(fields[0])
        except ValueError:
            size = math.nan
        if not size.is_integer():
            self._fail("bad_face", f"face vertex count {fields[0]!r} is not an integer")
            return
        size = int(size)

        if size != 3:
            self.collector.warn(
                "non_triangle",
                f"skipped face with {size} vertices; only triangles are kept",
                row=self.row,
            )
            return

        try:
            corners = [int(token) for token in fields[1:4]]
        except ValueError:
            self._fail("bad_face", f"face indices {fields[1:4]!r} are not integers")
            return
        if len(corners) < 3:
            self._fail("bad_face", f"face row lists {len(corners)} of 3 indices")
            return
        if any(i < 0 or i >= self.vertex_count for i in corners):
            self._fail(
                "face_range",
                f"face indices {corners} out of range [0, {self.vertex_count})",
            )
            return
        self.indices.extend(corners)

    def read(self, rows: Iterator[str]) -> None:
        readers = {"vertex": self.read_vertex, "face": self.read_face}

        for element in self.header.elements:
            handler = readers.get(element.name)
            consumed = 0
            while consumed < element.count:
                line = next(rows, None)
                if line is None:
                    break
                self.row += 1
                consumed += 1
                if handler is not None:
                    handler(line.split())

            if consumed < element.count:
                self._fail(
                    "truncated",
                    f"expected {element.count} {element.name} rows, found {consumed}",
                )
                return

    def build(self) -> MeshBuffer:
        return MeshBuffer(
            positions=np.asarray(self.positions, dtype=np.float32),
            colors=np.asarray(self.colors, dtype=np.float32) if self.has_colors else None,
            indices=np.asarray(self.indices, dtype=np.uint32),
            format=MeshFormat.PLY_ASCII,
            warnings=self.collector.finalize(),
        )


def decode_ply_ascii(text: str, strict: bool = False) -> MeshBuffer:
    """Decode ASCII PLY text into an indexed mesh.

    Args:
        text: ASCII PLY text
        strict: Raise DataError on malformed rows instead of repairing them

    Returns:
        Indexed MeshBuffer with positions, indices and optional colors

    Raises:
        HeaderError: If the header is malformed
        DataError: In strict mode, if a body row is malformed
    """
    lines = text.splitlines()
    header = parse_ply_header(lines)

    reader = _PlyBodyReader(header, strict, WarningCollector("ply-ascii"))
    reader.read(_body_rows(lines, header.body_start))

    logger.debug(
        "ply_ascii_decoded",
        vertices=reader.vertex_count,
        triangles=len(reader.indices) // 3,
        colors=reader.has_colors,
    )
    return reader.build()
