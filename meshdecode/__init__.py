"""meshdecode - Decode STL and PLY triangle meshes into flat buffers."""

from meshdecode.core import (
    DataError,
    DecodeCancelled,
    FormatError,
    HeaderError,
    MeshBuffer,
    MeshDecodeError,
    MeshFormat,
    MeshLoadError,
    ParseWarning,
)
from meshdecode.decoders import decode, decode_ply, decode_stl, sniff_stl
from meshdecode.processing import load_mesh

__version__ = "0.1.0"

__all__ = [
    "MeshBuffer",
    "MeshFormat",
    "MeshDecodeError",
    "FormatError",
    "HeaderError",
    "DataError",
    "DecodeCancelled",
    "MeshLoadError",
    "ParseWarning",
    "decode",
    "decode_ply",
    "decode_stl",
    "sniff_stl",
    "load_mesh",
]
