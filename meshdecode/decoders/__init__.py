"""Format decoders for meshdecode.

The public entry points are :func:`decode_stl` and :func:`decode_ply`;
:func:`decode` routes to one of them by format name.
"""

from typing import Callable, Optional, Union

from meshdecode.core.config import DecoderConfig
from meshdecode.core.mesh import MeshBuffer, MeshFormat
from meshdecode.decoders.base import CancelToken
from meshdecode.decoders.ply_ascii import PlyHeader, decode_ply_ascii, parse_ply_header
from meshdecode.decoders.sniffer import sniff_stl
from meshdecode.decoders.stl_ascii import decode_stl_ascii
from meshdecode.decoders.stl_binary import decode_stl_binary

Buffer = Union[bytes, bytearray, memoryview]


def _as_text(data: Union[str, Buffer]) -> str:
    if isinstance(data, str):
        return data
    return bytes(data).decode("utf-8", errors="replace")


def decode_stl(
    buffer: Union[str, Buffer],
    *,
    cancel: Optional[CancelToken] = None,
    config: Optional[DecoderConfig] = None,
) -> MeshBuffer:
    """Decode an STL file, ASCII or binary.

    The encoding is sniffed once from the 80-byte header and the matching
    decoder runs on the whole buffer.

    Args:
        buffer: Raw file contents
        cancel: Optional cancellation token for ASCII scanning
        config: Decoder configuration

    Returns:
        Non-indexed MeshBuffer tagged ``stl-ascii`` or ``stl-binary``

    Raises:
        FormatError: If the buffer is too small or truncated
        DecodeCancelled: If ``cancel`` is set during an ASCII scan
    """
    config = config or DecoderConfig()
    if isinstance(buffer, str):
        buffer = buffer.encode("utf-8")
    if sniff_stl(buffer) is MeshFormat.STL_ASCII:
        return decode_stl_ascii(
            _as_text(buffer), cancel=cancel, warn_on_empty=config.warn_on_empty
        )
    return decode_stl_binary(buffer)


def decode_ply(
    text: Union[str, Buffer],
    *,
    strict: Optional[bool] = None,
    config: Optional[DecoderConfig] = None,
) -> MeshBuffer:
    """Decode an ASCII PLY file.

    Args:
        text: File contents, as text or UTF-8 bytes
        strict: Override ``config.strict_ply``
        config: Decoder configuration

    Returns:
        Indexed MeshBuffer tagged ``ply-ascii``

    Raises:
        HeaderError: If the header is malformed
        DataError: In strict mode, if a body row is malformed
    """
    config = config or DecoderConfig()
    if strict is None:
        strict = config.strict_ply
    return decode_ply_ascii(_as_text(text), strict=strict)


_DECODERS: dict[str, Callable[..., MeshBuffer]] = {
    "stl": decode_stl,
    "ply": decode_ply,
}

SUPPORTED_FORMATS = tuple(sorted(_DECODERS))


def decode(
    data: Union[str, Buffer],
    fmt: Union[str, MeshFormat],
    *,
    config: Optional[DecoderConfig] = None,
) -> MeshBuffer:
    """Decode ``data`` with the decoder registered for ``fmt``.

    Args:
        data: File contents
        fmt: ``"stl"``, ``"ply"`` (a leading dot is accepted) or a MeshFormat
        config: Decoder configuration

    Raises:
        ValueError: If the format is not supported
    """
    if isinstance(fmt, MeshFormat):
        key = "stl" if fmt.is_stl else "ply"
    else:
        key = fmt.lower().lstrip(".")
    decoder = _DECODERS.get(key)
    if decoder is None:
        raise ValueError(
            f"Unsupported mesh format {fmt!r}. "
            f"Supported formats: {', '.join(SUPPORTED_FORMATS)}."
        )
    return decoder(data, config=config)


__all__ = [
    "CancelToken",
    "PlyHeader",
    "SUPPORTED_FORMATS",
    "decode",
    "decode_ply",
    "decode_ply_ascii",
    "decode_stl",
    "decode_stl_ascii",
    "decode_stl_binary",
    "parse_ply_header",
    "sniff_stl",
]
