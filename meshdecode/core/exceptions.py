"""Custom exceptions for meshdecode."""

from pathlib import Path
from typing import Any, Optional


class MeshDecodeError(Exception):
    """Base exception for meshdecode."""

    kind = "error"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(MeshDecodeError):
    """Raised when configuration is invalid."""

    kind = "configuration"


class FormatError(MeshDecodeError):
    """Raised when an STL buffer is too small or truncated."""

    kind = "format"

    def __init__(
        self,
        reason: str,
        declared_triangles: Optional[int] = None,
        available_triangles: Optional[int] = None,
    ):
        details = {}
        if declared_triangles is not None:
            details["declared_triangles"] = declared_triangles
        if available_triangles is not None:
            details["available_triangles"] = available_triangles
        super().__init__(f"Invalid STL data: {reason}", details)
        self.reason = reason
        self.declared_triangles = declared_triangles
        self.available_triangles = available_triangles

    @property
    def is_partial(self) -> bool:
        """True when some, but not all, declared triangles were present."""
        return bool(self.available_triangles) and (
            self.declared_triangles is not None
            and self.available_triangles < self.declared_triangles
        )


class HeaderError(MeshDecodeError):
    """Raised when a PLY header is malformed."""

    kind = "header"

    def __init__(self, reason: str, line: Optional[str] = None):
        message = f"Invalid PLY header: {reason}"
        if line is not None:
            message += f" (line {line!r})"
        super().__init__(message, {"line": line} if line is not None else None)
        self.reason = reason
        self.line = line


class DataError(MeshDecodeError):
    """Raised in strict mode when a PLY data row cannot be parsed."""

    kind = "data"

    def __init__(self, reason: str, row: Optional[int] = None):
        message = f"Invalid PLY data: {reason}"
        if row is not None:
            message += f" at row {row}"
        super().__init__(message, {"row": row} if row is not None else None)
        self.reason = reason
        self.row = row


class DecodeCancelled(MeshDecodeError):
    """Raised when a decode is cancelled through its cancellation token."""

    kind = "cancelled"

    def __init__(self, operation: str, processed: int):
        super().__init__(
            f"{operation} cancelled after {processed} triangles",
            {"processed": processed},
        )
        self.operation = operation
        self.processed = processed


class MeshLoadError(MeshDecodeError):
    """Raised when a mesh file cannot be read from disk."""

    kind = "load"

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Failed to load mesh file '{path}': {reason}")
        self.path = path
        self.reason = reason


class ParseWarning(UserWarning):
    """Soft decoding issue: data was skipped or repaired, not rejected."""

    kind = "parse-warning"
