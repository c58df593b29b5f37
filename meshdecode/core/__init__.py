"""Core functionality for meshdecode."""

from meshdecode.core.config import (
    Config,
    DecoderConfig,
    LoaderConfig,
    LoggingConfig,
    get_default_config,
    load_config,
)
from meshdecode.core.exceptions import (
    ConfigurationError,
    DataError,
    DecodeCancelled,
    FormatError,
    HeaderError,
    MeshDecodeError,
    MeshLoadError,
    ParseWarning,
)
from meshdecode.core.mesh import MeshBuffer, MeshFormat

__all__ = [
    # Config classes
    "Config",
    "DecoderConfig",
    "LoaderConfig",
    "LoggingConfig",
    # Config functions
    "get_default_config",
    "load_config",
    # Mesh
    "MeshBuffer",
    "MeshFormat",
    # Exceptions
    "MeshDecodeError",
    "ConfigurationError",
    "FormatError",
    "HeaderError",
    "DataError",
    "DecodeCancelled",
    "MeshLoadError",
    "ParseWarning",
]
