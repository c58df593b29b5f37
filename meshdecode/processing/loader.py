"""Mesh file loading: read bytes from disk and hand them to a decoder."""

import concurrent.futures
import os
import time
from pathlib import Path
from typing import Optional, Union

from meshdecode.core.config import DecoderConfig, LoaderConfig
from meshdecode.core.exceptions import MeshLoadError
from meshdecode.core.mesh import MeshBuffer
from meshdecode.decoders import SUPPORTED_FORMATS, decode
from meshdecode.utils.logging import StructuredLogger, get_logger, log_performance

logger = get_logger(__name__)


class MeshLoader:
    """Loads STL and PLY files into MeshBuffers."""

    EXTENSIONS = tuple(f".{fmt}" for fmt in SUPPORTED_FORMATS)

    def __init__(
        self,
        config: Optional[LoaderConfig] = None,
        decoder_config: Optional[DecoderConfig] = None,
    ):
        """Initialize mesh loader.

        Args:
            config: File size limits and batch settings
            decoder_config: Configuration passed to every decode call
        """
        self.config = config or LoaderConfig()
        self.decoder_config = decoder_config or DecoderConfig()

    def load(self, file_path: Union[str, Path]) -> MeshBuffer:
        """Read and decode a mesh file, dispatching on its extension.

        Args:
            file_path: Path to a ``.stl`` or ``.ply`` file

        Returns:
            Decoded MeshBuffer

        Raises:
            MeshLoadError: If the file cannot be read
            FormatError: If an STL file is truncated
            HeaderError: If a PLY header is malformed
        """
        file_path = Path(file_path)
        self._validate_file(file_path)

        try:
            data = file_path.read_bytes()
        except OSError as e:
            raise MeshLoadError(file_path, str(e)) from e

        with StructuredLogger(
            logger, "mesh_decode", file=file_path.name, size=len(data)
        ) as ctx:
            mesh = decode(data, file_path.suffix, config=self.decoder_config)
            ctx.update_context(
                format=mesh.format.value,
                triangles=mesh.triangle_count,
                warnings=len(mesh.warnings),
            )
        return mesh

    def _validate_file(self, file_path: Path) -> None:
        """Validate file before loading.

        Raises:
            MeshLoadError: If file validation fails
        """
        if not file_path.exists():
            raise MeshLoadError(file_path, "File does not exist")

        if not file_path.is_file():
            raise MeshLoadError(file_path, "Path is not a file")

        if file_path.suffix.lower() not in self.EXTENSIONS:
            raise MeshLoadError(
                file_path,
                f"Unsupported file extension: {file_path.suffix or '(none)'}",
            )

        file_size = file_path.stat().st_size

        if file_size == 0:
            raise MeshLoadError(file_path, "File is empty")

        if file_size > self.config.max_file_size:
            raise MeshLoadError(
                file_path,
                f"File too large ({file_size:,} bytes > "
                f"{self.config.max_file_size:,} byte limit)",
            )

    def load_batch(
        self,
        paths: list[Union[str, Path]],
        parallel: Optional[bool] = None,
        max_workers: Optional[int] = None,
    ) -> list[MeshBuffer]:
        """Load several files, optionally on a thread pool.

        Decoding shares no state between calls, so files can be decoded
        concurrently. Results are returned in input order; the first
        failure is re-raised.

        Args:
            paths: Files to load
            parallel: Override ``config.parallel``
            max_workers: Override ``config.max_workers``

        Returns:
            One MeshBuffer per path
        """
        if parallel is None:
            parallel = self.config.parallel

        start = time.perf_counter()
        if not parallel or len(paths) < 2:
            meshes = [self.load(path) for path in paths]
        else:
            if max_workers is None:
                max_workers = self.config.max_workers or min(
                    os.cpu_count() or 1, len(paths), 4
                )
            with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = [executor.submit(self.load, path) for path in paths]
                meshes = [future.result() for future in futures]

        log_performance(
            logger,
            "load_batch",
            time.perf_counter() - start,
            files=len(meshes),
            triangles=sum(mesh.triangle_count for mesh in meshes),
            parallel=parallel,
        )
        return meshes


def load_mesh(
    file_path: Union[str, Path],
    decoder_config: Optional[DecoderConfig] = None,
) -> MeshBuffer:
    """Convenience function to load a mesh file.

    Args:
        file_path: Path to a ``.stl`` or ``.ply`` file
        decoder_config: Optional decoder configuration

    Returns:
        Decoded MeshBuffer
    """
    loader = MeshLoader(decoder_config=decoder_config)
    return loader.load(file_path)
