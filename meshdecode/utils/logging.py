"""Structured logging for meshdecode.

Every logger in the package is a structlog logger backed by stdlib
``logging``. Until an application calls :func:`setup_logging`, events go
through stdlib's own level filtering and handlers, so importing and using
the decoders never writes to stdout.
"""

import logging
import sys
import time
from pathlib import Path
from typing import Any, Optional

import structlog
from structlog.processors import CallsiteParameter

from meshdecode.core.config import LoggingConfig


def configure_default_logging() -> None:
    """Route structlog through stdlib logging without adding handlers.

    Debug events from the decoders are dropped by the stdlib level check.
    Warnings reach whatever handlers the host application installed, or
    stdlib's last-resort stderr handler.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.KeyValueRenderer(key_order=["event", "logger"]),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def _shared_processors(config: LoggingConfig) -> list:
    processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt=config.timestamp_format),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if config.add_caller_info:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    CallsiteParameter.FILENAME,
                    CallsiteParameter.LINENO,
                    CallsiteParameter.FUNC_NAME,
                ],
            ),
        )
    return processors


def _renderer(config: LoggingConfig):
    if config.format == "json":
        return structlog.processors.JSONRenderer()
    if config.format == "console":
        return structlog.dev.ConsoleRenderer(
            colors=config.colorize and sys.stderr.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )
    return structlog.processors.KeyValueRenderer(
        key_order=["timestamp", "level", "logger", "event"],
        drop_missing=True,
    )


def _handler(
    handler: logging.Handler, shared: list, renderer
) -> logging.Handler:
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    return handler


def setup_logging(
    config: Optional[LoggingConfig] = None,
    log_file: Optional[Path] = None,
) -> structlog.stdlib.BoundLogger:
    """Install stderr (and optionally file) handlers on the root logger.

    Meant for applications such as the CLI. Library users who already
    configure stdlib logging do not need to call it.

    Args:
        config: Logging configuration
        log_file: Optional log file, always written as JSON lines

    Returns:
        The ``meshdecode`` logger
    """
    if config is None:
        config = LoggingConfig()

    shared = _shared_processors(config)
    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    # stdout is reserved for command output
    root_logger.addHandler(
        _handler(logging.StreamHandler(sys.stderr), shared, _renderer(config))
    )
    if log_file:
        root_logger.addHandler(
            _handler(
                logging.FileHandler(log_file),
                shared,
                structlog.processors.JSONRenderer(),
            )
        )
    root_logger.setLevel(getattr(logging, config.level))

    logging.getLogger("trimesh").setLevel(logging.WARNING)

    return get_logger("meshdecode")


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a stdlib-backed structlog logger."""
    return structlog.stdlib.get_logger(name)


def log_performance(
    logger: structlog.stdlib.BoundLogger,
    operation: str,
    duration: float,
    **kwargs: Any,
) -> None:
    """Log how long ``operation`` took, with extra metrics.

    Args:
        logger: Logger instance
        operation: Operation name
        duration: Duration in seconds
        **kwargs: Additional metrics, e.g. triangle counts
    """
    logger.info(
        "performance",
        operation=operation,
        duration_ms=round(duration * 1000, 2),
        **kwargs,
    )


class StructuredLogger:
    """Times an operation and logs its start, completion or failure."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        **context: Any,
    ):
        self.logger = logger
        self.operation = operation
        self.context = context
        self._start_time: Optional[float] = None

    def _elapsed_ms(self) -> float:
        return round((time.perf_counter() - self._start_time) * 1000, 2)

    def __enter__(self) -> "StructuredLogger":
        self._start_time = time.perf_counter()
        self.logger.debug(f"{self.operation}_started", **self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None:
            self.logger.debug(
                f"{self.operation}_completed",
                duration_ms=self._elapsed_ms(),
                **self.context,
            )
            return
        self.logger.error(
            f"{self.operation}_failed",
            duration_ms=self._elapsed_ms(),
            error=str(exc_val),
            error_type=exc_type.__name__,
            **self.context,
        )

    def update_context(self, **kwargs: Any) -> None:
        """Add fields to the completion or failure event."""
        self.context.update(kwargs)


if not structlog.is_configured():
    configure_default_logging()
