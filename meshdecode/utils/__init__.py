"""Utility functions for meshdecode."""

from meshdecode.utils.logging import (
    configure_default_logging,
    setup_logging,
    get_logger,
    log_performance,
    StructuredLogger,
)

__all__ = [
    "configure_default_logging",
    "setup_logging",
    "get_logger",
    "log_performance",
    "StructuredLogger",
]
