"""Shared pieces for the format decoders."""

import warnings
from typing import Any, Optional, Protocol

from meshdecode.core.exceptions import DecodeCancelled, ParseWarning
from meshdecode.utils.logging import get_logger

logger = get_logger(__name__)


class CancelToken(Protocol):
    """Anything with an ``is_set()`` method, e.g. :class:`threading.Event`."""

    def is_set(self) -> bool:
        ...


def check_cancelled(
    cancel: Optional[CancelToken], operation: str, processed: int
) -> None:
    """Raise DecodeCancelled if the token has been set."""
    if cancel is not None and cancel.is_set():
        logger.info("decode_cancelled", operation=operation, processed=processed)
        raise DecodeCancelled(operation, processed)


class WarningCollector:
    """Collects soft decoding issues for a single decode call.

    Each message is issued once through :func:`warnings.warn` as a
    :class:`ParseWarning`, logged, and kept for ``MeshBuffer.warnings``.
    Repeated messages with the same key are counted instead of re-issued.
    """

    def __init__(self, source: str):
        self.source = source
        self.messages: list[str] = []
        self._counts: dict[str, int] = {}

    def warn(self, key: str, message: str, **context: Any) -> None:
        count = self._counts.get(key, 0)
        self._counts[key] = count + 1
        if count:
            return
        self.messages.append(message)
        logger.warning("parse_warning", source=self.source, reason=key, **context)
        warnings.warn(message, ParseWarning, stacklevel=4)

    def count(self, key: str) -> int:
        return self._counts.get(key, 0)

    def finalize(self) -> tuple[str, ...]:
        """Return messages, annotated with repeat counts."""
        result = []
        for message, key in zip(self.messages, self._counts):
            repeats = self._counts[key]
            if repeats > 1:
                message = f"{message} ({repeats} occurrences)"
            result.append(message)
        return tuple(result)
