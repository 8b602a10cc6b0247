"""Diagnostic abstractions shared by the loader and the registries."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings, errors, and structured events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class LoggingEmitter:
    """Emitter that forwards diagnostics to the standard logging module."""

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.warning(message, exc_info=exc)
        else:
            self._logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.error(message, exc_info=exc)
        else:
            self._logger.error(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)

    if name == "fragment_file_loaded":
        path = data.get("path") or "<unknown>"
        count = data.get("fragments", 0)
        index = data.get("index")
        suffix = f" ({index})" if index else ""
        noun = "fragment" if count == 1 else "fragments"
        return f"Loaded {count} {noun} from {path}{suffix}"

    if name == "fragment_file_rejected":
        path = data.get("path") or "<unknown>"
        reason = data.get("reason") or "malformed content"
        return f"Skipped {path}: {reason}"

    if name == "tree_loaded":
        files = data.get("files", 0)
        fragments = data.get("fragments", 0)
        rejected = data.get("rejected", 0)
        details = f", {rejected} rejected" if rejected else ""
        return f"Indexed {fragments} fragments from {files} files{details}"

    return None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "format_event_message",
]
