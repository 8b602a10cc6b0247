"""Core building blocks shared by both documentation indexes."""

from __future__ import annotations

from .config import LoaderConfig
from .diagnostics import DiagnosticEmitter, LoggingEmitter
from .exceptions import DocmergeError, FragmentFormatError, FragmentLoadError
from .registry import Consumer, Fragment, FragmentRegistry, IndexBatch, RegistryState


__all__ = [
    "Consumer",
    "DiagnosticEmitter",
    "DocmergeError",
    "Fragment",
    "FragmentFormatError",
    "FragmentLoadError",
    "FragmentRegistry",
    "IndexBatch",
    "LoaderConfig",
    "LoggingEmitter",
    "RegistryState",
]
