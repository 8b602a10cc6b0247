"""Merge independently generated documentation index fragments."""

from __future__ import annotations

from docmerge.core.config import LoaderConfig
from docmerge.core.diagnostics import DiagnosticEmitter, LoggingEmitter
from docmerge.core.exceptions import DocmergeError, FragmentFormatError, FragmentLoadError
from docmerge.core.registry import (
    Consumer,
    Fragment,
    FragmentRegistry,
    IndexBatch,
    RegistryState,
)
from docmerge.indexes import (
    ImplementorIndex,
    ImplementorItem,
    SidebarIndex,
    SidebarItem,
    SymbolKind,
    group_by_kind,
)
from docmerge.loader import FragmentLoader, LoadReport
from docmerge.session import (
    DocIndexSession,
    attach_implementors,
    attach_sidebar,
    get_session,
    register_implementors,
    register_sidebar_items,
    reset_session,
)
from docmerge.version import get_version


__version__ = get_version()

__all__ = [
    "Consumer",
    "DiagnosticEmitter",
    "DocIndexSession",
    "DocmergeError",
    "Fragment",
    "FragmentFormatError",
    "FragmentLoadError",
    "FragmentLoader",
    "FragmentRegistry",
    "ImplementorIndex",
    "ImplementorItem",
    "IndexBatch",
    "LoadReport",
    "LoaderConfig",
    "LoggingEmitter",
    "RegistryState",
    "SidebarIndex",
    "SidebarItem",
    "SymbolKind",
    "__version__",
    "attach_implementors",
    "attach_sidebar",
    "get_session",
    "get_version",
    "group_by_kind",
    "register_implementors",
    "register_sidebar_items",
    "reset_session",
]
