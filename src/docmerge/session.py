"""Page-lifetime session bundling the implementor and sidebar indexes.

Generated fragment files and the rendering layer meet here. Code that owns
its lifecycle builds a :class:`DocIndexSession` and hands it to both sides;
the module-level functions bind the same entry points to a process-wide
default session for callers that only know a global name.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from docmerge.core.registry import Consumer, Fragment
from docmerge.indexes.implementors import ImplementorIndex, ImplementorItem
from docmerge.indexes.sidebar import SidebarIndex, SidebarItem


@dataclass(slots=True)
class DocIndexSession:
    """Both indexes for one documentation page."""

    implementors: ImplementorIndex = field(default_factory=ImplementorIndex)
    sidebar: SidebarIndex = field(default_factory=SidebarIndex)

    def register_implementors(
        self, producer_id: str, entries: Mapping[str, Iterable[ImplementorItem]]
    ) -> Fragment[ImplementorItem]:
        fragment: Fragment[ImplementorItem] = Fragment(producer_id, entries)
        self.implementors.register(fragment)
        return fragment

    def register_sidebar_items(
        self, producer_id: str, entries: Mapping[str, Iterable[SidebarItem]]
    ) -> Fragment[SidebarItem]:
        fragment: Fragment[SidebarItem] = Fragment(producer_id, entries)
        self.sidebar.register(fragment)
        return fragment

    def attach_implementors(self, consumer: Consumer) -> None:
        self.implementors.attach(consumer)

    def attach_sidebar(self, consumer: Consumer) -> None:
        self.sidebar.attach(consumer)


_SESSION = DocIndexSession()


def get_session() -> DocIndexSession:
    """Return the process-wide default session."""
    return _SESSION


def reset_session() -> DocIndexSession:
    """Replace the default session with a fresh one and return it."""
    global _SESSION
    _SESSION = DocIndexSession()
    return _SESSION


def register_implementors(
    producer_id: str, entries: Mapping[str, Iterable[ImplementorItem]]
) -> Fragment[ImplementorItem]:
    """Ingestion entry point for implementor fragments."""
    return _SESSION.register_implementors(producer_id, entries)


def register_sidebar_items(
    producer_id: str, entries: Mapping[str, Iterable[SidebarItem]]
) -> Fragment[SidebarItem]:
    """Ingestion entry point for sidebar fragments."""
    return _SESSION.register_sidebar_items(producer_id, entries)


def attach_implementors(consumer: Consumer) -> None:
    """Attachment entry point for the implementor list renderer."""
    _SESSION.attach_implementors(consumer)


def attach_sidebar(consumer: Consumer) -> None:
    """Attachment entry point for the sidebar renderer."""
    _SESSION.attach_sidebar(consumer)


__all__ = [
    "DocIndexSession",
    "attach_implementors",
    "attach_sidebar",
    "get_session",
    "register_implementors",
    "register_sidebar_items",
    "reset_session",
]
