"""Concrete index instantiations of the fragment registry."""

from __future__ import annotations

from .implementors import ImplementorIndex, ImplementorItem
from .sidebar import SidebarIndex, SidebarItem, SymbolKind, group_by_kind


__all__ = [
    "ImplementorIndex",
    "ImplementorItem",
    "SidebarIndex",
    "SidebarItem",
    "SymbolKind",
    "group_by_kind",
]
