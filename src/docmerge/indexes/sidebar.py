"""Sidebar index: module path -> member symbols."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from docmerge.core.registry import FragmentRegistry


class SymbolKind(str, Enum):
    """Item kinds emitted by the documentation generator."""

    MOD = "mod"
    EXTERNCRATE = "externcrate"
    IMPORT = "import"
    STRUCT = "struct"
    ENUM = "enum"
    FN = "fn"
    TYPE = "type"
    STATIC = "static"
    TRAIT = "trait"
    IMPL = "impl"
    TYMETHOD = "tymethod"
    METHOD = "method"
    STRUCTFIELD = "structfield"
    VARIANT = "variant"
    MACRO = "macro"
    PRIMITIVE = "primitive"
    ASSOCIATEDTYPE = "associatedtype"
    CONSTANT = "constant"
    ASSOCIATEDCONSTANT = "associatedconstant"
    UNION = "union"
    FOREIGNTYPE = "foreigntype"
    KEYWORD = "keyword"
    OPAQUE = "opaque"
    ATTR = "attr"
    DERIVE = "derive"
    TRAITALIAS = "traitalias"

    @property
    def label(self) -> str:
        return _LABELS.get(self, self.value.capitalize())


_LABELS = {
    SymbolKind.MOD: "Modules",
    SymbolKind.STRUCT: "Structs",
    SymbolKind.ENUM: "Enums",
    SymbolKind.FN: "Functions",
    SymbolKind.TYPE: "Type Definitions",
    SymbolKind.TRAIT: "Traits",
    SymbolKind.MACRO: "Macros",
    SymbolKind.CONSTANT: "Constants",
    SymbolKind.STATIC: "Statics",
    SymbolKind.UNION: "Unions",
    SymbolKind.PRIMITIVE: "Primitive Types",
    SymbolKind.KEYWORD: "Keywords",
    SymbolKind.ATTR: "Attribute Macros",
    SymbolKind.DERIVE: "Derive Macros",
    SymbolKind.TRAITALIAS: "Trait Aliases",
}


@dataclass(frozen=True, slots=True)
class SidebarItem:
    """A named member of a module, with its one-line summary."""

    kind: SymbolKind
    name: str
    summary: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", SymbolKind(self.kind))


def group_by_kind(items: Iterable[SidebarItem]) -> dict[SymbolKind, list[SidebarItem]]:
    """Group ``items`` by kind, keeping first-seen kind order and item order."""
    groups: dict[SymbolKind, list[SidebarItem]] = {}
    for item in items:
        groups.setdefault(item.kind, []).append(item)
    return groups


class SidebarIndex(FragmentRegistry[SidebarItem]):
    """Registry keyed by module path."""

    def __init__(self) -> None:
        super().__init__(name="sidebar")

    def items(self, module_path: str) -> list[SidebarItem]:
        """Return the flat member list stored for ``module_path``."""
        return super().lookup(module_path)

    def lookup(self, module_path: str) -> dict[SymbolKind, list[SidebarItem]]:  # type: ignore[override]
        """Return members of ``module_path`` grouped by kind."""
        return group_by_kind(self.items(module_path))


__all__ = ["SidebarIndex", "SidebarItem", "SymbolKind", "group_by_kind"]
