"""Terminal rendering hooks for the merged indexes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
import re
from typing import Any

from bs4 import BeautifulSoup
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from docmerge.core.registry import IndexBatch
from docmerge.indexes.implementors import ImplementorItem
from docmerge.indexes.sidebar import SidebarItem, SymbolKind


_WHITESPACE = re.compile(r"\s+")


def markup_to_text(markup: str) -> str:
    """Strip the generator's cross-link markup down to a one-line signature."""
    if "<" not in markup and "&" not in markup:
        return _WHITESPACE.sub(" ", markup).strip()
    soup = BeautifulSoup(markup, "html.parser")
    for br in soup.find_all("br"):
        br.replace_with(" ")
    text = soup.get_text().replace("\xa0", " ")
    return _WHITESPACE.sub(" ", text).strip()


def partition_implementors(
    items: Iterable[ImplementorItem],
) -> tuple[list[ImplementorItem], list[ImplementorItem]]:
    """Split items into explicit and synthetic impls, keeping their order."""
    explicit: list[ImplementorItem] = []
    synthetic: list[ImplementorItem] = []
    for item in items:
        (synthetic if item.is_synthetic else explicit).append(item)
    return explicit, synthetic


def build_implementors_table(trait_path: str, items: Iterable[ImplementorItem]) -> Table:
    """Create a table listing the implementors of ``trait_path``."""
    explicit, synthetic = partition_implementors(items)
    table = Table(title=trait_path, box=box.SIMPLE, show_lines=False)
    table.add_column("Implementation", overflow="fold")
    table.add_column("Types", style="cyan", overflow="fold")

    for item in explicit:
        table.add_row(Text(markup_to_text(item.rendered_signature)), _format_types(item))
    if synthetic:
        table.add_section()
        for item in synthetic:
            table.add_row(
                Text(markup_to_text(item.rendered_signature), style="dim italic"),
                _format_types(item),
            )
    if not explicit and not synthetic:
        table.add_row(Text("No known implementors.", style="dim"), Text(""))
    return table


def build_sidebar_tree(
    module_path: str, groups: Mapping[SymbolKind, Iterable[SidebarItem]]
) -> Tree:
    """Create a tree of a module's members grouped by kind."""
    tree = Tree(Text(module_path, style="bold"))
    for kind, members in groups.items():
        branch = tree.add(Text(kind.label, style="bold green"))
        for item in members:
            label = Text(item.name, style="cyan")
            if item.summary:
                label.append(f"  {item.summary}", style="dim")
            branch.add(label)
    if not groups:
        tree.add(Text("No known members.", style="dim"))
    return tree


def _format_types(item: ImplementorItem) -> Text:
    return Text(", ".join(sorted(item.implementing_type_paths)))


@dataclass(slots=True)
class BatchRecorder:
    """Consumer mirroring the index from the batches it receives.

    The initial batch seeds the mirror; every later batch is appended key by
    key, which reproduces the registry's own concatenation order.
    """

    console: Console | None = None
    batches: list[IndexBatch[Any]] = field(default_factory=list)
    mirror: dict[str, list[Any]] = field(default_factory=dict)

    def __call__(self, batch: IndexBatch[Any]) -> None:
        self.batches.append(batch)
        if batch.initial:
            self.mirror = {key: list(items) for key, items in batch.items()}
        else:
            for key, items in batch.items():
                self.mirror.setdefault(key, []).extend(items)
        if self.console is not None:
            kind = "initial" if batch.initial else "update"
            producers = ", ".join(batch.producers) or "-"
            self.console.print(
                Text.assemble((kind, "bold"), f": {len(batch)} keys from {producers}")
            )


__all__ = [
    "BatchRecorder",
    "build_implementors_table",
    "build_sidebar_tree",
    "markup_to_text",
    "partition_implementors",
]
