from __future__ import annotations

import io

from rich.console import Console

from docmerge.core.registry import Fragment, FragmentRegistry
from docmerge.indexes import ImplementorItem, SidebarItem, SymbolKind, group_by_kind
from docmerge.render import (
    BatchRecorder,
    build_implementors_table,
    build_sidebar_tree,
    markup_to_text,
    partition_implementors,
)


SIGNATURE = (
    'impl&lt;__DB:&nbsp;<a class="trait" href="diesel/backend/trait.Backend.html">Backend</a>'
    ', __ST&gt; <a class="trait" href="diesel/deserialize/trait.Queryable.html">Queryable</a>'
    '&lt;__ST, __DB&gt; for <a class="struct" href="syncstorage/struct.Batch.html">Batch</a>'
    ' <span class="where fmt-newline">where<br>&nbsp;&nbsp;&nbsp;&nbsp;__DB: Backend,&nbsp;</span>'
)


def _export(renderable: object) -> str:
    console = Console(record=True, width=200, file=io.StringIO())
    console.print(renderable)
    return console.export_text()


def test_markup_to_text_strips_links_and_entities() -> None:
    assert markup_to_text(SIGNATURE) == (
        "impl<__DB: Backend, __ST> Queryable<__ST, __DB> for Batch where __DB: Backend,"
    )
    assert markup_to_text("  impl  Send for Foo ") == "impl Send for Foo"


def test_partition_keeps_relative_order() -> None:
    a = ImplementorItem("impl A")
    b = ImplementorItem("impl B", is_synthetic=True)
    c = ImplementorItem("impl C")

    assert partition_implementors([a, b, c]) == ([a, c], [b])


def test_implementors_table_lists_explicit_then_synthetic() -> None:
    items = [
        ImplementorItem("impl Send for Auto", True, frozenset({"x::Auto"})),
        ImplementorItem(SIGNATURE, False, frozenset({"syncstorage::Batch"})),
    ]

    output = _export(build_implementors_table("diesel::deserialize::Queryable", items))

    assert "diesel::deserialize::Queryable" in output
    assert output.index("for Batch") < output.index("impl Send for Auto")
    assert "syncstorage::Batch" in output


def test_implementors_table_for_unknown_trait() -> None:
    output = _export(build_implementors_table("a::Missing", []))

    assert "No known implementors." in output


def test_sidebar_tree_uses_kind_labels() -> None:
    groups = group_by_kind(
        [
            SidebarItem(SymbolKind.STRUCT, "App", "Application builder."),
            SidebarItem(SymbolKind.MACRO, "header"),
        ]
    )

    output = _export(build_sidebar_tree("actix_web", groups))

    assert "Structs" in output
    assert "Macros" in output
    assert "App  Application builder." in output
    assert "No known members." in _export(build_sidebar_tree("empty", {}))


def test_batch_recorder_mirrors_registry_contents() -> None:
    registry: FragmentRegistry[str] = FragmentRegistry()
    recorder = BatchRecorder()
    registry.register(Fragment("a", {"K": ["a1"]}))
    registry.register(Fragment("b", {"L": ["b1"]}))
    registry.attach(recorder)
    registry.register(Fragment("c", {"K": ["c1"], "M": ["c2"]}))

    assert recorder.mirror == registry.snapshot()
    assert [batch.initial for batch in recorder.batches] == [True, False]


def test_batch_recorder_reports_to_console() -> None:
    console = Console(record=True, width=120, file=io.StringIO())
    recorder = BatchRecorder(console=console)
    registry: FragmentRegistry[str] = FragmentRegistry()
    registry.attach(recorder)
    registry.register(Fragment("crate2", {"TraitX": ["i2"], "TraitY": ["i3"]}))

    output = console.export_text()
    assert "initial: 0 keys from -" in output
    assert "update: 2 keys from crate2" in output
