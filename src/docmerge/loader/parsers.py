"""Turn the text of generated fragment files into registry fragments."""

from __future__ import annotations

from pathlib import Path, PurePath
import re

from docmerge.core.exceptions import FragmentFormatError, FragmentLoadError
from docmerge.core.registry import Fragment
from docmerge.indexes.implementors import ImplementorItem
from docmerge.indexes.sidebar import SidebarItem

from .jsliteral import extract_literal
from .records import validate_implementors, validate_sidebar


PATH_SEPARATOR = "::"

_IMPLEMENTORS_ASSIGNMENT = re.compile(
    r"""implementors\s*\[\s*(?P<quote>["'])(?P<producer>[^"']+)(?P=quote)\s*\]\s*="""
)
_IMPLEMENTORS_FROM_ENTRIES = re.compile(r"implementors\s*=\s*Object\.fromEntries\s*\(")
_SIDEBAR_CALL = re.compile(r"initSidebarItems\s*\(")
_SIDEBAR_ASSIGNMENT = re.compile(r"SIDEBAR_ITEMS\s*=")


def trait_path_from_file(path: PurePath, implementors_root: PurePath) -> str:
    """Map ``implementors/<crate>/<mod>/trait.<Name>.js`` to ``crate::mod::Name``."""
    try:
        relative = path.relative_to(implementors_root)
    except ValueError as exc:
        raise FragmentFormatError(f"{path} is not below {implementors_root}.") from exc
    *modules, filename = relative.parts
    if not modules or not filename.startswith("trait.") or not filename.endswith(".js"):
        raise FragmentFormatError(f"{relative} does not name a trait implementors file.")
    name = filename[len("trait.") : -len(".js")]
    if not name:
        raise FragmentFormatError(f"{relative} has an empty trait name.")
    return PATH_SEPARATOR.join([*modules, name])


def module_path_from_file(path: PurePath, doc_root: PurePath) -> str:
    """Map ``<crate>/<mod>/sidebar-items.js`` to ``crate::mod``."""
    try:
        relative = path.relative_to(doc_root)
    except ValueError as exc:
        raise FragmentFormatError(f"{path} is not below {doc_root}.") from exc
    modules = relative.parts[:-1]
    if not modules:
        raise FragmentFormatError(f"{relative} is not inside a crate directory.")
    return PATH_SEPARATOR.join(modules)


def parse_implementors(text: str, *, trait_path: str) -> list[Fragment[ImplementorItem]]:
    """Return one fragment per producer assigned in an implementors file."""
    fragments: list[Fragment[ImplementorItem]] = []

    for match in _IMPLEMENTORS_ASSIGNMENT.finditer(text):
        producer = match.group("producer")
        payload, _ = extract_literal(text, match.end())
        items = validate_implementors(payload, producer_id=producer)
        fragments.append(Fragment(producer, {trait_path: items}))

    from_entries = _IMPLEMENTORS_FROM_ENTRIES.search(text)
    if from_entries is not None:
        payload, _ = extract_literal(text, from_entries.end())
        if not isinstance(payload, list):
            raise FragmentFormatError("Object.fromEntries expects a list of [producer, items] pairs.")
        for pair in payload:
            if not (isinstance(pair, list) and len(pair) == 2 and isinstance(pair[0], str)):
                raise FragmentFormatError("Implementor entries must be [producer, items] pairs.")
            items = validate_implementors(pair[1], producer_id=pair[0])
            fragments.append(Fragment(pair[0], {trait_path: items}))

    if not fragments and "implementors" not in text:
        raise FragmentFormatError("No implementors table found.")
    return fragments


def parse_sidebar(text: str, *, module_path: str, producer_id: str) -> Fragment[SidebarItem]:
    """Return the single fragment described by a sidebar-items file."""
    match = _SIDEBAR_CALL.search(text) or _SIDEBAR_ASSIGNMENT.search(text)
    if match is None:
        raise FragmentFormatError("No sidebar items table found.")
    payload, _ = extract_literal(text, match.end())
    return Fragment(producer_id, {module_path: validate_sidebar(payload)})


def read_fragment_text(path: Path, *, encoding: str = "utf-8") -> str:
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise FragmentLoadError(f"Failed to read fragment file {path}: {exc}") from exc


__all__ = [
    "PATH_SEPARATOR",
    "module_path_from_file",
    "parse_implementors",
    "parse_sidebar",
    "read_fragment_text",
    "trait_path_from_file",
]
