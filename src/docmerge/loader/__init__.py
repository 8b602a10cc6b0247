"""Readers for the fragment files emitted by the documentation generator."""

from __future__ import annotations

from .jsliteral import js_literal_to_json, parse_js_literal
from .loader import FragmentLoader, LoadReport
from .parsers import (
    module_path_from_file,
    parse_implementors,
    parse_sidebar,
    trait_path_from_file,
)
from .records import ImplementorRecord, SidebarEntryRecord, SidebarRecord


__all__ = [
    "FragmentLoader",
    "ImplementorRecord",
    "LoadReport",
    "SidebarEntryRecord",
    "SidebarRecord",
    "js_literal_to_json",
    "module_path_from_file",
    "parse_implementors",
    "parse_js_literal",
    "parse_sidebar",
    "trait_path_from_file",
]
