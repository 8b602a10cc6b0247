"""Typed records validating the payloads of generated fragment files."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from docmerge.core.exceptions import FragmentFormatError
from docmerge.indexes.implementors import ImplementorItem
from docmerge.indexes.sidebar import SidebarItem, SymbolKind


def _from_positional(data: Any, names: Sequence[str]) -> Any:
    if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
        if len(data) > len(names):
            raise ValueError(f"Expected at most {len(names)} positional fields, got {len(data)}.")
        return dict(zip(names, data))
    return data


class ImplementorRecord(BaseModel):
    """One implementor entry, in object or positional array form."""

    model_config = ConfigDict(extra="ignore")

    text: str
    synthetic: bool = False
    types: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _coerce_positional(cls, data: Any) -> Any:
        return _from_positional(data, ("text", "synthetic", "types"))

    def to_item(self) -> ImplementorItem:
        return ImplementorItem(
            rendered_signature=self.text,
            is_synthetic=self.synthetic,
            implementing_type_paths=frozenset(self.types),
        )


class SidebarEntryRecord(BaseModel):
    """A sidebar member given as ``[name, summary]`` or a bare name."""

    model_config = ConfigDict(extra="forbid")

    name: str
    summary: str | None = ""

    @model_validator(mode="before")
    @classmethod
    def _coerce_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        return _from_positional(data, ("name", "summary"))


class SidebarRecord(BaseModel):
    """The kind -> members mapping of one module's sidebar file."""

    model_config = ConfigDict(extra="forbid")

    items: dict[SymbolKind, list[SidebarEntryRecord]] = Field(default_factory=dict)

    def to_items(self) -> list[SidebarItem]:
        return [
            SidebarItem(kind=kind, name=entry.name, summary=entry.summary or "")
            for kind, entries in self.items.items()
            for entry in entries
        ]


def validate_implementors(payload: Any, *, producer_id: str) -> list[ImplementorItem]:
    """Validate a producer's implementor list and convert it to items."""
    if not isinstance(payload, list):
        raise FragmentFormatError(
            f"Implementors for '{producer_id}' must be a list, got {type(payload).__name__}."
        )
    items: list[ImplementorItem] = []
    for position, raw in enumerate(payload):
        try:
            record = ImplementorRecord.model_validate(raw)
        except ValidationError as exc:
            raise FragmentFormatError(
                f"Invalid implementor #{position} for '{producer_id}': {exc.errors()[0]['msg']}"
            ) from exc
        items.append(record.to_item())
    return items


def validate_sidebar(payload: Any) -> list[SidebarItem]:
    """Validate a sidebar mapping and flatten it into ordered items."""
    if not isinstance(payload, Mapping):
        raise FragmentFormatError(
            f"Sidebar items must be a mapping, got {type(payload).__name__}."
        )
    try:
        record = SidebarRecord.model_validate({"items": dict(payload)})
    except ValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        raise FragmentFormatError(f"Invalid sidebar entry at '{location}': {error['msg']}") from exc
    return record.to_items()


__all__ = [
    "ImplementorRecord",
    "SidebarEntryRecord",
    "SidebarRecord",
    "validate_implementors",
    "validate_sidebar",
]
