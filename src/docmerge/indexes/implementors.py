"""Trait implementors index: trait path -> implementing-type descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field

from docmerge.core.registry import FragmentRegistry


@dataclass(frozen=True, slots=True)
class ImplementorItem:
    """One ``impl`` block as rendered by the documentation generator."""

    rendered_signature: str
    is_synthetic: bool = False
    implementing_type_paths: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "implementing_type_paths", frozenset(self.implementing_type_paths))


class ImplementorIndex(FragmentRegistry[ImplementorItem]):
    """Registry keyed by trait path."""

    def __init__(self) -> None:
        super().__init__(name="implementors")

    def implementors_of_type(self, type_path: str) -> list[str]:
        """Return trait paths with at least one impl naming ``type_path``."""
        return [
            trait_path
            for trait_path, items in self.snapshot().items()
            if any(type_path in item.implementing_type_paths for item in items)
        ]


__all__ = ["ImplementorIndex", "ImplementorItem"]
