"""Configuration models used by the fragment loader.

LoaderConfig

`doc_root` (`Path | None`)
: Root of the generated documentation tree. Implementor fragments are looked
  up under `<doc_root>/<implementors_dir>`, sidebar fragments anywhere below
  the root.

`encoding` (`str`)
: Text encoding used to read fragment files.

`implementors_dir` (`str`)
: Directory, relative to `doc_root`, holding the per-trait implementor files.

`sidebar_filename` (`str`)
: File name the generator gives to per-module sidebar fragments.

`include_implementors` (`bool`)
: Load implementor fragments when scanning a tree.

`include_sidebar` (`bool`)
: Load sidebar fragments when scanning a tree.

`strict` (`bool`)
: Raise on the first malformed fragment file instead of reporting it and
  moving on.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, model_validator


class LoaderConfig(BaseModel):
    """Options controlling how generated fragment files are discovered and read."""

    model_config = ConfigDict(extra="forbid")

    doc_root: Path | None = None
    encoding: str = "utf-8"
    implementors_dir: str = "implementors"
    sidebar_filename: str = "sidebar-items.js"
    include_implementors: bool = True
    include_sidebar: bool = True
    strict: bool = False

    @model_validator(mode="after")
    def check_selection(self) -> LoaderConfig:
        """Reject configurations that would load nothing."""
        if not (self.include_implementors or self.include_sidebar):
            raise ValueError("At least one of include_implementors/include_sidebar must be set.")
        return self


__all__ = ["LoaderConfig"]
