"""Discover generated fragment files and feed them into a session."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
import logging
from pathlib import Path

from docmerge.core.config import LoaderConfig
from docmerge.core.diagnostics import DiagnosticEmitter, LoggingEmitter
from docmerge.core.exceptions import DocmergeError, FragmentLoadError, exception_messages
from docmerge.core.registry import Fragment, register_all
from docmerge.indexes.implementors import ImplementorItem
from docmerge.indexes.sidebar import SidebarItem
from docmerge.session import DocIndexSession

from .parsers import (
    module_path_from_file,
    parse_implementors,
    parse_sidebar,
    read_fragment_text,
    trait_path_from_file,
)


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LoadReport:
    """Outcome of loading a documentation tree."""

    files: list[Path] = field(default_factory=list)
    fragments: int = 0
    rejected: dict[Path, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.rejected


class FragmentLoader:
    """Read fragment files and register their contents, rejecting malformed ones."""

    def __init__(
        self,
        session: DocIndexSession,
        *,
        config: LoaderConfig | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.session = session
        self.config = config or LoaderConfig()
        self.emitter = emitter or LoggingEmitter(logger_obj=logger)

    def load_implementors_file(
        self, path: Path, *, trait_path: str | None = None
    ) -> list[Fragment[ImplementorItem]]:
        """Register every producer's fragment found in one trait file."""
        if trait_path is None:
            trait_path = trait_path_from_file(path, self._implementors_root(path))
        text = read_fragment_text(path, encoding=self.config.encoding)
        fragments = parse_implementors(text, trait_path=trait_path)
        register_all(self.session.implementors, fragments)
        self._loaded(path, len(fragments), "implementors")
        return fragments

    def load_sidebar_file(
        self,
        path: Path,
        *,
        module_path: str | None = None,
        producer_id: str | None = None,
    ) -> Fragment[SidebarItem]:
        """Register the fragment described by one sidebar-items file."""
        if module_path is None:
            module_path = module_path_from_file(path, self._doc_root(path))
        if producer_id is None:
            producer_id = module_path.split("::", 1)[0]
        text = read_fragment_text(path, encoding=self.config.encoding)
        fragment = parse_sidebar(text, module_path=module_path, producer_id=producer_id)
        self.session.sidebar.register(fragment)
        self._loaded(path, 1, "sidebar")
        return fragment

    def discover(self, doc_root: Path | None = None) -> tuple[list[Path], list[Path]]:
        """Return implementor and sidebar files below ``doc_root`` in sorted order."""
        root = self._require_root(doc_root)
        implementors: list[Path] = []
        sidebar: list[Path] = []
        implementors_root = root / self.config.implementors_dir
        if self.config.include_implementors and implementors_root.is_dir():
            implementors = sorted(implementors_root.rglob("trait.*.js"))
        if self.config.include_sidebar:
            sidebar = sorted(
                path
                for path in root.rglob(self.config.sidebar_filename)
                if implementors_root not in path.parents
            )
        return implementors, sidebar

    def load_tree(self, doc_root: Path | None = None) -> LoadReport:
        """Load every fragment file of a documentation tree into the session."""
        root = self._require_root(doc_root)
        implementors, sidebar = self.discover(root)
        report = LoadReport()

        implementors_root = root / self.config.implementors_dir
        for path in implementors:
            self._load_one(report, path, partial(self._tree_implementors, root=implementors_root))
        for path in sidebar:
            self._load_one(report, path, partial(self._tree_sidebar, root=root))

        self.emitter.event(
            "tree_loaded",
            {
                "root": str(root),
                "files": len(report.files),
                "fragments": report.fragments,
                "rejected": len(report.rejected),
            },
        )
        return report

    def _tree_implementors(self, path: Path, *, root: Path) -> int:
        return len(self.load_implementors_file(path, trait_path=trait_path_from_file(path, root)))

    def _tree_sidebar(self, path: Path, *, root: Path) -> int:
        self.load_sidebar_file(path, module_path=module_path_from_file(path, root))
        return 1

    def _load_one(self, report: LoadReport, path: Path, load: Callable[[Path], int]) -> None:
        try:
            count = load(path)
        except DocmergeError as exc:
            if self.config.strict:
                raise
            messages = exception_messages(exc)
            reason = messages[0] if messages else type(exc).__name__
            report.rejected[path] = reason
            if self.emitter.debug_enabled:
                chain = " <- ".join(messages) or reason
                self.emitter.warning(f"Skipping fragment file {path}: {chain}", exc)
            else:
                self.emitter.warning(f"Skipping fragment file {path}: {reason}")
            self.emitter.event("fragment_file_rejected", {"path": str(path), "reason": reason})
            return
        report.files.append(path)
        report.fragments += count

    def _loaded(self, path: Path, count: int, index: str) -> None:
        self.emitter.event(
            "fragment_file_loaded", {"path": str(path), "fragments": count, "index": index}
        )

    def _require_root(self, doc_root: Path | None) -> Path:
        root = doc_root or self.config.doc_root
        if root is None:
            raise FragmentLoadError("No documentation root configured.")
        root = Path(root)
        if not root.is_dir():
            raise FragmentLoadError(f"Documentation root does not exist: {root}")
        return root

    def _doc_root(self, path: Path) -> Path:
        if self.config.doc_root is None:
            raise FragmentLoadError(
                f"Cannot derive the module path of {path} without a documentation root."
            )
        return Path(self.config.doc_root)

    def _implementors_root(self, path: Path) -> Path:
        if self.config.doc_root is not None:
            return Path(self.config.doc_root) / self.config.implementors_dir
        for parent in path.parents:
            if parent.name == self.config.implementors_dir:
                return parent
        raise FragmentLoadError(f"Cannot locate the implementors directory above {path}.")


__all__ = ["FragmentLoader", "LoadReport"]
