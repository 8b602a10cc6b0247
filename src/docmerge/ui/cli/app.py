"""Typer application wiring for the docmerge CLI."""

from __future__ import annotations

from pathlib import Path

from rich import box
from rich.table import Table
from rich.traceback import Traceback
import typer

from docmerge.core.config import LoaderConfig
from docmerge.core.exceptions import DocmergeError, exception_hint
from docmerge.loader import FragmentLoader, LoadReport
from docmerge.render import BatchRecorder, build_implementors_table, build_sidebar_tree
from docmerge.session import DocIndexSession
from docmerge.version import get_version

from .diagnostics import CliEmitter
from .state import debug_enabled, emit_error, emit_warning, get_cli_state, set_cli_state


app = typer.Typer(
    help="Merge generated documentation index fragments and query them.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)

DocRootArgument = typer.Argument(
    ...,
    metavar="DOC_ROOT",
    help="Root of the generated documentation tree.",
    exists=True,
    file_okay=False,
    dir_okay=True,
    resolve_path=True,
)

StrictOption = typer.Option(
    False,
    "--strict/--lenient",
    help="Abort on the first malformed fragment file instead of skipping it.",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(get_version())
        raise typer.Exit(code=0)


@app.callback()
def _app_root(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug/--no-debug",
        help="Show full tracebacks when an unexpected error occurs.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print the installed version and exit.",
    ),
) -> None:
    ctx.obj = set_cli_state(verbosity=verbose, debug=debug)


def _load(
    doc_root: Path,
    *,
    strict: bool,
    implementors: bool = True,
    sidebar: bool = True,
) -> tuple[DocIndexSession, LoadReport]:
    config = LoaderConfig(
        doc_root=doc_root,
        strict=strict,
        include_implementors=implementors,
        include_sidebar=sidebar,
    )
    session = DocIndexSession()
    loader = FragmentLoader(session, config=config, emitter=CliEmitter())
    try:
        report = loader.load_tree()
    except DocmergeError as exc:
        summary = "Failed to load the documentation index"
        hint = exception_hint(exc)
        emit_error(f"{summary}: {hint}" if hint else summary, exception=exc)
        raise typer.Exit(code=1) from exc
    if report.rejected:
        emit_warning(f"{len(report.rejected)} fragment file(s) were skipped.")
    return session, report


@app.command(name="implementors")
def implementors_command(
    doc_root: Path = DocRootArgument,
    trait_path: str = typer.Argument(..., help="Trait path, e.g. 'serde::Serialize'."),
    strict: bool = StrictOption,
) -> None:
    """List the known implementors of a trait."""
    session, _ = _load(doc_root, strict=strict, sidebar=False)
    items = session.implementors.lookup(trait_path)
    get_cli_state().console.print(build_implementors_table(trait_path, items))


@app.command(name="sidebar")
def sidebar_command(
    doc_root: Path = DocRootArgument,
    module_path: str = typer.Argument(..., help="Module path, e.g. 'actix_web::http'."),
    strict: bool = StrictOption,
) -> None:
    """Show the members of a module grouped by kind."""
    session, _ = _load(doc_root, strict=strict, implementors=False)
    groups = session.sidebar.lookup(module_path)
    get_cli_state().console.print(build_sidebar_tree(module_path, groups))


@app.command(name="summary")
def summary_command(
    doc_root: Path = DocRootArgument,
    strict: bool = StrictOption,
) -> None:
    """Summarise both indexes as seen by an attached consumer."""
    session, report = _load(doc_root, strict=strict)
    state = get_cli_state()
    recorders = {
        "implementors": BatchRecorder(console=state.console if state.verbosity >= 2 else None),
        "sidebar": BatchRecorder(console=state.console if state.verbosity >= 2 else None),
    }
    session.attach_implementors(recorders["implementors"])
    session.attach_sidebar(recorders["sidebar"])

    table = Table(title="Documentation index", box=box.SIMPLE)
    table.add_column("Index", style="bold")
    table.add_column("Keys", justify="right")
    table.add_column("Items", justify="right")
    table.add_column("Fragments", justify="right")
    table.add_column("Producers", justify="right")
    for name, registry in (("implementors", session.implementors), ("sidebar", session.sidebar)):
        mirror = recorders[name].mirror
        table.add_row(
            name,
            str(len(mirror)),
            str(sum(len(items) for items in mirror.values())),
            str(registry.fragment_count),
            str(len(set(registry.producers()))),
        )
    state.console.print(table)
    if report.rejected:
        for path, reason in sorted(report.rejected.items()):
            emit_warning(f"{path}: {reason}")


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - defensive catch-all
        state = get_cli_state()
        if state.show_tracebacks:
            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
