from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Final

import typer
from pydantic import ValidationError

from query_scanner.config import ScannerConfig
from query_scanner.models.report import AnalysisReport, FileReport, RankedCall
from .base import analyze_directory, get_loader

app = typer.Typer(
    name="query-scanner",
    add_completion=False,
    no_args_is_help=True,
    help="Find embedded SQL and rank call sites across a C# code base.",
)

DEFAULT_ROOT: Final[Path] = Path(".")
DEFAULT_TOP_CALLS: Final[int] = ScannerConfig.model_fields["global_top_calls"].default


def _configure_logging(log_level: str) -> None:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_config(
    extension: str | None, workers: int | None, exclude_dirs: list[str] | None, top: int
) -> ScannerConfig:
    overrides: dict[str, object] = {"global_top_calls": top}
    if extension is not None:
        overrides["file_extension"] = extension
    if workers is not None:
        overrides["workers"] = workers
    if exclude_dirs:
        overrides["exclude_dir_names"] = frozenset(exclude_dirs)
    try:
        return ScannerConfig(**overrides)
    except ValidationError as e:
        typer.secho(f"Invalid configuration: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from e


def _check_root(root: Path) -> Path:
    if not root.is_dir():
        typer.secho(f"Directory does not exist: {root}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return root


def _echo_file_report(report: FileReport) -> None:
    typer.secho(f"\n--- File: {report.file_name} ---", bold=True)

    if report.dependencies:
        typer.echo("\nDependencies:")
        for dependency in report.dependencies:
            typer.echo(f"  - {dependency}")

    typer.echo(f"\nCalls in this file: {report.call_count}")
    for group in report.top_calls:
        typer.echo(f"  - {group.name}: {group.count} calls")

    if not report.queries:
        return
    typer.echo("\nSQL calls:")
    for query in report.queries:
        typer.echo(f"\n  Line {query.line_number} - {query.tag}:")
        typer.echo(f"    {query.preview}")
        if query.contains_exec:
            typer.secho("    ! Contains EXEC/EXECUTE", fg=typer.colors.YELLOW)
        if query.stored_procedure is not None:
            typer.secho(
                f"    * Stored procedure: {query.stored_procedure}", fg=typer.colors.CYAN
            )


def _echo_ranking(ranking: list[RankedCall]) -> None:
    typer.secho("\n=== CALL SUMMARY ===", bold=True)
    for entry in ranking:
        typer.echo(f"\n{entry.name} - called {entry.total} times:")
        for call in entry.examples:
            typer.echo(f"  - {call.file_name}:{call.line_number}")
        if entry.remaining:
            typer.echo(f"  ... and {entry.remaining} more")


def _write_report(report: AnalysisReport, output_path: Path | None) -> None:
    if output_path is None:
        return
    try:
        loader = get_loader(output_path)
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from e
    loader.load(report)
    typer.secho(f"Report written to {output_path}", fg=typer.colors.GREEN)


RootArgument = Annotated[
    Path,
    typer.Argument(help="Directory to scan recursively.", file_okay=False, resolve_path=True),
]
ExtensionOption = Annotated[
    str | None,
    typer.Option(
        "--extension",
        "-e",
        help="Source file extension to scan. Defaults to $QUERY_SCANNER_EXTENSION or .cs.",
        show_default=False,
    ),
]
WorkersOption = Annotated[
    int | None,
    typer.Option(
        "--workers",
        "-w",
        min=1,
        help="Files scanned in parallel. Defaults to $QUERY_SCANNER_WORKERS or 1.",
        show_default=False,
    ),
]
ExcludeDirOption = Annotated[
    list[str] | None,
    typer.Option(
        "--exclude-dir",
        "-x",
        help="Directory name to skip, e.g. bin or obj. Repeatable; nothing is skipped by default.",
    ),
]
TopOption = Annotated[
    int, typer.Option("--top", min=1, help="Number of call names in the global ranking.")
]
OutputOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Write the full report to a .json or .yaml file.",
        dir_okay=False,
        writable=True,
        resolve_path=True,
    ),
]
LogLevelOption = Annotated[
    str, typer.Option("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...).")
]


@app.command("scan")
def scan(
    root: RootArgument = DEFAULT_ROOT,
    extension: ExtensionOption = None,
    workers: WorkersOption = None,
    exclude_dirs: ExcludeDirOption = None,
    top: TopOption = DEFAULT_TOP_CALLS,
    output_path: OutputOption = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Print dependencies, SQL findings and call counts per file, then the global ranking.

    Args:
        root: Directory to scan.
        extension: Source file extension.
        workers: Worker threads used for scanning.
        exclude_dirs: Directory names skipped while walking the tree.
        top: Size of the global call ranking.
        output_path: Optional report file.
        log_level: Logging level name.
    """
    _configure_logging(log_level)
    root = _check_root(root)
    config = _build_config(extension, workers, exclude_dirs, top)

    typer.secho("=== Query Scanner ===", bold=True)
    typer.echo(f"Analyzing directory: {root}")

    report = analyze_directory(root, config)
    for file_report in report.files:
        _echo_file_report(file_report)
    _echo_ranking(report.ranking)
    _write_report(report, output_path)

    typer.secho("\n\nAnalysis complete!", fg=typer.colors.GREEN)


@app.command("rank")
def rank(
    root: RootArgument = DEFAULT_ROOT,
    extension: ExtensionOption = None,
    workers: WorkersOption = None,
    exclude_dirs: ExcludeDirOption = None,
    top: TopOption = DEFAULT_TOP_CALLS,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Print only the cross-file call ranking.

    Args:
        root: Directory to scan.
        extension: Source file extension.
        workers: Worker threads used for scanning.
        exclude_dirs: Directory names skipped while walking the tree.
        top: Size of the global call ranking.
        log_level: Logging level name.
    """
    _configure_logging(log_level)
    root = _check_root(root)
    config = _build_config(extension, workers, exclude_dirs, top)

    report = analyze_directory(root, config)
    _echo_ranking(report.ranking)
    typer.echo(f"\n{report.total_calls} calls in {len(report.files)} files")


def main() -> None:
    """Entry point for executing the Typer application."""
    app()


if __name__ == "__main__":
    main()
