"""Typer CLI entry point for the dependency size analyzer."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from deps_size_analyzer.analyzer import DependencyAnalyzer
from deps_size_analyzer.config import AnalyzerConfig, UnresolvedPolicy
from deps_size_analyzer.exceptions import DependencyResolutionError
from deps_size_analyzer.logging_config import setup_logging
from deps_size_analyzer.report import build_size_tree, format_report

app = typer.Typer(add_completion=False, help="Measure the size of Maven dependency trees.")
console = Console(emoji=False)

CoordinateArg = Annotated[
    str, typer.Argument(help="Gradle-style coordinate, e.g. com.squareup.okhttp3:okhttp:3.12.0")
]
RepoOpt = Annotated[
    Optional[list[str]],
    typer.Option("--repo", "-r", help="Repository URL, repeatable. Defaults to DEPS_SIZE_REPOSITORIES."),
]
SkipOpt = Annotated[
    bool,
    typer.Option("--skip-unresolved", help="Drop dependencies whose version cannot be resolved."),
]
VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Verbose logging.")]
LogLevelOpt = Annotated[Optional[str], typer.Option("--log-level", help="Explicit log level.")]


def _build_config(repos: list[str] | None, workers: int | None, skip_unresolved: bool) -> AnalyzerConfig:
    config = AnalyzerConfig.from_env()
    if repos:
        config.repositories = list(repos)
    if workers is not None:
        config.max_workers = workers
    if skip_unresolved:
        config.unresolved_policy = UnresolvedPolicy.SKIP
    return config


@app.command()
def analyze(
    coordinate: CoordinateArg,
    repo: RepoOpt = None,
    workers: Annotated[
        Optional[int],
        typer.Option("--workers", "-w", help="Maximum concurrent repository requests (1 = sequential)."),
    ] = None,
    skip_unresolved: SkipOpt = False,
    plain: Annotated[bool, typer.Option("--plain", help="Print the plain text report.")] = False,
    verbose: VerboseOpt = False,
    log_level: LogLevelOpt = None,
) -> None:
    """Resolve COORDINATE transitively and print its size tree."""
    setup_logging(verbose, log_level)
    try:
        analyzer = DependencyAnalyzer.from_config(_build_config(repo, workers, skip_unresolved))
        with analyzer.client:
            result = analyzer.analyze(coordinate)
    except (DependencyResolutionError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from None

    if plain:
        typer.echo(format_report(result))
    else:
        console.print(build_size_tree(result))
        console.print(f"Total size: {result.total_size // 1024} Kb ({result.total_size})")


@app.command()
def effective(
    coordinate: CoordinateArg,
    repo: RepoOpt = None,
    skip_unresolved: SkipOpt = False,
    verbose: VerboseOpt = False,
    log_level: LogLevelOpt = None,
) -> None:
    """Print the effective (parent-merged, version-resolved) POM of COORDINATE as JSON."""
    setup_logging(verbose, log_level)
    try:
        analyzer = DependencyAnalyzer.from_config(_build_config(repo, None, skip_unresolved))
        with analyzer.client:
            pom_location, project = analyzer.effective_project(coordinate)
    except (DependencyResolutionError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from None

    typer.echo(pom_location, err=True)
    typer.echo(project.model_dump_json(indent=2, exclude={"parent", "dependency_management"}))


def main() -> None:
    """Console-script entry point."""
    app()
