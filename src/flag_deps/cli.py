"""Command-line interface for the flag dependency analyzer."""

import json
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import REPORT_FORMATS, get_settings
from .exceptions import FlagDepsError
from .extractor import extract_dependencies, load_flag_export
from .graph_builder import build_graph_description, render_graph
from .report import (
    build_relationship_report,
    export_json,
    render_html,
    render_markdown,
    write_report,
)
from .stats import DependencyStats, compute_stats

app = typer.Typer(
    name="flag-deps",
    help="Discover and report dependencies between feature flags"
)
console = Console()

REPORT_FILES = {
    "html": ("flag_dependencies_report.html", render_html),
    "markdown": ("flag_dependencies_report.md", render_markdown),
}


def print_summary(stats: DependencyStats):
    """Print totals and the top flags by in/out degree."""
    console.print(f"Total number of flags with dependencies: {stats.total_flags_involved}")
    console.print(f"Total number of dependencies: {stats.total_edges}")

    if stats.top_in_degree:
        table = Table(title="Flags that most other flags depend on")
        table.add_column("Flag")
        table.add_column("Dependent flags", justify="right")
        for name, count in stats.top_in_degree:
            table.add_row(escape(name), str(count))
        console.print(table)

    if stats.top_out_degree:
        table = Table(title="Flags that depend on most other flags")
        table.add_column("Flag")
        table.add_column("Depends on", justify="right")
        for name, count in stats.top_out_degree:
            table.add_row(escape(name), str(count))
        console.print(table)


@app.command()
def analyze(
    input_file: Path = typer.Argument(
        ...,
        help="Path to the flag export JSON file",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output directory for the graph and report (default: FLAG_DEPS_OUTPUT_DIR or 'output')"
    ),
    report_format: Optional[str] = typer.Option(
        None,
        "--format", "-f",
        help="Relationship report format: html or markdown"
    ),
    graph: bool = typer.Option(
        True,
        "--graph/--no-graph",
        help="Render the dependency graph image"
    ),
    json_export: bool = typer.Option(
        False,
        "--json",
        help="Also write a JSON export of relationships and statistics"
    ),
):
    """Analyze a flag export and report dependencies between flags."""
    try:
        settings = get_settings()
    except FlagDepsError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    output_dir = output_dir or Path(settings.output_dir)
    report_format = (report_format or settings.report_format).lower()
    if report_format not in REPORT_FORMATS:
        console.print(f"[red]Error:[/red] Unknown report format: {report_format}")
        raise typer.Exit(code=1)

    console.print(f"[bold green]Analyzing:[/bold green] {escape(str(input_file))}")

    try:
        flags = load_flag_export(input_file)
    except FlagDepsError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    dependencies = extract_dependencies(flags)
    if not dependencies:
        console.print("[yellow]No dependencies found between flags.[/yellow]")
        return

    stats = compute_stats(dependencies, top_n=settings.top_n)
    print_summary(stats)

    console.print(f"[bold blue]Output:[/bold blue] {escape(str(output_dir))}")
    failed = False

    # The graph and the report are independent; one failing does not stop the other
    if graph:
        # headless backend unless the operator chose one
        os.environ.setdefault("MPLBACKEND", "Agg")
        try:
            description = build_graph_description(dependencies)
            render_graph(
                description,
                output_dir / "flag_dependencies.png",
                dpi=settings.image_dpi,
                console=console,
            )
        except FlagDepsError as e:
            console.print(f"[red]Graph rendering failed:[/red] {escape(str(e))}")
            failed = True

    try:
        report = build_relationship_report(dependencies, flags)
        file_name, renderer = REPORT_FILES[report_format]
        report_path = write_report(renderer(report), output_dir / file_name)
        console.print(f"  ✓ Report saved to {report_path}")

        if json_export:
            json_path = write_report(
                json.dumps(export_json(report, stats), indent=2),
                output_dir / "flag_dependencies.json",
            )
            console.print(f"  ✓ JSON saved to {json_path}")
    except FlagDepsError as e:
        console.print(f"[red]Report generation failed:[/red] {escape(str(e))}")
        failed = True

    if failed:
        raise typer.Exit(code=2)


@app.command()
def version():
    """Show version information."""
    from . import __version__
    console.print("[bold]Feature Flag Dependency Analyzer[/bold]")
    console.print(f"Version: {__version__}")


if __name__ == "__main__":
    app()
