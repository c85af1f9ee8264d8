"""
a11yreport CLI - Consolidated accessibility report generation.

Commands:
    a11yreport                 Same as `a11yreport generate`
    a11yreport generate        Aggregate tool results into a consolidated report
    a11yreport history         List previously written reports
    a11yreport archive         Move old snapshots into reports/archive/
    a11yreport dedupe          Delete snapshots that repeat newer results
    a11yreport stats           Show storage totals for recorded reports
    a11yreport version         Show version
"""

import logging
from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import AggregatorConfig
from .errors import ReportWriteError
from .index import ReportIndex, archive_old_reports, dedupe_reports, storage_stats
from .pipeline import generate_consolidated_report

app = typer.Typer(help="Merge axe, Pa11y, Lighthouse and IBM Equal Access results into one report")
console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _run_generate(
    reports_dir: Path | None,
    test_url: str | None,
    wcag_version: str | None,
    verbose: bool,
) -> None:
    _configure_logging(verbose)
    config = AggregatorConfig.from_env().with_overrides(
        reports_dir=reports_dir, test_url=test_url, wcag_version=wcag_version
    )

    console.print("\n[bold blue]Starting accessibility report aggregation...[/bold blue]")

    try:
        result = generate_consolidated_report(config)
    except ReportWriteError as e:
        err_console.print(f"\n[bold red]Error generating consolidated report:[/bold red] {e}")
        raise typer.Exit(1)

    summary = result.report.summary
    console.print(f"Report saved: {result.written.file_name}")
    if not result.indexed:
        console.print("[yellow]Report index could not be updated (see log).[/yellow]")
    console.print("[bold green]Consolidated accessibility report generated successfully![/bold green]")
    console.print(
        f"Total violations found: {summary.total_violations} "
        f"({summary.critical_issues} critical)"
    )


# =============================================================================
# DEFAULT
# =============================================================================


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """Run `generate` when no command is given."""
    if ctx.invoked_subcommand is None:
        _run_generate(None, None, None, verbose=False)


# =============================================================================
# GENERATE
# =============================================================================


@app.command()
def generate(
    reports_dir: Path = typer.Option(None, help="Directory with *-results.json files (default: $A11Y_REPORTS_DIR or ./reports)"),
    test_url: str = typer.Option(None, help="URL recorded in the report metadata"),
    wcag_version: str = typer.Option(None, help="WCAG version recorded in the report metadata"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Aggregate tool results into a consolidated report."""
    _run_generate(reports_dir, test_url, wcag_version, verbose)


# =============================================================================
# HISTORY
# =============================================================================


@app.command()
def history(
    reports_dir: Path = typer.Option(None, help="Reports directory"),
    limit: int = typer.Option(20, help="Maximum number of reports to show (0 = all)"),
    since: datetime = typer.Option(None, help="Only reports written at or after this time (UTC if no offset)"),
    include_archived: bool = typer.Option(True, "--include-archived/--exclude-archived", help="Show archived reports"),
):
    """List previously written consolidated reports."""
    _configure_logging(False)
    config = AggregatorConfig.from_env().with_overrides(reports_dir=reports_dir)
    entries = ReportIndex.for_dir(config.reports_dir).recent(
        limit=limit, since=since, include_archived=include_archived
    )

    if not entries:
        console.print(f"[yellow]No reports recorded in {config.reports_dir}[/yellow]")
        return

    table = Table(title="Consolidated Reports")
    table.add_column("Timestamp", style="bold")
    table.add_column("Violations", justify="right")
    table.add_column("Critical", justify="right")
    table.add_column("File")

    for entry in entries:
        critical = f"[red]{entry.critical_issues}[/red]" if entry.critical_issues else "0"
        name = f"{entry.file_name} [dim](archived)[/dim]" if entry.archived else entry.file_name
        table.add_row(entry.timestamp, str(entry.violation_count), critical, name)

    console.print(table)


# =============================================================================
# ARCHIVE
# =============================================================================


@app.command()
def archive(
    reports_dir: Path = typer.Option(None, help="Reports directory"),
    days: int = typer.Option(None, min=0, help="Archive reports older than this many days (default: $A11Y_ARCHIVE_DAYS or 30)"),
):
    """Move old report snapshots into the archive directory."""
    _configure_logging(False)
    config = AggregatorConfig.from_env().with_overrides(reports_dir=reports_dir, archive_days=days)
    moved = archive_old_reports(config.reports_dir, days_old=config.archive_days)

    if moved:
        console.print(f"[green]Archived {len(moved)} report(s) older than {config.archive_days} days[/green]")
    else:
        console.print(f"No reports older than {config.archive_days} days")


# =============================================================================
# DEDUPE / STATS
# =============================================================================


@app.command()
def dedupe(
    reports_dir: Path = typer.Option(None, help="Reports directory"),
):
    """Delete snapshots whose results match a newer snapshot."""
    _configure_logging(False)
    config = AggregatorConfig.from_env().with_overrides(reports_dir=reports_dir)
    removed = dedupe_reports(config.reports_dir)

    if removed:
        console.print(f"[green]Removed {len(removed)} duplicate report(s)[/green]")
        for name in removed:
            console.print(f"  [dim]{name}[/dim]")
    else:
        console.print("No duplicate reports found")


@app.command()
def stats(
    reports_dir: Path = typer.Option(None, help="Reports directory"),
):
    """Show how many reports are recorded and how much space they take."""
    _configure_logging(False)
    config = AggregatorConfig.from_env().with_overrides(reports_dir=reports_dir)
    totals = storage_stats(config.reports_dir)

    if not totals.total_reports:
        console.print(f"[yellow]No reports recorded in {config.reports_dir}[/yellow]")
        return

    table = Table(title="Report Storage")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Reports", str(totals.total_reports))
    table.add_row("Total size (bytes)", str(totals.total_size))
    table.add_row("Average size (bytes)", str(totals.average_size))
    table.add_row("Archived", str(totals.archived_reports))
    table.add_row("Archived size (bytes)", str(totals.archived_size))
    table.add_row("Oldest", totals.oldest or "-")
    table.add_row("Newest", totals.newest or "-")

    console.print(table)


# =============================================================================
# VERSION
# =============================================================================


@app.command()
def version():
    """Show a11yreport version."""
    from a11yreport import __version__
    console.print(f"a11yreport v{__version__}")


if __name__ == "__main__":
    app()
