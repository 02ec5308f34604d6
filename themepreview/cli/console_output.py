# themepreview/cli/console_output.py
"""
Handles printing summary information to the console during CLI execution.
"""
import click
import structlog
from rich.console import Console as RichConsole
from rich.table import Table

from themepreview.core.models import CacheStats, RenderResult
from themepreview.core.pipeline import BatchReport

log = structlog.get_logger(__name__)


def print_render_summary(component_slug: str, result: RenderResult):
    # render status goes to stderr so stdout stays pipeable.
    if result.success:
        origin = "cache" if result.cached else "fresh render"
        click.secho(f"Rendered '{component_slug}' in {result.render_time_ms} ms ({origin})", fg="cyan", err=True)
        return
    for error in result.errors:
        click.secho(f"Error rendering '{component_slug}': {error}", fg="red", err=True)


def print_batch_summary(report: BatchReport, console: RichConsole = None):
    """
    Prints one row per component plus the batch totals.
    'report' is a successful BatchReport from run_batch.
    """
    console = console or RichConsole()
    log.debug("console_batch_summary_requested", items=len(report.items))

    table = Table(title="Batch render")
    table.add_column("Component", style="bold")
    table.add_column("Status")
    table.add_column("Time (ms)", justify="right")
    table.add_column("Cached", justify="center")
    table.add_column("Error", overflow="fold")
    for item in report.items:
        status = "[green]ok[/green]" if item.success else "[red]failed[/red]"
        table.add_row(item.slug, status, str(item.render_time_ms), "yes" if item.cached else "no", item.error or "")
    console.print(table)

    stats = report.stats
    console.print(
        f"Total: {stats['total']}  Successful: {stats['successful']}  Failed: {stats['failed']}  "
        f"Cached: {stats['cached']}  Time: {stats['total_time_ms']} ms"
    )


def print_cache_stats(stats: CacheStats, console: RichConsole = None):
    console = console or RichConsole()
    table = Table(title="Render cache", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Entries", str(stats.total))
    table.add_row("Expired", str(stats.expired))
    table.add_row("Approx. size (KB)", str(stats.approx_size_kb))
    console.print(table)
