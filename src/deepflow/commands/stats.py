"""Statistics commands: summary, CSV export and clearing history."""

from datetime import date
from pathlib import Path

import typer
from rich.table import Table

from deepflow.services.focus_service import get_focus_service
from deepflow.utils.ui.console import get_console
from deepflow.utils.ui.formatters import format_duration, format_error, format_success

console = get_console()
app = typer.Typer(help="Session statistics and data management")


@app.command("show")
def show_stats(
    output: str = typer.Option(None, "--output", "-o", help="Output format (json)"),
):
    """Show session counts, streak and time spent."""
    summary = get_focus_service().analytics.summary()

    if output == "json":
        console.print_json(data=summary)
        return

    table = Table(title="DeepFlow Statistics", show_header=False)
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right", style="bold")

    table.add_row("Total Sessions", str(summary["total"]))
    table.add_row("This Year", str(summary["year"]))
    table.add_row("This Month", str(summary["month"]))
    table.add_row("This Week", str(summary["week"]))
    table.add_row("Today", str(summary["today"]))
    table.add_row("Current Streak", f"{summary['streak']} days")
    table.add_row("Total Time", format_duration(summary["total_time"]))
    table.add_row("Time Today", format_duration(summary["time_today"]))

    console.print(table)


@app.command("export")
def export_sessions(
    output: Path = typer.Option(None, "--output", "-o", help="Output CSV file"),
):
    """Export all sessions as CSV."""
    service = get_focus_service()
    path = output or Path(f"deepflow-sessions-{date.today().isoformat()}.csv")

    try:
        path.write_text(service.analytics.export_csv(), encoding="utf-8")
    except OSError as e:
        format_error(f"Failed to export sessions: {e}")
        raise typer.Exit(1) from e

    format_success(f"Exported {len(service.store)} sessions to {path}")


@app.command("clear")
def clear_sessions(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Permanently delete all session data."""
    if not yes:
        confirm = typer.confirm(
            "Are you sure you want to delete all session data? This cannot be undone."
        )
        if not confirm:
            format_error("Cancelled")
            raise typer.Exit(0)

    if not get_focus_service().store.clear():
        format_error("Sessions were cleared but could not be saved")
        raise typer.Exit(1)

    format_success("All session data deleted")
