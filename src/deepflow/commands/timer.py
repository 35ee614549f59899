"""Pomodoro timer commands for DeepFlow."""

import typer
from rich.table import Table

from deepflow.models.focus.ui import TimerDisplay, show_summary
from deepflow.services.focus_service import get_focus_service
from deepflow.utils.ui.console import get_console
from deepflow.utils.ui.formatters import format_duration

console = get_console()
app = typer.Typer(help="Pomodoro timer for focus sessions")


@app.command("start")
def start_timer(
    auto_start: bool | None = typer.Option(
        None,
        "--auto-start/--no-auto-start",
        help="Override the auto-start setting for this run",
    ),
):
    """Open the full-screen timer and start a work session."""
    service = get_focus_service()
    if auto_start is not None:
        service.config_service.config.timer.auto_start_next_session = auto_start

    service.engine.start()
    display = TimerDisplay(console)
    try:
        display.run(service.engine, service.clock)
    finally:
        service.shutdown()

    show_summary(service.analytics, console)


@app.command("history")
def timer_history(
    limit: int = typer.Option(10, "--limit", "-n", help="Number of sessions to show"),
):
    """Show the most recent sessions."""
    sessions = get_focus_service().analytics.recent_sessions(limit)

    if not sessions:
        console.print("[yellow]No sessions recorded yet[/yellow]")
        return

    table = Table(title=f"Recent Sessions ({len(sessions)})", show_header=True)
    table.add_column("Date", style="cyan")
    table.add_column("Type")
    table.add_column("Duration", justify="right")
    table.add_column("Name")

    for session in sessions:
        table.add_row(
            session.started_at.astimezone().strftime("%Y-%m-%d %H:%M"),
            session.type.display_name,
            format_duration(session.duration),
            session.name or "—",
        )

    console.print(table)
