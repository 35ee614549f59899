"""Main entry point for DeepFlow."""

import typer

from deepflow import __version__
from deepflow.commands import config_command, stats, timer
from deepflow.utils.ui.console import get_console

app = typer.Typer(
    name="deepflow",
    help="Focus-session timer with work/break cycles and session analytics",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(timer.app, name="timer", help="Pomodoro timer for focus sessions")
app.add_typer(stats.app, name="stats", help="Session statistics and data management")
app.add_typer(config_command.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]DeepFlow[/bold] version [cyan]{__version__}[/cyan]")


if __name__ == "__main__":
    app()
