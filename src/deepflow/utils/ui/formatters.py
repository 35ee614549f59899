"""Formatting helpers for terminal output."""

from __future__ import annotations

from .console import get_console


def format_time(seconds: int) -> str:
    """Countdown display, e.g. ``25:00``."""
    seconds = max(0, int(seconds))
    minutes, remaining = divmod(seconds, 60)
    return f"{minutes:02d}:{remaining:02d}"


def format_duration(seconds: int) -> str:
    """Human duration, e.g. ``1h 5m`` or ``25m``."""
    seconds = max(0, int(seconds))
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60

    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_error(message: str) -> None:
    """Format and display an error message."""
    get_console().print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    get_console().print(f"[bold green]Success:[/bold green] {message}")

