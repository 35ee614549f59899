"""Full-screen timer UI for the terminal."""

from __future__ import annotations

import time
from collections.abc import Callable

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from deepflow.utils.ui.formatters import format_duration, format_time

from .analytics import SessionAnalytics
from .clock import PollingClock
from .engine import TimerEngine
from .keyboard import KeyboardHandler, handle_key
from .session import SessionType, TimerState, TimerStatus

SESSION_EMOJI = {
    SessionType.WORK: "🍅",
    SessionType.SHORT_BREAK: "☕",
    SessionType.LONG_BREAK: "🌴",
}

SESSION_COLORS = {
    SessionType.WORK: "cyan",
    SessionType.SHORT_BREAK: "green",
    SessionType.LONG_BREAK: "magenta",
}


def status_line(status: TimerStatus) -> str:
    """Compact status-bar text: ``Ready`` when idle, otherwise the countdown."""
    if status.state is TimerState.IDLE:
        return "Ready"
    icon = "⏸" if status.state is TimerState.PAUSED else SESSION_EMOJI[status.session_type]
    return f"{icon} {format_time(status.time_left)}"


class TimerDisplay:
    """Renders TimerStatus snapshots and runs the interactive timer loop."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()
        self.status: TimerStatus | None = None

    def on_status(self, status: TimerStatus) -> None:
        """Engine listener keeping the latest snapshot for rendering."""
        self.status = status

    def create_layout(self, status: TimerStatus) -> Layout:
        """Create the timer layout with header, countdown and key hints."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        if status.state is TimerState.PAUSED:
            title, color = "PAUSED", "yellow"
        elif status.state is TimerState.RUNNING:
            title, color = "DeepFlow", SESSION_COLORS[status.session_type]
        else:
            title, color = "READY", "green"

        header_text = Text(
            f"{SESSION_EMOJI[status.session_type]}  {title}",
            style=f"bold {color}",
            justify="center",
        )
        layout["header"].update(Align.center(header_text, vertical="middle"))
        layout["body"].update(Align.center(self._create_body(status), vertical="middle"))
        layout["footer"].update(
            Align.center(self._create_footer_text(status.state), vertical="middle")
        )
        return layout

    def _create_body(self, status: TimerStatus) -> Group:
        components = [
            Text(status.session_type.display_name, style="bold white", justify="center"),
            Text(""),
        ]

        if status.state is TimerState.PAUSED:
            timer_color = "yellow"
        elif status.time_left < 60:
            timer_color = "red"
        else:
            timer_color = SESSION_COLORS[status.session_type]
        components.append(
            Text(format_time(status.time_left), style=f"bold {timer_color}", justify="center")
        )
        components.append(Text(""))

        bar_width = 40
        pct = int(status.progress * 100)
        filled = int(bar_width * status.progress)
        progress_bar = "█" * filled + "░" * (bar_width - filled)
        components.append(Text(f"{progress_bar}  {pct}%", style="dim", justify="center"))
        components.append(Text(""))

        components.append(
            Text(
                f"Work sessions completed: {status.session_count}",
                style="dim",
                justify="center",
            )
        )
        return Group(*components)

    def _create_footer_text(self, state: TimerState) -> Text:
        toggle = "pause" if state is TimerState.RUNNING else "start"
        hints = f"space/p: {toggle}  •  s: skip  •  r: reset  •  q: quit"
        return Text(hints, style="dim", justify="center")

    def run(
        self,
        engine: TimerEngine,
        clock: PollingClock,
        keyboard_factory: Callable[[], KeyboardHandler] = KeyboardHandler,
        refresh_interval: float = 0.25,
    ) -> TimerStatus:
        """
        Run the interactive timer until the user quits.

        The loop reads one key, applies it, lets the clock fire due ticks and
        redraws. Returns the last status seen.
        """
        self.status = engine.get_status()
        engine.add_listener(self.on_status)

        try:
            with keyboard_factory() as keyboard, Live(
                self.create_layout(self.status),
                console=self.console,
                refresh_per_second=4,
                screen=True,
            ) as live:
                while True:
                    if handle_key(engine, keyboard.get_key()) == "quit":
                        break
                    clock.run_pending()
                    live.update(self.create_layout(self.status))
                    time.sleep(refresh_interval)
        except KeyboardInterrupt:
            pass
        finally:
            engine.remove_listener(self.on_status)

        return self.status


def show_summary(analytics: SessionAnalytics, console: Console | None = None) -> None:
    """Print today's totals after leaving the timer."""
    console = console or Console()
    stats = analytics.stats()

    panel = Panel(
        f"""[bold green]Focus summary[/bold green]

Work sessions today: {stats.today}
Time today: {format_duration(analytics.total_time_spent_today())}
Current streak: {analytics.productivity_streak()} days""",
        border_style="green",
        padding=(1, 2),
    )

    console.print(panel)
