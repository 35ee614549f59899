"""Single-key timer controls for the terminal."""

from __future__ import annotations

import select
import sys

from .engine import TimerEngine
from .session import TimerState

# key -> action
KEY_BINDINGS = {
    " ": "toggle",
    "p": "toggle",
    "s": "skip",
    "r": "reset",
    "q": "quit",
}


def handle_key(engine: TimerEngine, key: str | None) -> str | None:
    """Apply the action bound to *key* to the engine.

    Returns the action name, or None for unbound keys. ``quit`` is returned
    without touching the engine; leaving the loop is up to the caller.
    """
    if key is None:
        return None
    action = KEY_BINDINGS.get(key.lower())

    if action == "toggle":
        if engine.get_status().state is TimerState.RUNNING:
            engine.pause()
        else:
            engine.start()
    elif action == "skip":
        engine.skip()
    elif action == "reset":
        engine.reset()

    return action


class KeyboardHandler:
    """Non-blocking keypress reader putting the terminal in cbreak mode.

    Usable as a context manager; the terminal settings are restored on exit.
    """

    def __init__(self):
        self.fd = sys.stdin.fileno()
        self.old_settings = None
        self._setup()

    def _setup(self) -> None:
        try:
            import termios
            import tty

            self.old_settings = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        except Exception:
            # Not a TTY, or no termios (Windows)
            self.old_settings = None

    def get_key(self) -> str | None:
        """Return one pending keypress, or None if nothing was typed."""
        try:
            if select.select([sys.stdin], [], [], 0)[0]:
                return sys.stdin.read(1)
        except (OSError, ValueError):
            pass
        return None

    def stop(self) -> None:
        """Restore terminal settings."""
        if self.old_settings is None:
            return
        try:
            import termios

            termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
        except Exception:
            pass
        self.old_settings = None

    def __enter__(self) -> "KeyboardHandler":
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
