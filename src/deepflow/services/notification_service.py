"""Completion notices: terminal messages and desktop notifications."""

from __future__ import annotations

import threading
from collections.abc import Callable

from plyer import notification as plyer_notification  # type: ignore[import-not-found]
from rich.console import Console

from deepflow.models.config_models import NotificationSettings
from deepflow.utils.logger import get_logger
from deepflow.utils.ui.console import get_console

logger = get_logger("notifications")

APP_NAME = "DeepFlow"


class Notifier:
    """Sends session notices through the channels enabled in configuration.

    Each channel reads its flag at call time, so toggling a setting takes
    effect on the next notice. Failures are logged and ignored.
    """

    def __init__(
        self,
        settings: NotificationSettings | Callable[[], NotificationSettings] | None = None,
        console: Console | None = None,
        timeout: int = 5,
        background: bool = True,
    ):
        if settings is None:
            settings = NotificationSettings()
        if isinstance(settings, NotificationSettings):
            fixed = settings
            settings = lambda: fixed  # noqa: E731

        self._settings = settings
        self.console = console or get_console()
        self.timeout = timeout
        self.background = background

    def notify(self, message: str) -> None:
        """Show an in-app notice in the terminal."""
        if not self._settings().in_app:
            return
        try:
            self.console.print(f"🍅 {message}", style="bold cyan", markup=False)
        except Exception as e:
            logger.warning("In-app notification failed: %s", e)

    def notify_system(self, title: str, message: str) -> None:
        """Send a desktop notification without blocking the caller."""
        if not self._settings().system:
            return

        if self.background:
            threading.Thread(
                target=self._send_system, args=(title, message), daemon=True
            ).start()
        else:
            self._send_system(title, message)

    def _send_system(self, title: str, message: str) -> None:
        try:
            plyer_notification.notify(
                title=title,
                message=message,
                app_name=APP_NAME,
                timeout=self.timeout,
            )
        except Exception as e:
            # Not every platform has a notification backend
            logger.warning("System notification failed: %s", e)
