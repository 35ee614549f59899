"""Wires configuration, history, analytics, notifications and the timer engine."""

from __future__ import annotations

from functools import lru_cache

from rich.console import Console

from deepflow.models.focus.analytics import SessionAnalytics
from deepflow.models.focus.clock import Clock, PollingClock
from deepflow.models.focus.engine import NotificationSink, TimerEngine
from deepflow.models.focus.history import DataStore, JsonDataStore, SessionStore

from .config_service import ConfigService, get_config_service
from .notification_service import Notifier


class FocusService:
    """Owns one timer engine and the session history it writes to.

    Collaborators default to the real ones (config file, JSON data file,
    polling clock, console and desktop notifier) and can be injected.
    The engine and notifier read the live configuration, so a setting
    changed through the ConfigService applies to the next session.
    """

    def __init__(
        self,
        config_service: ConfigService | None = None,
        data_store: DataStore | None = None,
        clock: Clock | None = None,
        notifier: NotificationSink | None = None,
        console: Console | None = None,
    ):
        self.config_service = config_service or get_config_service()
        self.clock = clock or PollingClock()
        self.store = SessionStore(data_store or JsonDataStore())
        self.analytics = SessionAnalytics(self.store, clock=self.clock)
        self.notifier = notifier or Notifier(
            lambda: self.config_service.config.notifications, console=console
        )
        self.engine = TimerEngine(
            self.store,
            self.clock,
            settings=lambda: self.config_service.config.timer,
            notifier=self.notifier,
        )

    def shutdown(self) -> None:
        """Tear down the engine and clock so no callback fires afterwards."""
        self.engine.cleanup()
        self.clock.close()


@lru_cache(maxsize=1)
def get_focus_service() -> FocusService:
    """Shared FocusService instance."""
    return FocusService()
