"""Timer engine: the work/break state machine.

States:
    IDLE --start--> RUNNING --pause--> PAUSED --start--> RUNNING
    RUNNING --(countdown exhausted | skip)--> IDLE, advancing the session type
    any --reset--> IDLE / work

The engine is driven entirely by its clock. Every change is published as a
TimerStatus to the registered listeners, synchronously and in order.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from deepflow.models.config_models import TimerSettings
from deepflow.utils.logger import get_logger

from .clock import Clock
from .cycling import (
    DEFAULT_DURATIONS,
    completion_message,
    duration_minutes,
    next_session_type,
)
from .history import SessionStore
from .session import Session, SessionType, TimerState, TimerStatus

logger = get_logger("focus.engine")

NOTIFICATION_TITLE = "DeepFlow"

StatusListener = Callable[[TimerStatus], None]


class NotificationSink(Protocol):
    def notify(self, message: str) -> None: ...

    def notify_system(self, title: str, message: str) -> None: ...


class TimerEngine:
    """Pomodoro state machine producing session records and status updates."""

    def __init__(
        self,
        store: SessionStore,
        clock: Clock,
        settings: TimerSettings | Callable[[], TimerSettings] | None = None,
        notifier: NotificationSink | None = None,
        session_count: int = 0,
    ):
        """Initialize the engine in the idle work state.

        Args:
            store: Where completed sessions are recorded
            clock: Tick and scheduling source
            settings: Timer settings, or a callable returning the live settings
            notifier: Receives completion notices
            session_count: Work sessions already completed (restored by hosts)
        """
        if settings is None:
            settings = TimerSettings()
        if isinstance(settings, TimerSettings):
            fixed = settings
            settings = lambda: fixed  # noqa: E731

        self._store = store
        self._clock = clock
        self._settings = settings
        self._notifier = notifier
        self._listeners: list[StatusListener] = []

        self._state = TimerState.IDLE
        self._session_type = SessionType.WORK
        self._session_count = max(0, session_count)
        self._session_started_at: datetime | None = None
        self._total_time = 0
        self._time_left = 0
        self._last_good_targets: dict[SessionType, int] = {}

        self._tick_handle: int | None = None
        self._auto_start_handle: int | None = None

        self._set_up_session()

    # ----- Listeners -----
    def add_listener(self, listener: StatusListener) -> None:
        """Register a callback receiving every TimerStatus update."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StatusListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self) -> None:
        status = self.get_status()
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception:
                logger.exception("Status listener %r failed", listener)

    # ----- Public API -----
    def get_status(self) -> TimerStatus:
        return TimerStatus(
            state=self._state,
            session_type=self._session_type,
            time_left=self._time_left,
            total_time=self._total_time,
            session_count=self._session_count,
        )

    @property
    def auto_start_pending(self) -> bool:
        """True while a delayed auto-start is scheduled."""
        return self._auto_start_handle is not None

    def start(self) -> None:
        """Start a fresh session or resume a paused one."""
        self._cancel_auto_start()
        if self._state is TimerState.RUNNING:
            return

        if self._state is TimerState.IDLE or self._session_started_at is None:
            self._session_started_at = self._clock.now()

        self._state = TimerState.RUNNING
        self._tick_handle = self._clock.subscribe(self._on_tick)
        logger.debug(
            "Started %s with %ss left", self._session_type.value, self._time_left
        )
        self._emit()

    def pause(self) -> None:
        """Freeze the countdown. Also suppresses a pending auto-start."""
        self._cancel_auto_start()
        if self._state is not TimerState.RUNNING:
            return

        self._stop_ticking()
        self._state = TimerState.PAUSED
        logger.debug("Paused with %ss left", self._time_left)
        self._emit()

    def reset(self) -> None:
        """Return to an idle work session. The session count is kept."""
        self.pause()
        self._state = TimerState.IDLE
        self._session_type = SessionType.WORK
        self._set_up_session()
        logger.debug("Reset to idle work session")
        self._emit()

    def skip(self) -> None:
        """Complete the current session now, whatever time is left."""
        self._complete_session()

    def cleanup(self) -> None:
        """Stop ticking and drop any pending auto-start. Safe to call twice."""
        self._stop_ticking()
        self._cancel_auto_start()

    # ----- Internals -----
    def _on_tick(self) -> None:
        if self._state is not TimerState.RUNNING:
            return

        self._time_left = max(0, self._time_left - 1)
        if self._time_left <= 0:
            self._complete_session()

        self._emit()

    def _complete_session(self) -> None:
        completed = self._session_type
        started_at = self._session_started_at or self._clock.now()
        self.pause()

        duration = max(0, self._total_time - self._time_left)
        self._store.append(
            Session(type=completed, started_at=started_at, duration=duration)
        )
        logger.info("Completed %s after %ss", completed.value, duration)

        settings = self._settings()
        if completed is SessionType.WORK:
            self._session_count += 1
        interval = settings.long_break_interval
        if interval <= 0:
            logger.warning("Invalid long break interval %r, using 1", interval)
        upcoming = next_session_type(completed, self._session_count, interval)

        self._send_notifications(completion_message(completed, upcoming))

        self._session_type = upcoming
        self._set_up_session()
        self._state = TimerState.IDLE

        if settings.auto_start_next_session:
            self._auto_start_handle = self._clock.call_later(
                settings.auto_start_delay, self._auto_start
            )

        self._emit()

    def _auto_start(self) -> None:
        self._auto_start_handle = None
        self.start()

    def _set_up_session(self) -> None:
        self._total_time = self._target_seconds(self._session_type)
        self._time_left = self._total_time
        self._session_started_at = None

    def _target_seconds(self, session_type: SessionType) -> int:
        minutes = duration_minutes(self._settings(), session_type)
        if minutes > 0:
            seconds = int(minutes * 60)
            self._last_good_targets[session_type] = seconds
            return seconds

        fallback = self._last_good_targets.get(
            session_type, DEFAULT_DURATIONS[session_type] * 60
        )
        logger.warning(
            "Invalid %s duration %r, using %ss", session_type.value, minutes, fallback
        )
        return fallback

    def _send_notifications(self, message: str) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.notify(message)
        except Exception as e:
            logger.warning("In-app notification failed: %s", e)
        try:
            self._notifier.notify_system(NOTIFICATION_TITLE, message)
        except Exception as e:
            logger.warning("System notification failed: %s", e)

    def _stop_ticking(self) -> None:
        if self._tick_handle is not None:
            self._clock.unsubscribe(self._tick_handle)
            self._tick_handle = None

    def _cancel_auto_start(self) -> None:
        if self._auto_start_handle is not None:
            self._clock.cancel(self._auto_start_handle)
            self._auto_start_handle = None
