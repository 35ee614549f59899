"""Focus mode - Pomodoro timer engine and session analytics."""

from .analytics import SessionAnalytics, SessionStats
from .clock import Clock, PollingClock
from .engine import TimerEngine
from .history import DataStore, JsonDataStore, SessionStore
from .session import Session, SessionType, TimerState, TimerStatus

__all__ = [
    "Clock",
    "DataStore",
    "JsonDataStore",
    "PollingClock",
    "Session",
    "SessionAnalytics",
    "SessionStats",
    "SessionStore",
    "SessionType",
    "TimerEngine",
    "TimerState",
    "TimerStatus",
]
