"""Session records and timer status snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class SessionType(str, Enum):
    """Kind of interval the timer is counting down."""

    WORK = "work"
    SHORT_BREAK = "short-break"
    LONG_BREAK = "long-break"

    @property
    def display_name(self) -> str:
        """Human-readable name used in notifications and the timer screen."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    SessionType.WORK: "Work session",
    SessionType.SHORT_BREAK: "Short break",
    SessionType.LONG_BREAK: "Long break",
}


class TimerState(str, Enum):
    """Whether the countdown is advancing."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True)
class Session:
    """A completed (or skipped) interval.

    ``duration`` is the time actually spent in the interval, in seconds.
    ``started_at`` is always timezone-aware.
    """

    type: SessionType
    started_at: datetime
    duration: int
    name: str = ""

    def __post_init__(self) -> None:
        if self.duration < 0:
            raise ValueError(f"Session duration must be >= 0, got {self.duration}")
        if self.started_at.tzinfo is None:
            # Naive timestamps are wall-clock local time
            object.__setattr__(self, "started_at", self.started_at.astimezone())

    @property
    def timestamp(self) -> int:
        """Start time as epoch milliseconds."""
        return int(round(self.started_at.timestamp() * 1000))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted document form."""
        return {
            "type": self.type.value,
            "timestamp": self.timestamp,
            "duration": self.duration,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Session":
        """Create from the persisted document form."""
        started_at = datetime.fromtimestamp(data["timestamp"] / 1000).astimezone()
        return cls(
            type=SessionType(data["type"]),
            started_at=started_at,
            duration=int(data["duration"]),
            name=data.get("name") or "",
        )


@dataclass(frozen=True)
class TimerStatus:
    """Snapshot of the timer engine, published to listeners on every change."""

    state: TimerState
    session_type: SessionType
    time_left: int  # seconds
    total_time: int  # seconds
    session_count: int  # work sessions completed

    @property
    def elapsed(self) -> int:
        """Seconds spent in the current interval."""
        return self.total_time - self.time_left

    @property
    def progress(self) -> float:
        """Fraction of the current interval already elapsed (0.0 - 1.0)."""
        if self.total_time <= 0:
            return 0.0
        return min(1.0, max(0.0, self.elapsed / self.total_time))
