"""Analytics over the session history.

Every computation is a pure function of the store contents and "now".
Calendar boundaries (today, week, month, year, streak days) use the local
calendar date of each session in the time zone of "now"; weeks start on
Sunday.
"""

from __future__ import annotations

import csv
import io
import math
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Any

from .clock import Clock, local_now
from .history import SessionStore
from .session import Session, SessionType

STREAK_SCAN_DAYS = 365
CSV_HEADERS = ["Type", "Date", "Time", "Duration (min)", "Name"]


@dataclass(frozen=True)
class SessionStats:
    """Work session counts per period."""

    today: int = 0
    week: int = 0
    month: int = 0
    year: int = 0
    total: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def _aware(value: datetime) -> datetime:
    """Treat naive datetimes as system local time."""
    return value if value.tzinfo is not None else value.astimezone()


def _round_minutes(seconds: int) -> int:
    """Whole minutes, halves rounded up."""
    return math.floor(seconds / 60 + 0.5)


class SessionAnalytics:
    """Compute statistics from a SessionStore."""

    def __init__(self, store: SessionStore, clock: Clock | None = None):
        self.store = store
        self.clock = clock

    def _now(self, now: datetime | None) -> datetime:
        if now is None:
            now = self.clock.now() if self.clock is not None else local_now()
        return _aware(now)

    @staticmethod
    def _local_date(session: Session, tz: tzinfo | None) -> date:
        return session.started_at.astimezone(tz).date()

    def _started_today(self, now: datetime) -> list[Session]:
        today = now.date()
        return [
            s
            for s in self.store.all()
            if s.started_at <= now and self._local_date(s, now.tzinfo) == today
        ]

    def stats(self, now: datetime | None = None) -> SessionStats:
        """
        Count work sessions started today, this week, month, year and overall.

        Args:
            now: Reference time (defaults to the clock's current time)

        Returns:
            SessionStats with one counter per period
        """
        now = self._now(now)
        today = now.date()
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)  # Sunday
        month_start = today.replace(day=1)
        year_start = today.replace(month=1, day=1)

        counts = {"today": 0, "week": 0, "month": 0, "year": 0, "total": 0}
        for session in self.store.all():
            if session.type is not SessionType.WORK:
                continue
            counts["total"] += 1
            if session.started_at > now:
                continue

            day = self._local_date(session, now.tzinfo)
            if day >= today:
                counts["today"] += 1
            if day >= week_start:
                counts["week"] += 1
            if day >= month_start:
                counts["month"] += 1
            if day >= year_start:
                counts["year"] += 1

        return SessionStats(**counts)

    def recent_sessions(self, limit: int = 10) -> list[Session]:
        """The last *limit* sessions recorded, most recent first."""
        if limit <= 0:
            return []
        return list(reversed(self.store.all()[-limit:]))

    def today_sessions(self, now: datetime | None = None) -> list[Session]:
        """Sessions of any type started today."""
        return self._started_today(self._now(now))

    def sessions_in_range(self, start: datetime, end: datetime) -> list[Session]:
        """Sessions whose start time lies in [start, end]."""
        start, end = _aware(start), _aware(end)
        return [s for s in self.store.all() if start <= s.started_at <= end]

    def total_time_spent(self) -> int:
        """Seconds spent across all sessions of any type."""
        return sum(s.duration for s in self.store.all())

    def total_time_spent_today(self, now: datetime | None = None) -> int:
        """Seconds spent in sessions of any type started today."""
        return sum(s.duration for s in self.today_sessions(now))

    def productivity_streak(self, now: datetime | None = None) -> int:
        """
        Count consecutive days with at least one work session.

        Counting goes backward from today. Today without a session yet does
        not break a streak that was alive yesterday.
        """
        now = self._now(now)
        work_days = {
            self._local_date(s, now.tzinfo)
            for s in self.store.all()
            if s.type is SessionType.WORK
        }
        if not work_days:
            return 0

        today = now.date()
        streak = 0
        for offset in range(STREAK_SCAN_DAYS):
            day = today - timedelta(days=offset)
            if day in work_days:
                streak += 1
            elif offset > 0:
                break

        return streak

    def summary(self, now: datetime | None = None) -> dict[str, Any]:
        """All headline numbers at once, for display and JSON output."""
        now = self._now(now)
        return {
            **self.stats(now).to_dict(),
            "streak": self.productivity_streak(now),
            "total_time": self.total_time_spent(),
            "time_today": self.total_time_spent_today(now),
        }

    def export_csv(self, tz: tzinfo | None = None) -> str:
        """
        Serialize every session as CSV.

        Args:
            tz: Zone for the Date/Time columns (defaults to system local)

        Returns:
            Newline-separated rows with every field quoted and no trailing
            newline; an empty history yields only the header row
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(CSV_HEADERS)

        for session in self.store.all():
            started = session.started_at.astimezone(tz)
            writer.writerow(
                [
                    session.type.value,
                    started.strftime("%Y-%m-%d"),
                    started.strftime("%H:%M:%S"),
                    _round_minutes(session.duration),
                    session.name,
                ]
            )

        return buffer.getvalue().removesuffix("\n")
