"""Work/break cycling rules."""

from __future__ import annotations

from deepflow.models.config_models import TimerSettings

from .session import SessionType

DEFAULT_DURATIONS = {
    SessionType.WORK: 25,
    SessionType.SHORT_BREAK: 5,
    SessionType.LONG_BREAK: 15,
}


def normalize_interval(long_break_interval: int) -> int:
    """Interval used for the long-break check; anything below 1 counts as 1."""
    return long_break_interval if long_break_interval > 0 else 1


def next_session_type(
    current: SessionType, session_count: int, long_break_interval: int
) -> SessionType:
    """Determine the session that follows *current*.

    Args:
        current: Session type that just completed
        session_count: Work sessions completed, including *current* if it was work
        long_break_interval: Work sessions between long breaks

    Returns:
        The next session type
    """
    if current is not SessionType.WORK:
        # After any break, go back to work
        return SessionType.WORK

    if session_count % normalize_interval(long_break_interval) == 0:
        return SessionType.LONG_BREAK
    return SessionType.SHORT_BREAK


def duration_minutes(settings: TimerSettings, session_type: SessionType) -> int:
    """Configured duration in minutes for *session_type*."""
    if session_type is SessionType.WORK:
        return settings.work_duration
    elif session_type is SessionType.SHORT_BREAK:
        return settings.short_break_duration
    else:  # long break
        return settings.long_break_duration


def completion_message(completed: SessionType, upcoming: SessionType) -> str:
    """Notification text shown when *completed* ends and *upcoming* is ready."""
    return f"{completed.display_name} completed! {upcoming.display_name} is ready."
