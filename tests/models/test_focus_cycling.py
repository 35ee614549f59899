"""Tests for work/break cycling rules."""

from __future__ import annotations

import pytest

from deepflow.models.config_models import TimerSettings
from deepflow.models.focus.cycling import (
    completion_message,
    duration_minutes,
    next_session_type,
    normalize_interval,
)
from deepflow.models.focus.session import SessionType


class TestNextSessionType:
    @pytest.mark.parametrize("count,expected", [
        (1, SessionType.SHORT_BREAK),
        (2, SessionType.SHORT_BREAK),
        (3, SessionType.SHORT_BREAK),
        (4, SessionType.LONG_BREAK),
        (5, SessionType.SHORT_BREAK),
        (8, SessionType.LONG_BREAK),
    ])
    def test_after_work(self, count, expected):
        assert next_session_type(SessionType.WORK, count, 4) is expected

    @pytest.mark.parametrize("current", [SessionType.SHORT_BREAK, SessionType.LONG_BREAK])
    def test_after_break(self, current):
        assert next_session_type(current, 4, 4) is SessionType.WORK

    def test_custom_interval(self):
        assert next_session_type(SessionType.WORK, 2, 2) is SessionType.LONG_BREAK
        assert next_session_type(SessionType.WORK, 3, 2) is SessionType.SHORT_BREAK

    @pytest.mark.parametrize("interval", [0, -1])
    def test_non_positive_interval(self, interval):
        assert normalize_interval(interval) == 1
        assert next_session_type(SessionType.WORK, 7, interval) is SessionType.LONG_BREAK


def test_duration_minutes():
    settings = TimerSettings(work_duration=50, short_break_duration=10, long_break_duration=30)

    assert duration_minutes(settings, SessionType.WORK) == 50
    assert duration_minutes(settings, SessionType.SHORT_BREAK) == 10
    assert duration_minutes(settings, SessionType.LONG_BREAK) == 30


def test_completion_message():
    message = completion_message(SessionType.LONG_BREAK, SessionType.WORK)

    assert message == "Long break completed! Work session is ready."
