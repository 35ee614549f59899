"""Shared test fixtures.

Time is fully controlled: ``fake_time`` is the monotonic source of a real
PollingClock, and the clock's wall time moves in lockstep from ``NOW``.
"""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from focus_helpers import NOW, FakeTime

from deepflow.models.config_models import TimerSettings
from deepflow.models.focus.clock import PollingClock
from deepflow.models.focus.engine import TimerEngine
from deepflow.models.focus.history import JsonDataStore, SessionStore


@pytest.fixture()
def fake_time() -> FakeTime:
    return FakeTime()


@pytest.fixture()
def clock(fake_time: FakeTime) -> PollingClock:
    """PollingClock driven by fake_time, wall clock starting at NOW."""
    return PollingClock(
        monotonic=fake_time,
        wall=lambda: NOW + timedelta(seconds=fake_time.elapsed),
    )


@pytest.fixture()
def data_path(tmp_path):
    return tmp_path / "data.json"


@pytest.fixture()
def store(data_path) -> SessionStore:
    """SessionStore backed by a JSON file in tmp_path."""
    return SessionStore(JsonDataStore(data_path))


@pytest.fixture()
def settings() -> TimerSettings:
    return TimerSettings()


@pytest.fixture()
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def engine(store, clock, settings, notifier) -> TimerEngine:
    return TimerEngine(store, clock, settings=settings, notifier=notifier)


@pytest.fixture()
def config_service(tmp_path):
    """Real ConfigService writing into tmp_path."""
    from deepflow.services.config_service import ConfigService, get_config_service

    get_config_service.cache_clear()
    with patch(
        "deepflow.services.config_service.user_config_dir", return_value=str(tmp_path)
    ):
        yield ConfigService()
    get_config_service.cache_clear()


@pytest.fixture()
def focus_service(config_service, data_path, clock, notifier):
    """FocusService with every collaborator pointed at tmp_path / fake time."""
    from deepflow.services.focus_service import FocusService

    return FocusService(
        config_service=config_service,
        data_store=JsonDataStore(data_path),
        clock=clock,
        notifier=notifier,
    )
