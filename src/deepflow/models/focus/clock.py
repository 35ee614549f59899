"""Clock sources driving the timer engine.

The engine never sleeps or spawns threads itself. It asks a clock for the
current wall time, subscribes to a ~1 second tick and schedules one-shot
delayed callbacks. ``PollingClock`` delivers all of these from the host's own
loop via ``run_pending()``, so every engine mutation happens on one thread.
"""

from __future__ import annotations

import itertools
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

Callback = Callable[[], None]


class Clock(Protocol):
    """Interface the timer engine depends on."""

    def now(self) -> datetime: ...

    def subscribe(self, callback: Callback) -> int: ...

    def unsubscribe(self, handle: int) -> None: ...

    def call_later(self, delay: float, callback: Callback) -> int: ...

    def cancel(self, handle: int) -> None: ...

    def close(self) -> None: ...


def local_now() -> datetime:
    """Current wall-clock time in the system local time zone."""
    return datetime.now().astimezone()


@dataclass
class _Subscription:
    callback: Callback
    next_due: float


@dataclass
class _Timer:
    callback: Callback
    due: float


class PollingClock:
    """Cooperative clock whose callbacks fire from ``run_pending()``.

    Args:
        interval: Seconds between ticks
        monotonic: Monotonic time source (seconds)
        wall: Wall-clock source returning aware datetimes
        max_catch_up: Most ticks delivered to one subscriber per poll when
            the host loop falls behind; missed ticks are never dropped
    """

    def __init__(
        self,
        interval: float = 1.0,
        monotonic: Callable[[], float] = time.monotonic,
        wall: Callable[[], datetime] = local_now,
        max_catch_up: int = 5,
    ):
        if interval <= 0:
            raise ValueError("Tick interval must be positive")
        self.interval = interval
        self._monotonic = monotonic
        self._wall = wall
        self._max_catch_up = max(1, max_catch_up)
        self._handles = itertools.count(1)
        self._subscriptions: dict[int, _Subscription] = {}
        self._timers: dict[int, _Timer] = {}

    def now(self) -> datetime:
        return self._wall()

    def subscribe(self, callback: Callback) -> int:
        handle = next(self._handles)
        self._subscriptions[handle] = _Subscription(
            callback=callback, next_due=self._monotonic() + self.interval
        )
        return handle

    def unsubscribe(self, handle: int) -> None:
        self._subscriptions.pop(handle, None)

    def call_later(self, delay: float, callback: Callback) -> int:
        handle = next(self._handles)
        self._timers[handle] = _Timer(
            callback=callback, due=self._monotonic() + max(0.0, delay)
        )
        return handle

    def cancel(self, handle: int) -> None:
        self._timers.pop(handle, None)

    @property
    def active(self) -> bool:
        """True while any subscription or delayed callback is outstanding."""
        return bool(self._subscriptions or self._timers)

    def run_pending(self) -> int:
        """Fire every tick and delayed callback that is due.

        Callbacks may subscribe, unsubscribe or cancel while this runs; a
        handle removed by an earlier callback is not fired, and handles
        created during this call wait for the next poll.

        Returns:
            Number of callbacks fired
        """
        now = self._monotonic()
        fired = 0

        for handle in list(self._subscriptions):
            sub = self._subscriptions.get(handle)
            delivered = 0
            while (
                sub is not None
                and self._subscriptions.get(handle) is sub
                and sub.next_due <= now
            ):
                sub.next_due += self.interval
                sub.callback()
                fired += 1
                delivered += 1
                if delivered >= self._max_catch_up:
                    # Remaining backlog is delivered on later polls
                    break

        due = sorted(
            (timer.due, handle)
            for handle, timer in self._timers.items()
            if timer.due <= now
        )
        for _, handle in due:
            timer = self._timers.pop(handle, None)
            if timer is None:
                continue
            timer.callback()
            fired += 1

        return fired

    def close(self) -> None:
        """Drop all subscriptions and pending callbacks."""
        self._subscriptions.clear()
        self._timers.clear()
