"""Wall-clock tickers and an interruptible sleep."""

from __future__ import annotations

import threading
import time
from datetime import timedelta
from enum import Enum
from typing import Union


class Tick(Enum):
    """Time units, each with its factor from seconds and its length in ns."""

    NS = (1_000_000_000.0, 1)
    US = (1_000_000.0, 1_000)
    MS = (1_000.0, 1_000_000)
    S = (1.0, 1_000_000_000)
    M = (1.0 / 60.0, 60_000_000_000)
    H = (1.0 / 3600.0, 3_600_000_000_000)

    def __init__(self, multiplier: float, nanoseconds: int) -> None:
        self.multiplier = multiplier
        self.nanoseconds = nanoseconds


def _now_ns() -> int:
    return time.time_ns()


def _scaled(elapsed_ns: int, unit: Tick) -> float:
    return (elapsed_ns / 1e9) * Tick(unit).multiplier


class Ticker:
    """Measures time since creation and between laps."""

    def __init__(self, lap_from_epoch: bool = False) -> None:
        now = _now_ns()
        self._create = now
        self._last_lap = 0 if lap_from_epoch else now

    def up_time(self, unit: Tick = Tick.S) -> float:
        """Time since creation."""
        return _scaled(_now_ns() - self._create, unit)

    def peek_lap(self, unit: Tick = Tick.S) -> float:
        """Time since the last lap, without starting a new one."""
        return _scaled(_now_ns() - self._last_lap, unit)

    def lap(self, unit: Tick = Tick.S) -> float:
        """Time since the last lap; starts a new lap."""
        now = _now_ns()
        elapsed, self._last_lap = now - self._last_lap, now
        return _scaled(elapsed, unit)

    def cmpxchg_lap(self, value: float, unit: Tick = Tick.S) -> float:
        """Lap only if at least ``value`` (in ``unit``) has passed.

        Returns 0.0 when too early; otherwise the lapped time in seconds.
        """
        if self.peek_lap(unit) < value:
            return 0.0
        return self.lap()

    @staticmethod
    def epoch(unit: Tick = Tick.S) -> int:
        """Whole ``unit`` counts since the clock's epoch."""
        return _now_ns() // Tick(unit).nanoseconds


class InterruptibleSleep:
    """A sleep that another thread can cut short."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._value = 0

    def __call__(self, duration: Union[float, timedelta]) -> int:
        """Sleep up to ``duration`` seconds.

        Returns 0 when interrupted, otherwise the last value given to
        :meth:`interrupt`.
        """
        seconds = duration.total_seconds() if isinstance(duration, timedelta) else float(duration)
        with self._cond:
            woken = self._cond.wait(timeout=seconds)
        return 0 if woken else self._value

    def interrupt(self, value: int = 0) -> None:
        """Wake every sleeper; a non-zero ``value`` is remembered."""
        with self._cond:
            if value != 0:
                self._value = value
            self._cond.notify_all()