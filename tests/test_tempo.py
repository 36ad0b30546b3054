import threading
from datetime import timedelta
from unittest import mock

import pytest

from a113.tempo import InterruptibleSleep, Tick, Ticker


class _FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    fake = _FakeClock(1_000_000_000)
    with mock.patch("time.time_ns", fake):
        yield fake


def test_up_time_in_several_units(clock):
    ticker = Ticker()
    clock.now += 2_000_000_000
    assert ticker.up_time(Tick.S) == pytest.approx(2.0)
    assert ticker.up_time(Tick.MS) == pytest.approx(2_000.0)
    assert ticker.up_time(Tick.NS) == pytest.approx(2_000_000_000.0)


def test_up_time_in_seconds(clock):
    ticker = Ticker()
    clock.now += 2_000_000_000
    assert ticker.up_time() == pytest.approx(2.0)


def test_up_time_units_are_consistent(clock):
    ticker = Ticker()
    clock.now += 90_000_000_000
    seconds = ticker.up_time(Tick.S)
    assert ticker.up_time(Tick.MS) == pytest.approx(seconds * Tick.MS.multiplier)
    assert ticker.up_time(Tick.M) == pytest.approx(seconds * Tick.M.multiplier)
    assert ticker.up_time(Tick.H) == pytest.approx(seconds * Tick.H.multiplier)


def test_lap_resets_peek(clock):
    ticker = Ticker()
    clock.now += 500_000_000
    peeked = ticker.peek_lap()
    assert ticker.lap() == pytest.approx(peeked)
    assert ticker.peek_lap() == 0.0
    assert ticker.up_time() == pytest.approx(peeked)


def test_lap_from_epoch_measures_from_zero(clock):
    ticker = Ticker(lap_from_epoch=True)
    assert ticker.peek_lap(Tick.NS) == pytest.approx(clock.now)
    assert ticker.up_time() == 0.0


def test_cmpxchg_lap_waits_for_threshold(clock):
    ticker = Ticker()
    clock.now += 100_000_000
    assert ticker.cmpxchg_lap(1.0) == 0.0
    assert ticker.peek_lap() > 0.0
    clock.now += 1_000_000_000
    expected = ticker.peek_lap()
    assert ticker.cmpxchg_lap(1.0) == pytest.approx(expected)
    assert ticker.peek_lap() == 0.0


def test_epoch_truncates_to_whole_units(clock):
    clock.now = 7_500_000_000
    assert Ticker.epoch(Tick.S) == 7
    assert Ticker.epoch(Tick.MS) == 7500
    assert Ticker.epoch(Tick.NS) == clock.now


def test_sleep_times_out_with_remembered_value():
    sleeper = InterruptibleSleep()
    sleeper.interrupt(5)
    assert sleeper(0.01) == 5
    sleeper.interrupt(0)
    assert sleeper(timedelta(milliseconds=10)) == 5


def test_sleep_interrupted_returns_zero():
    sleeper = InterruptibleSleep()
    sleeper.interrupt(9)
    stop = threading.Event()

    def poke():
        while not stop.is_set():
            sleeper.interrupt(9)
            stop.wait(0.005)

    thread = threading.Thread(target=poke)
    thread.start()
    try:
        assert sleeper(5.0) == 0
    finally:
        stop.set()
        thread.join()