"""Tests for the time synchronizer service."""

import logging
import threading
from datetime import datetime, time

import pytest
from pytz import utc

from sunsync import synchronizer as synchronizer_module
from sunsync.config import ConfigError, Configuration
from sunsync.moon import lunar_cycle_day, moon_phase
from sunsync.synchronizer import TimeSynchronizer

MADRID = "40.4168, -3.7038"


class FakeWorld:
    def __init__(self):
        self.times = []
        self.updated = threading.Event()

    def set_time(self, ticks):
        self.times.append(ticks)
        self.updated.set()


class FakeClock:
    def __init__(self, when):
        self.when = when

    def __call__(self):
        return self.when


def _synchronizer(location=MADRID, when=datetime(2023, 6, 21, 12, 0), moon=False):
    config = Configuration(location=location, sync_moon_phase=moon)
    world = FakeWorld()
    clock = FakeClock(utc.localize(when))
    return TimeSynchronizer(config, world, clock=clock), world, clock


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logging.getLogger("sunsync").setLevel(logging.NOTSET)


def test_synchronize_once_pushes_daytime():
    sync, world, _ = _synchronizer()
    ticks = sync.synchronize_once()
    assert world.times == [ticks]
    assert 23000 < ticks < 37000
    assert abs(ticks - 30000) < 1000


def test_synchronize_once_at_night():
    sync, _, _ = _synchronizer(when=datetime(2023, 6, 21, 0, 30))
    assert 37000 < sync.synchronize_once() < 47000


def test_moon_offset():
    when = datetime(2023, 2, 13, 22, 0)
    plain, _, _ = _synchronizer(when=when, moon=False)
    with_moon, _, _ = _synchronizer(when=when, moon=True)
    expected_day = lunar_cycle_day(moon_phase(utc.localize(when)))
    offset = with_moon.synchronize_once() - plain.synchronize_once()
    assert offset == 24000 * ((expected_day - 1) % 8)


def test_full_moon_night_shows_full_moon():
    """In the game the moon phase is (ticks // 24000) % 8, with 0 a full moon."""
    sync, _, _ = _synchronizer(when=datetime(2023, 2, 5, 22, 0), moon=True)
    ticks = sync.synchronize_once()
    assert (ticks // 24000) % 8 == lunar_cycle_day(moon_phase(utc.localize(datetime(2023, 2, 5, 22, 0))))
    assert (ticks // 24000) % 8 == 0


def test_never_rises_pushes_midnight(caplog):
    sync, world, _ = _synchronizer(location="80, 15", when=datetime(2023, 12, 21, 12, 0))
    with caplog.at_level(logging.WARNING, logger="sunsync.synchronizer"):
        assert sync.synchronize_once() == 42000
    assert world.times == [42000]
    assert "will not rise" in caplog.text


def test_never_sets_pushes_midday(caplog):
    sync, _, _ = _synchronizer(location="80, 15", when=datetime(2023, 6, 21, 0, 0))
    with caplog.at_level(logging.WARNING, logger="sunsync.synchronizer"):
        assert sync.synchronize_once() == 30000
    assert "will not set" in caplog.text


def test_solar_days_are_cached_per_utc_date(monkeypatch):
    calls = []
    real = synchronizer_module.sunrise_and_sunset_times

    def counting(coordinate, on_date):
        calls.append(on_date)
        return real(coordinate, on_date)

    monkeypatch.setattr(synchronizer_module, "sunrise_and_sunset_times", counting)
    sync, _, clock = _synchronizer()

    sync.synchronize_once()
    sync.synchronize_once()
    assert len(calls) == 3

    clock.when = utc.localize(datetime(2023, 6, 22, 0, 5))
    sync.synchronize_once()
    assert len(calls) == 6

    assert sync.set_location("10 10.23")
    assert len(calls) == 9


def test_set_location():
    sync, world, _ = _synchronizer()
    assert sync.set_location("ES") is False
    assert sync.set_location("51.5, -0.13")
    assert sync.config.coordinate.latitude == 51.5
    assert len(world.times) == 1
    assert sync.set_location("1.11.1") is False
    assert sync.config.coordinate.latitude == 51.5


def test_fake_clock():
    sync, world, _ = _synchronizer()
    assert sync.now() == utc.localize(datetime(2023, 6, 21, 12, 0))
    assert sync.set_fake_time(time(3, 0)) == utc.localize(datetime(2023, 6, 21, 3, 0))
    assert sync.now() == utc.localize(datetime(2023, 6, 21, 3, 0))
    assert sync.synchronize_once() > 37000
    assert sync.reset_clock() == utc.localize(datetime(2023, 6, 21, 12, 0))


def test_background_loop():
    sync, world, _ = _synchronizer()
    assert sync.paused
    assert sync.resume()
    try:
        assert world.updated.wait(timeout=5)
        assert not sync.paused
        assert not sync.resume()
    finally:
        assert sync.pause()
    assert sync.paused
    assert not sync.pause()


def test_synchronize_now_when_paused():
    sync, world, _ = _synchronizer()
    sync.synchronize_now()
    assert len(world.times) == 1
    assert sync.paused


def test_sync_interval():
    sync, _, _ = _synchronizer()
    sync.set_sync_interval_seconds(60)
    assert sync.config.sync_interval_seconds == 60
    with pytest.raises(ConfigError):
        sync.set_sync_interval_seconds(0)


def test_debug_mode_lowers_package_logger():
    sync, _, _ = _synchronizer()
    sync.set_debug_mode(True)
    assert sync.config.debug_mode
    assert logging.getLogger("sunsync").level == logging.DEBUG
    sync.set_debug_mode(False)
    assert logging.getLogger("sunsync").level == logging.NOTSET
