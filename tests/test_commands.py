"""Tests for the /timesync command and the time command detector."""

import logging
from datetime import datetime, time

import pytest
from pytz import utc

from sunsync.commands import TimeSyncCommand, command_changes_game_time, parse_clock
from sunsync.config import Configuration
from sunsync.models import GeographicCoordinate
from sunsync.synchronizer import TimeSynchronizer


class FakeWorld:
    def __init__(self):
        self.times = []

    def set_time(self, ticks):
        self.times.append(ticks)


@pytest.fixture
def world():
    return FakeWorld()


@pytest.fixture
def command(world):
    config = Configuration(
        regions={"ES": GeographicCoordinate(40.463667, -3.74922)},
        location="40.4168, -3.7038",
        sync_moon_phase=False,
    )
    clock_reading = utc.localize(datetime(2023, 6, 21, 12, 0))
    sync = TimeSynchronizer(config, world, clock=lambda: clock_reading)
    yield TimeSyncCommand(sync)
    sync.stop()
    logging.getLogger("sunsync").setLevel(logging.NOTSET)


@pytest.mark.parametrize("verb", ["set", "add"])
@pytest.mark.parametrize("prefix", ["", "/", "minecraft:", "/minecraft:"])
def test_detects_commands_that_change_time(prefix, verb):
    assert command_changes_game_time(f"{prefix}time {verb} day")
    assert command_changes_game_time(f"  {prefix}time {verb} night  ")
    assert command_changes_game_time(f"  {prefix}time     {verb}    5  ")
    assert command_changes_game_time(f"{prefix}TIME {verb} 4".upper())


@pytest.mark.parametrize(
    "text",
    [
        "/time query day",
        "  /time query daytime  ",
        "  /time     query    gametime  ",
        "/TIME query gametime",
        "time query day",
        "TIME query gametime",
        "minecraft:time query day",
        "  minecraft:time     query    gametime  ",
        "MINECRAFT:TIME query gametime",
        "/timeset day",
        "/weather clear",
    ],
)
def test_ignores_other_commands(text):
    assert not command_changes_game_time(text)


@pytest.mark.parametrize(
    "value, expected",
    [("12:30", time(12, 30)), ("00:00:59", time(0, 0, 59)), ("23:59:59", time(23, 59, 59))],
)
def test_parse_clock(value, expected):
    assert parse_clock(value) == expected


@pytest.mark.parametrize("value", ["24:00", "12", "12:60", "12:00:60", "1:2:3:4", "ab:cd", "-1:00", ""])
def test_parse_clock_invalid(value):
    assert parse_clock(value) is None


def test_usage_and_unknown_parameter(command):
    assert command.execute([]).startswith("Usage: /timesync")
    assert command.execute(["foo"]) == 'Unknown parameter "foo"'


def test_location(command, world):
    assert command.execute(["location"]) == "Current location is 40.4168, -3.7038"
    assert command.execute(["location", "ES"]) == "Location set to 40.463667, -3.74922"
    assert world.times
    assert command.execute(["location", "51.5,", "-0.13"]) == "Location set to 51.5, -0.13"
    assert command.execute(["location", "91", "0"]).startswith("Invalid coordinates")
    assert command.execute(["location"]) == "Current location is 51.5, -0.13"


def test_sync_interval(command):
    assert command.execute(["syncIntervalSec"]) == "Synchronization interval is set to 5 seconds"
    assert command.execute(["syncIntervalSec", "60"]) == "Synchronization interval set to 60 seconds"
    invalid = "Invalid value. Please, enter an integer value between 1 and 1800"
    assert command.execute(["syncIntervalSec", "0"]) == invalid
    assert command.execute(["syncIntervalSec", "soon"]) == invalid
    assert command.execute(["syncIntervalSec"]) == "Synchronization interval is set to 60 seconds"


def test_debug_mode(command):
    assert command.execute(["debugMode"]) == "Debug mode is disabled"
    assert command.execute(["debugMode", "maybe"]) == "Invalid value. Please, enter a boolean value (true|false)"
    assert command.execute(["debugMode", "false"]) == "Debug mode is already disabled!"
    assert command.execute(["debugMode", "true"]) == "Debug mode enabled"
    assert command.execute(["debugMode", "true"]) == "Debug mode is already enabled!"
    assert command.execute(["debugMode"]) == "Debug mode is enabled"
    assert command.execute(["debugMode", "false"]) == "Debug mode disabled"


def test_clock(command, world):
    assert command.execute(["clock"]) == "The system time is 12:00:00 (UTC)"
    assert command.execute(["clock", "25:00"]).startswith("Invalid time")
    assert not world.times
    assert command.execute(["clock", "03:15"]) == "System time set to 03:15:00 (UTC)"
    assert world.times[-1] > 37000
    assert command.execute(["clock"]) == "The system time is 03:15:00 (UTC)"
    assert command.execute(["clock", "default"]) == "System time set to 12:00:00 (UTC)"


def test_pause_and_continue(command):
    assert command.execute(["pause"]) == "Time synchronization is already paused!"
    assert command.execute(["continue"]) == "Time synchronization restarted"
    assert command.execute(["continue"]) == "Time synchronization is already running!"
    assert command.execute(["pause"]) == "Time synchronization paused"


def test_tab_complete(command):
    parameters = {"location", "syncIntervalSec", "clock", "debugMode", "continue", "pause"}
    assert set(command.tab_complete([])) == parameters
    assert set(command.tab_complete([""])) == parameters
    assert command.tab_complete(["lo"]) == ["location"]
    assert set(command.tab_complete(["c"])) == {"clock", "continue"}
    assert command.tab_complete(["location", ""]) == ["auto", "ES"]
    assert command.tab_complete(["location", "E"]) == ["ES"]
    assert command.tab_complete(["debugMode", "t"]) == ["true"]
    assert command.tab_complete(["clock", "d"]) == ["default"]
    assert command.tab_complete(["pause", ""]) == []
    assert command.tab_complete(["location", "40", "3"]) == []


def test_spanish_replies(command):
    command.synchronizer.config.set_language("es")
    assert command.execute(["foo"]) == 'Parámetro desconocido "foo"'
    assert command.execute(["pause"]) == "¡La sincronización horaria ya está en pausa!"


def test_blocked_command_notice(command, caplog):
    assert command.blocked_command_notice("/time query daytime") is None
    with caplog.at_level(logging.WARNING, logger="sunsync.commands"):
        notice = command.blocked_command_notice("/time set day")
    assert notice == "This command will have no effect while SunSync is enabled."
    assert "/time set day" in caplog.text
