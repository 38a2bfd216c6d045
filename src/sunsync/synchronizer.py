"""Synchronization service: periodically pushes the interpolated game time into a world."""

import logging
import threading
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from typing import Protocol

from pytz import utc

from sunsync.config import ConfigError, Configuration
from sunsync.interpolate import interpolate_game_time
from sunsync.models import DegenerateDay, GameTimeScale, NeverRises, RiseAndSet, SolarDay
from sunsync.moon import lunar_cycle_day, moon_phase
from sunsync.sun import sunrise_and_sunset_times

logger = logging.getLogger(__name__)

# Loggers of every sunsync module share this parent.
PACKAGE_LOGGER = "sunsync"


class World(Protocol):
    def set_time(self, ticks: int) -> None: ...


def _system_clock() -> datetime:
    return datetime.now(utc)


def _describe(day: SolarDay) -> str:
    if isinstance(day, RiseAndSet):
        return f"rise at {day.rise_utc.time()} (UTC), set at {day.set_utc.time()} (UTC)"
    if isinstance(day, NeverRises):
        return "the Sun never rises"
    return "the Sun never sets"


def apply_debug_mode(enabled: bool) -> None:
    """Lower the package logger to DEBUG, or hand the level back to the root logger."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if enabled else logging.NOTSET)


class TimeSynchronizer:
    """Keeps a world's clock in step with the real Sun (and optionally the Moon).

    Solar days are cached per UTC calendar date and recomputed when the date
    or the location changes. A background thread calls synchronize_once()
    every ``config.sync_interval_seconds``; the synchronizer starts paused.

    Args:
        config: Settings; the coordinate, interval, debug and moon options are
            read on every synchronization.
        world: Receives the game time through ``set_time(ticks)``.
        scale: Game clock segments. Defaults to the Minecraft clock.
        clock: Returns the current aware UTC datetime. Defaults to the system
            clock.
    """

    def __init__(
        self,
        config: Configuration,
        world: World,
        scale: GameTimeScale | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.world = world
        self.scale = scale or GameTimeScale.minecraft()
        self._clock = clock or _system_clock
        self._clock_offset = timedelta(0)

        self._lock = threading.Lock()
        self._cached_date: date | None = None
        self._cached_days: tuple[SolarDay, SolarDay, SolarDay] | None = None

        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._paused = True

        apply_debug_mode(config.debug_mode)

    # --- clock ---

    def now(self) -> datetime:
        """Current UTC instant, including the fake clock offset."""
        return self._clock().astimezone(utc) + self._clock_offset

    def set_fake_time(self, time_of_day: time) -> datetime:
        """Offset the clock so that it reads ``time_of_day`` (UTC) today.

        The offset keeps running with the real clock; the system time is not
        changed. Returns the new reading.
        """
        real_now = self._clock().astimezone(utc)
        then = utc.localize(datetime.combine(real_now.date(), time_of_day))
        self._clock_offset = then - real_now
        logger.debug("Fake clock offset set to %s", self._clock_offset)
        return self.now()

    def reset_clock(self) -> datetime:
        """Drop the fake clock offset. Returns the new reading."""
        self._clock_offset = timedelta(0)
        return self.now()

    # --- solar day cache ---

    def solar_days(self, now: datetime | None = None) -> tuple[SolarDay, SolarDay, SolarDay]:
        """Yesterday's, today's and tomorrow's solar days around ``now``."""
        today = (now or self.now()).astimezone(utc).date()
        with self._lock:
            if self._cached_date != today or self._cached_days is None:
                coordinate = self.config.coordinate
                self._cached_days = (
                    sunrise_and_sunset_times(coordinate, today - timedelta(days=1)),
                    sunrise_and_sunset_times(coordinate, today),
                    sunrise_and_sunset_times(coordinate, today + timedelta(days=1)),
                )
                self._cached_date = today
                yesterday, current, tomorrow = self._cached_days
                logger.debug("Yesterday's events -> %s", _describe(yesterday))
                logger.debug("Today's events -> %s", _describe(current))
                logger.debug("Tomorrow's events -> %s", _describe(tomorrow))
            return self._cached_days

    def invalidate(self) -> None:
        with self._lock:
            self._cached_date = None
            self._cached_days = None

    # --- synchronization ---

    def game_time(self, now: datetime | None = None) -> int:
        """Game time for ``now`` (default: the clock), lunar offset included."""
        now = (now or self.now()).astimezone(utc)
        yesterday, today, tomorrow = self.solar_days(now)
        result = interpolate_game_time(yesterday, today, tomorrow, now, self.scale)

        if isinstance(result, DegenerateDay):
            ticks = int(result.game_time)
            if isinstance(result.cause, NeverRises):
                logger.warning(
                    "The Sun will not rise on %s. Setting game time to midnight (game time %d).",
                    result.cause.day,
                    ticks,
                )
            else:
                logger.warning(
                    "The Sun will not set on %s. Setting game time to midday (game time %d).",
                    result.cause.day,
                    ticks,
                )
        else:
            ticks = int(result)

        if self.config.sync_moon_phase:
            cycle_day = lunar_cycle_day(moon_phase(now))
            ticks += self.scale.ticks_per_day * ((cycle_day - 1) % 8)
        return ticks

    def synchronize_once(self) -> int:
        """Compute the game time for the current clock reading and push it to the world."""
        now = self.now()
        logger.debug("The time is %s (UTC)", now.time())
        ticks = self.game_time(now)
        self.world.set_time(ticks)
        logger.debug("World synchronized to game time %d", ticks)
        return ticks

    def synchronize_now(self) -> None:
        """Synchronize immediately; a running loop is restarted so its period starts now."""
        if self._paused:
            self.synchronize_once()
        else:
            self.start()

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            try:
                self.synchronize_once()
            except Exception:
                logger.exception("Time synchronization failed")
            stop_event.wait(self.config.sync_interval_seconds)

    # --- lifecycle ---

    @property
    def paused(self) -> bool:
        return self._paused

    def start(self) -> None:
        """(Re)start the background loop. The first synchronization runs at once."""
        self.stop()
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), name="sunsync-timesync", daemon=True
        )
        self._paused = False
        self._thread.start()
        logger.debug("Started/Restarted time synchronization")

    def stop(self) -> None:
        self._paused = True
        self._stop_event.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        logger.debug("Time synchronization stopped")

    def pause(self) -> bool:
        """Stop the loop. Returns False if it was already paused."""
        if self._paused:
            return False
        self.stop()
        return True

    def resume(self) -> bool:
        """Restart the loop. Returns False if it was already running."""
        if not self._paused:
            return False
        self.start()
        return True

    # --- settings ---

    def set_location(self, text: str) -> bool:
        """Change the location and resynchronize. Returns False for invalid text."""
        try:
            self.config.set_location(text)
        except ConfigError as e:
            logger.debug("%s", e)
            return False
        self.invalidate()
        logger.debug("Using geographic coordinates: %s", self.config.coordinate)
        self.synchronize_now()
        return True

    def set_sync_interval_seconds(self, seconds: int) -> None:
        """Raises ConfigError when out of range. A running loop picks up the new period."""
        self.config.set_sync_interval_seconds(seconds)
        if not self._paused:
            self.start()

    def set_debug_mode(self, enabled: bool) -> None:
        self.config.debug_mode = enabled
        apply_debug_mode(enabled)
