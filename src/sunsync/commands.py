"""The /timesync command and detection of commands that would fight the synchronizer."""

import logging
import re
from collections.abc import Callable, Sequence
from datetime import time

from sunsync.config import SYNC_INTERVAL_MAX, SYNC_INTERVAL_MIN
from sunsync.i18n import t
from sunsync.synchronizer import TimeSynchronizer

logger = logging.getLogger(__name__)

_TIME_CHANGING_COMMAND = re.compile(r"/?(minecraft:)?time\s+(set|add).*")

CLOCK_DEFAULT = "default"
BOOLEAN_VALUES = ("true", "false")


def command_changes_game_time(command: str) -> bool:
    """Whether a chat or console command would set or advance the game time.

    ``time set`` and ``time add`` (with or without a leading slash and the
    ``minecraft:`` namespace) match; ``time query`` does not.
    """
    return _TIME_CHANGING_COMMAND.fullmatch(command.strip().lower()) is not None


def parse_clock(value: str) -> time | None:
    """Parse ``HH:MM`` or ``HH:MM:SS`` (24-hour, UTC). Returns None when invalid."""
    parts = value.split(":")
    if not 2 <= len(parts) <= 3:
        return None
    try:
        hour, minute, *rest = (int(part) for part in parts)
    except ValueError:
        return None
    second = rest[0] if rest else 0
    if not (0 <= hour < 24 and 0 <= minute < 60 and 0 <= second < 60):
        return None
    return time(hour, minute, second)


class TimeSyncCommand:
    """Handler for ``/timesync <parameter> [value...]``. Replies are plain strings."""

    name = "SunSync"

    def __init__(self, synchronizer: TimeSynchronizer) -> None:
        self.synchronizer = synchronizer
        self._parameters: dict[str, Callable[[list[str]], str]] = {
            "location": self._location,
            "syncIntervalSec": self._sync_interval,
            "clock": self._clock,
            "debugMode": self._debug_mode,
            "continue": self._continue,
            "pause": self._pause,
        }

    @property
    def lang(self) -> str:
        return self.synchronizer.config.language

    def execute(self, args: Sequence[str]) -> str:
        if not args:
            return t("usage", self.lang)
        parameter, *rest = args
        handler = self._parameters.get(parameter)
        if handler is None:
            return t("unknown_parameter", self.lang, parameter=parameter)
        return handler(rest)

    def tab_complete(self, args: Sequence[str]) -> list[str]:
        """Suggestions for the argument being typed (the last one in ``args``)."""
        if len(args) <= 1:
            prefix = args[0] if args else ""
            return [name for name in self._parameters if name.startswith(prefix)]
        if len(args) == 2:
            parameter, prefix = args
            if parameter == "location":
                options = ["auto", *sorted(self.synchronizer.config.regions)]
            elif parameter == "debugMode":
                options = list(BOOLEAN_VALUES)
            elif parameter == "clock":
                options = [CLOCK_DEFAULT]
            else:
                return []
            return [option for option in options if option.startswith(prefix)]
        return []

    def blocked_command_notice(self, command: str) -> str | None:
        """Notice for a command that changes the game time, or None if it is harmless."""
        if not command_changes_game_time(command):
            return None
        logger.warning("This command will have no effect while %s is enabled: %s", self.name, command)
        return t("time_command_blocked", self.lang, name=self.name)

    # --- parameters ---

    def _location(self, args: list[str]) -> str:
        config = self.synchronizer.config
        if not args:
            return t("location_current", self.lang, coordinate=config.coordinate)
        if self.synchronizer.set_location(" ".join(args)):
            return t("location_set", self.lang, coordinate=config.coordinate)
        return t("location_invalid", self.lang)

    def _sync_interval(self, args: list[str]) -> str:
        config = self.synchronizer.config
        if not args:
            return t("interval_current", self.lang, seconds=config.sync_interval_seconds)
        try:
            self.synchronizer.set_sync_interval_seconds(int(args[0]))
        except ValueError:
            # ConfigError is a ValueError too
            return t("interval_invalid", self.lang, minimum=SYNC_INTERVAL_MIN, maximum=SYNC_INTERVAL_MAX)
        return t("interval_set", self.lang, seconds=config.sync_interval_seconds)

    def _debug_mode(self, args: list[str]) -> str:
        config = self.synchronizer.config
        if not args:
            return t("debug_enabled_status" if config.debug_mode else "debug_disabled_status", self.lang)
        value = args[0]
        if value not in BOOLEAN_VALUES:
            return t("debug_invalid", self.lang)
        enabled = value == "true"
        if enabled == config.debug_mode:
            return t("debug_already_enabled" if enabled else "debug_already_disabled", self.lang)
        self.synchronizer.set_debug_mode(enabled)
        return t("debug_enabled" if enabled else "debug_disabled", self.lang)

    def _clock(self, args: list[str]) -> str:
        if not args:
            return t("clock_current", self.lang, time=self.synchronizer.now().time().replace(microsecond=0))
        value = args[0]
        if value == CLOCK_DEFAULT:
            now = self.synchronizer.reset_clock()
        else:
            fake_time = parse_clock(value)
            if fake_time is None:
                return t("clock_invalid", self.lang)
            now = self.synchronizer.set_fake_time(fake_time)
        self.synchronizer.synchronize_now()
        return t("clock_set", self.lang, time=now.time().replace(microsecond=0))

    def _continue(self, args: list[str]) -> str:
        if self.synchronizer.resume():
            return t("sync_restarted", self.lang)
        return t("sync_already_running", self.lang)

    def _pause(self, args: list[str]) -> str:
        if self.synchronizer.pause():
            return t("sync_paused", self.lang)
        return t("sync_already_paused", self.lang)

