"""Persisted configuration: an INI file with environment overrides."""

import configparser
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from sunsync.location import AUTO, load_regions, parse_location
from sunsync.models import GeographicCoordinate

logger = logging.getLogger(__name__)

CONFIG_PATH = Path("sunsync.cfg")
SECTION = "sunsync"

SYNC_INTERVAL_DEFAULT = 5
SYNC_INTERVAL_MIN = 1
SYNC_INTERVAL_MAX = 1800
LANGUAGES = ("en", "es")

DEFAULT_CONFIG = f"""[{SECTION}]
# "auto", decimal degrees ("40.4168, -3.7038"), sexagesimal degrees
# (40°25'0" N, 3°42'13" W) or a two-letter region code ("ES")
location = auto
# Seconds between two synchronizations ({SYNC_INTERVAL_MIN}..{SYNC_INTERVAL_MAX})
synchronization_interval_seconds = {SYNC_INTERVAL_DEFAULT}
# Log every synchronization step
debug_mode = false
# Advance the game's lunar cycle to match the real Moon
sync_moon_phase = true
# Language of command replies (en, es)
language = en
"""

# Environment variable → option name. A .env file is honoured by the entry point.
ENV_OVERRIDES = {
    "SUNSYNC_LOCATION": "location",
    "SUNSYNC_SYNC_INTERVAL_SECONDS": "synchronization_interval_seconds",
    "SUNSYNC_DEBUG_MODE": "debug_mode",
    "SUNSYNC_SYNC_MOON_PHASE": "sync_moon_phase",
    "SUNSYNC_LANGUAGE": "language",
}

_BOOLEANS = {"true": True, "yes": True, "on": True, "1": True,
             "false": False, "no": False, "off": False, "0": False}


class ConfigError(ValueError):
    """Invalid configuration value."""


@dataclass
class Configuration:
    """Runtime settings. Setters validate and raise ConfigError."""

    regions: dict[str, GeographicCoordinate] = field(default_factory=dict, repr=False)
    location: str = AUTO
    coordinate: GeographicCoordinate = field(default_factory=GeographicCoordinate.default)
    sync_interval_seconds: int = SYNC_INTERVAL_DEFAULT
    debug_mode: bool = False
    sync_moon_phase: bool = True
    language: str = "en"

    def __post_init__(self) -> None:
        self.set_location(self.location)

    def set_location(self, location: str) -> None:
        coordinate = parse_location(location, self.regions)
        if coordinate is None:
            raise ConfigError(
                f'Invalid location "{location}". Use a geographic coordinate, a region code or "auto".'
            )
        self.location = location.strip()
        self.coordinate = coordinate

    def set_sync_interval_seconds(self, seconds: int) -> None:
        if not SYNC_INTERVAL_MIN <= seconds <= SYNC_INTERVAL_MAX:
            raise ConfigError(
                f"Synchronization interval must be between {SYNC_INTERVAL_MIN} and "
                f"{SYNC_INTERVAL_MAX} seconds, got {seconds}"
            )
        self.sync_interval_seconds = seconds

    def set_language(self, language: str) -> None:
        if language not in LANGUAGES:
            raise ConfigError(f"Unsupported language {language!r}; use one of {', '.join(LANGUAGES)}")
        self.language = language


def _parse_bool(value: str) -> bool:
    try:
        return _BOOLEANS[value.strip().lower()]
    except KeyError:
        raise ConfigError(f"Expected a boolean (true or false), got {value!r}") from None


def _raw_options(path: Path) -> dict[str, str]:
    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read(path, encoding="utf-8")
    except configparser.Error as e:
        logger.error("Config file %s is unreadable, using default values: %s", path, e)
        options = {}
    else:
        options = dict(parser[SECTION]) if parser.has_section(SECTION) else {}
    for env_name, option in ENV_OVERRIDES.items():
        if env_name in os.environ:
            options[option] = os.environ[env_name]
    return options


def load_config(path: Path | None = None, regions: dict[str, GeographicCoordinate] | None = None) -> Configuration:
    """Load settings from the INI file, creating it with defaults if missing.

    Environment variables listed in ENV_OVERRIDES take priority over the file.
    An invalid value is logged and replaced by its default; it never aborts
    loading.
    """
    path = path or CONFIG_PATH
    if not path.exists():
        path.write_text(DEFAULT_CONFIG, encoding="utf-8")
        logger.info("Created default config file: %s", path.resolve())

    config = Configuration(regions=regions if regions is not None else load_regions())
    options = _raw_options(path)

    if "debug_mode" in options:
        try:
            config.debug_mode = _parse_bool(options["debug_mode"])
        except ConfigError:
            logger.error('"debug_mode" value in %s is invalid, using default value. Please, use true or false.', path)
    if config.debug_mode:
        logger.warning('Debug mode is enabled. Set "debug_mode" to false in %s to disable it.', path)

    if "location" in options:
        try:
            config.set_location(options["location"])
        except ConfigError:
            logger.error(
                '"location" value in %s is invalid, using default coordinates. '
                'Please, set a valid geographic coordinate or "auto".',
                path,
            )
    logger.debug("Using geographic coordinates: %s", config.coordinate)

    if "synchronization_interval_seconds" in options:
        try:
            config.set_sync_interval_seconds(int(options["synchronization_interval_seconds"]))
        except ValueError:
            logger.error(
                '"synchronization_interval_seconds" value in %s is invalid, using default value. '
                "Please, use integer values between %d and %d.",
                path,
                SYNC_INTERVAL_MIN,
                SYNC_INTERVAL_MAX,
            )
    logger.debug("Synchronization interval set to %d seconds", config.sync_interval_seconds)

    if "sync_moon_phase" in options:
        try:
            config.sync_moon_phase = _parse_bool(options["sync_moon_phase"])
        except ConfigError:
            logger.error('"sync_moon_phase" value in %s is invalid, using default value.', path)

    if "language" in options:
        try:
            config.set_language(options["language"].strip())
        except ConfigError:
            logger.error('"language" value in %s is invalid, using "en".', path)

    return config


def save_config(config: Configuration, path: Path | None = None) -> Path:
    """Write the current settings back to the INI file."""
    path = path or CONFIG_PATH
    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read(path, encoding="utf-8")
    except configparser.Error as e:
        logger.warning("Overwriting unreadable config file %s: %s", path, e)
        parser = configparser.ConfigParser(interpolation=None)
    if not parser.has_section(SECTION):
        parser.add_section(SECTION)
    parser.set(SECTION, "location", config.location)
    parser.set(SECTION, "synchronization_interval_seconds", str(config.sync_interval_seconds))
    parser.set(SECTION, "debug_mode", str(config.debug_mode).lower())
    parser.set(SECTION, "sync_moon_phase", str(config.sync_moon_phase).lower())
    parser.set(SECTION, "language", config.language)
    with path.open("w", encoding="utf-8") as f:
        parser.write(f)
    logger.debug("Configuration saved to %s", path)
    return path
