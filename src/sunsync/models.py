"""Data model definitions shared by the solar, lunar and game-time layers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


class InvalidCoordinate(ValueError):
    """Latitude or longitude outside the valid range."""


@dataclass(frozen=True)
class GeographicCoordinate:
    """A point on Earth. Validated at construction."""

    latitude: float  # Decimal degrees, positive north
    longitude: float  # Decimal degrees, positive east

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidCoordinate(
                f"Latitude must be between -90 and 90, got {self.latitude}"
            )
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidCoordinate(
                f"Longitude must be between -180 and 180, got {self.longitude}"
            )

    @classmethod
    def default(cls) -> GeographicCoordinate:
        """The fallback coordinate (0°, 0°) used when nothing else is known."""
        return cls(0.0, 0.0)

    @classmethod
    def from_decimal_degrees(cls, latitude: float, longitude: float) -> GeographicCoordinate:
        return cls(float(latitude), float(longitude))

    @classmethod
    def from_sexagesimal(
        cls,
        lat_degrees: float,
        lat_arcminutes: float,
        lat_arcseconds: float,
        lon_degrees: float,
        lon_arcminutes: float,
        lon_arcseconds: float,
    ) -> GeographicCoordinate:
        """Build a coordinate from degrees, arc-minutes and arc-seconds.

        Every component carries the hemisphere sign: south latitudes and west
        longitudes are passed as negative degrees, minutes and seconds.
        """
        latitude = lat_degrees + lat_arcminutes / 60.0 + lat_arcseconds / 3600.0
        longitude = lon_degrees + lon_arcminutes / 60.0 + lon_arcseconds / 3600.0
        return cls.from_decimal_degrees(latitude, longitude)

    def __str__(self) -> str:
        return f"{_format_degrees(self.latitude)}, {_format_degrees(self.longitude)}"


def _format_degrees(value: float) -> str:
    text = f"{value:.6f}".rstrip("0")
    if text.endswith("."):
        text += "0"
    if text == "-0.0":
        text = "0.0"
    return text


@dataclass(frozen=True)
class EclipticCoordinate:
    """Position relative to the ecliptic plane. No validation is performed."""

    latitude: float  # Ecliptic latitude (degrees)
    longitude: float  # Ecliptic longitude (degrees)

    def to_equatorial(self, day: float, month: int, year: int) -> EquatorialCoordinate:
        from sunsync.sun import ecliptic_to_equatorial

        return ecliptic_to_equatorial(self.latitude, self.longitude, day, month, year)


@dataclass(frozen=True)
class EquatorialCoordinate:
    """Position relative to the celestial equator. No validation is performed."""

    right_ascension: float  # Hours [0, 24)
    declination: float  # Degrees


@dataclass(frozen=True)
class RiseAndSet:
    """Sunrise and sunset of one UTC calendar day."""

    rise_utc: datetime  # tz-aware UTC, same calendar date as set_utc
    set_utc: datetime


@dataclass(frozen=True)
class NeverRises:
    """The Sun stays below the horizon for the whole day."""

    day: date


@dataclass(frozen=True)
class NeverSets:
    """The Sun stays above the horizon for the whole day."""

    day: date


SolarDay = RiseAndSet | NeverRises | NeverSets


@dataclass(frozen=True)
class GameTimeScale:
    """Maps a real elapsed fraction of day or night onto the game's cyclic clock.

    The day segment runs from ``day_start`` for ``day_length`` ticks and the
    night segment from ``night_start`` for ``night_length`` ticks. ``midday``
    and ``midnight`` are pushed when the Sun never sets or never rises.
    """

    day_length: float
    day_start: float
    night_length: float
    night_start: float
    midday: float
    midnight: float
    ticks_per_day: int = 24000

    @classmethod
    def minecraft(cls) -> GameTimeScale:
        # Sunrise cannot start at tick -1000, so it starts at the next valid one.
        return cls(
            day_length=14000,
            day_start=23000,
            night_length=10000,
            night_start=37000,
            midday=30000,
            midnight=42000,
        )


@dataclass(frozen=True)
class DegenerateDay:
    """Interpolation was skipped because the Sun never rises or never sets."""

    cause: NeverRises | NeverSets
    game_time: float  # Fallback chosen from the scale (midnight or midday)
