"""Lunar phase estimation and the game's 8-day lunar cycle."""

import math
from datetime import datetime

from pytz import utc

from sunsync import sun
from sunsync.calendar_math import EPOCH_2010, modulo, to_julian_date

# Moon's orbital elements at the 2010 January 0.0 epoch (degrees).
MEAN_LONGITUDE_AT_EPOCH = 91.929336  # l0
PERIGEE_LONGITUDE_AT_EPOCH = 130.143076  # P0

PHASE_NAMES = (
    "new_moon",
    "waxing_crescent",
    "first_quarter",
    "waxing_gibbous",
    "full_moon",
    "waning_gibbous",
    "last_quarter",
    "waning_crescent",
)


def moon_phase(when: datetime) -> float:
    """Phase of the Moon as a normalized value in [0.0, 1.0).

    0.0 is a new moon, 0.25 the first quarter, 0.5 a full moon and 0.75 the
    last quarter. Naive datetimes are read as UTC.
    """
    if when.tzinfo is not None:
        when = when.astimezone(utc)

    day = when.day + when.hour / 24.0 + when.minute / 1440.0 + when.second / 86400.0
    month = when.month
    year = when.year

    sun_mean_anomaly = math.radians(sun.mean_anomaly(day, month, year))
    sun_longitude = sun.ecliptic_longitude(day, month, year)

    days_since_epoch = to_julian_date(day, month, year) - EPOCH_2010
    l = modulo(13.1763966 * days_since_epoch + MEAN_LONGITUDE_AT_EPOCH, 360)  # noqa: E741
    mm = modulo(l - 0.1114041 * days_since_epoch - PERIGEE_LONGITUDE_AT_EPOCH, 360)

    c = l - sun_longitude
    evection = 1.2739 * math.sin(math.radians(2 * c - mm))
    annual_equation = 0.1858 * math.sin(sun_mean_anomaly)
    a3 = 0.37 * math.sin(sun_mean_anomaly)
    corrected_anomaly = math.radians(mm + evection - annual_equation - a3)
    equation_of_center = 6.2886 * math.sin(corrected_anomaly)
    a4 = 0.214 * math.sin(2 * corrected_anomaly)
    corrected_longitude = l + evection + equation_of_center - annual_equation + a4
    variation = 0.6583 * math.sin(math.radians(2 * (corrected_longitude - sun_longitude)))
    true_longitude = corrected_longitude + variation

    return modulo(true_longitude - sun_longitude, 360.0) / 360.0


def phase_name(phase: float) -> str:
    """Conventional name of a phase; each name covers a 1/8 slice around it."""
    index = int(math.floor(modulo(phase + 1 / 16, 1.0) * 8)) % 8
    return PHASE_NAMES[index]


def lunar_cycle_day(phase: float) -> int:
    """Day of the game's 8-day lunar cycle that shows ``phase``.

    Day 0 is a full moon, 2 the last quarter, 4 a new moon and 6 the first
    quarter.
    """
    return int(math.floor(modulo(phase - 0.5, 1.0) * 8 + 0.5)) % 8
