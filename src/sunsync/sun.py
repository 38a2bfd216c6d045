"""Solar position and sunrise/sunset times.

Low-precision formulas, good to a few minutes. All times are UT (treated as
UTC). Acronyms:

- LST: Local Sidereal Time
- GST: Greenwich Sidereal Time
- UT: Universal Time
"""

import logging
import math
from datetime import date, datetime, time

from pytz import utc

from sunsync.calendar_math import EPOCH_2010, modulo, to_julian_date
from sunsync.models import (
    EclipticCoordinate,
    EquatorialCoordinate,
    GeographicCoordinate,
    NeverRises,
    NeverSets,
    RiseAndSet,
    SolarDay,
)

logger = logging.getLogger(__name__)

# sin(0.5667°): refraction and solar radius at the apparent horizon.
VERTICAL_SHIFT_SINE = 0.00989061960670350512825686013281

J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0

# Orbital constants at the 2010 January 0.0 epoch.
# TODO: derive epsilon, omega and e per date from the almanac polynomials.
ECLIPTIC_LONGITUDE_AT_EPOCH = 279.557208  # epsilon
PERIGEE_LONGITUDE = 283.112438  # omega
ECCENTRICITY = 0.016705
TROPICAL_YEAR_DAYS = 365.242191

MEAN_OBLIQUITY_J2000 = 23.439292
SIDEREAL_TO_SOLAR = 0.9972695663


def _mean_motion(day: float, month: int, year: int) -> float:
    days_since_epoch = to_julian_date(day, month, year) - EPOCH_2010
    return modulo((360 / TROPICAL_YEAR_DAYS) * days_since_epoch, 360)


def mean_anomaly(day: float, month: int, year: int) -> float:
    """Sun's mean anomaly in degrees [0, 360)."""
    n = _mean_motion(day, month, year)
    return modulo(n + ECLIPTIC_LONGITUDE_AT_EPOCH - PERIGEE_LONGITUDE, 360)


def ecliptic_longitude(day: float, month: int, year: int) -> float:
    """Sun's ecliptic longitude (lambda) in degrees [0, 360)."""
    n = _mean_motion(day, month, year)
    m = modulo(n + ECLIPTIC_LONGITUDE_AT_EPOCH - PERIGEE_LONGITUDE, 360)
    equation_of_center = (360 / math.pi) * ECCENTRICITY * math.sin(math.radians(m))
    return modulo(n + equation_of_center + ECLIPTIC_LONGITUDE_AT_EPOCH, 360)


def ecliptic_to_equatorial(
    ecl_lat: float, ecl_lon: float, day: float, month: int, year: int
) -> EquatorialCoordinate:
    """Convert ecliptic coordinates to equatorial ones for the given date.

    Args:
        ecl_lat: Ecliptic latitude (degrees).
        ecl_lon: Ecliptic longitude (degrees).
        day, month, year: Date used for the obliquity of the ecliptic.

    Returns:
        EquatorialCoordinate with right ascension in hours [0, 24).
    """
    beta = math.radians(ecl_lat)
    lam = math.radians(ecl_lon)

    t = (to_julian_date(day, month, year) - J2000) / DAYS_PER_CENTURY
    delta_e = (46.815 * t - 0.0006 * t**2 + 0.00181 * t**3) / 3600.0
    obliquity = math.radians(MEAN_OBLIQUITY_J2000 - delta_e)

    declination = math.degrees(
        math.asin(
            math.sin(beta) * math.cos(obliquity)
            + math.cos(beta) * math.sin(obliquity) * math.sin(lam)
        )
    )

    y = math.sin(lam) * math.cos(obliquity) - math.tan(beta) * math.sin(obliquity)
    x = math.cos(lam)
    if x == 0:
        alpha = 90.0 if y >= 0 else 270.0
    else:
        alpha = math.degrees(math.atan(y / x))
        # atan only covers (-90°, 90°); move the angle into its real quadrant
        if x < 0:
            alpha += 180.0
        elif y < 0:
            alpha += 360.0

    return EquatorialCoordinate(right_ascension=alpha / 15.0, declination=declination)


def sun_position_at_day(day: float, month: int, year: int) -> EquatorialCoordinate:
    """Equatorial position of the Sun. Its ecliptic latitude is taken as 0."""
    ecl = EclipticCoordinate(latitude=0.0, longitude=ecliptic_longitude(day, month, year))
    return ecl.to_equatorial(day, month, year)


def gst_to_ut(gst_hour: float, day: int, month: int, year: int) -> time:
    """Convert a Greenwich Sidereal Time on the given date to UT time of day."""
    t = (to_julian_date(day, month, year) - J2000) / DAYS_PER_CENTURY
    t0 = modulo(6.697374558 + (2400.051336 * t) + (0.000025862 * t**2), 24)
    b = modulo(gst_hour - t0, 24) * SIDEREAL_TO_SOLAR

    minute_d = (b - int(b)) * 60
    second_d = (minute_d - int(minute_d)) * 60

    hour = int(b)
    minute = int(minute_d)
    second = math.floor(second_d + 0.5)
    if second == 60:
        second = 59

    return time(hour, minute, second)


def rise_and_set(
    eq: EquatorialCoordinate,
    geo: GeographicCoordinate,
    day: int,
    month: int,
    year: int,
) -> SolarDay:
    """Rise and set UT times of a body at ``eq`` seen from ``geo``.

    Returns NeverRises or NeverSets when the body does not cross the horizon
    on that date.
    """
    delta = math.radians(eq.declination)
    phi = math.radians(geo.latitude)
    on_date = date(year, month, day)

    numerator = VERTICAL_SHIFT_SINE + math.sin(phi) * math.sin(delta)
    denominator = math.cos(phi) * math.cos(delta)
    if denominator == 0:
        # Exactly at a pole: the sign of the altitude term decides.
        logger.debug("Hour angle undefined at latitude %s", geo.latitude)
        return NeverSets(on_date) if numerator > 0 else NeverRises(on_date)

    hour_angle_cosine = -numerator / denominator
    if hour_angle_cosine > 1:
        return NeverRises(on_date)
    if hour_angle_cosine < -1:
        return NeverSets(on_date)

    hour_angle = math.degrees(math.acos(hour_angle_cosine)) / 15
    rise_lst = modulo(eq.right_ascension - hour_angle, 24)
    set_lst = modulo(eq.right_ascension + hour_angle, 24)

    longitude_hours = geo.longitude / 15
    rise_gst = modulo(rise_lst - longitude_hours, 24)
    set_gst = modulo(set_lst - longitude_hours, 24)

    rise_ut = gst_to_ut(rise_gst, day, month, year)
    set_ut = gst_to_ut(set_gst, day, month, year)
    return RiseAndSet(
        rise_utc=utc.localize(datetime.combine(on_date, rise_ut)),
        set_utc=utc.localize(datetime.combine(on_date, set_ut)),
    )


def sunrise_and_sunset_times(coordinate: GeographicCoordinate, on_date: date) -> SolarDay:
    """Approximate UTC sunrise and sunset at sea level for one calendar day.

    The Sun's position is taken at noon of that day. Both returned instants
    fall on ``on_date``; they are correct within a few minutes.
    """
    noon = on_date.day + 0.5
    sun_pos = sun_position_at_day(noon, on_date.month, on_date.year)
    return rise_and_set(sun_pos, coordinate, on_date.day, on_date.month, on_date.year)
