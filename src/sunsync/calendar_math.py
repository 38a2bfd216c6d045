"""Calendar helpers shared by the solar and lunar formulas."""

import math


def modulo(dividend: float, divisor: float) -> float:
    """Floor-division modulo; the sign of the result follows the divisor.

    Unlike ``math.fmod`` (truncating) this keeps negative angles and hours in
    ``[0, divisor)`` for a positive divisor.
    """
    result = dividend - divisor * math.floor(dividend / divisor)
    # A tiny negative dividend rounds up to exactly the divisor.
    if result == divisor:
        return 0.0
    return result


def to_julian_date(day: float, month: int, year: int) -> float:
    """Convert a Gregorian calendar date to a Julian Date.

    Args:
        day: Day of month; may carry a fractional part (0.5 = noon UT).
        month: 1..12.
        year: Gregorian year.

    Returns:
        Julian Date. Intermediate century, year and month terms are truncated
        toward zero. No Julian/Gregorian switch correction is applied, so the
        result is only meaningful for Gregorian dates.
    """
    month_p = month
    year_p = year
    if month in (1, 2):
        month_p = month + 12
        year_p = year - 1

    a = int(year_p / 100.0)
    b = 2 - a + int(a / 4.0)
    if year_p < 0:
        c = int((365.25 * year_p) - 0.75)
    else:
        c = int(365.25 * year_p)
    d = int(30.6001 * (month_p + 1))
    return b + c + d + day + 1720994.5


# "2010 January 0.0", the epoch of the solar and lunar orbital constants.
EPOCH_2010 = to_julian_date(0, 1, 2010)
