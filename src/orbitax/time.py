"""Time conversions used by the propagator and the frame transformations.

Julian dates are handled as a split pair ``(jd, fraction)`` wherever they
are produced from calendar input, so that the whole-day part stays exact in
double precision and minute-level offsets from a TLE epoch do not lose
digits.  The calendar helpers run at Python time; :func:`gmst` is a pure JAX
function and may be traced.
"""

from __future__ import annotations

from math import floor

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from .config import get_dtype
from .constants import DEG2RAD, JD2000, TWO_PI

# Days in each month of a common year
_MONTH_LENGTHS: tuple[int, ...] = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# Two-digit TLE years below this pivot belong to the 2000s
TLE_YEAR_PIVOT = 57


def _is_leap_year(year: int) -> bool:
    return year % 400 == 0 or (year % 4 == 0 and year % 100 != 0)


def jday(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: float = 0.0,
) -> tuple[float, float]:
    """Convert a calendar date to a split Julian Date.

    The whole-day part lands on a half-integer (midnight), and the time of
    day is returned separately as a fraction of a day.  Valid for the years
    1900 through 2100.

    Args:
        year (int): Four-digit year.
        month (int): Month, 1-12.
        day (int): Day of the month.
        hour (int): Hour of the day. Default: ``0``
        minute (int): Minute of the hour. Default: ``0``
        second (float): Seconds, possibly fractional. Default: ``0.0``

    Returns:
        tuple[float, float]: ``(jd, fraction)`` whose sum is the Julian Date.

    References:

        1. D. Vallado, *Fundamentals of Astrodynamics and Applications (4th Ed.)*, Algorithm 14, 2013.
    """
    jd = (
        367.0 * year
        - 7 * (year + ((month + 9) // 12.0)) * 0.25 // 1.0
        + 275 * month / 9.0 // 1.0
        + day
        + 1721013.5
    )
    fraction = (second + minute * 60.0 + hour * 3600.0) / 86400.0
    return jd, fraction


def days_to_mdhms(year: int, days: float) -> tuple[int, int, int, int, float]:
    """Convert a fractional day of the year into a calendar date and time.

    Args:
        year (int): Four-digit year, used to decide whether February has 29 days.
        days (float): Day of the year, starting at ``1.0`` for January 1 00:00.

    Returns:
        tuple: ``(month, day, hour, minute, second)``.
    """
    lmonth = list(_MONTH_LENGTHS)
    if _is_leap_year(year):
        lmonth[1] = 29

    dayofyr = int(floor(days))

    month = 1
    inttemp = 0
    while dayofyr > inttemp + lmonth[month - 1] and month < 12:
        inttemp += lmonth[month - 1]
        month += 1
    day = dayofyr - inttemp

    temp = (days - dayofyr) * 24.0
    hour = int(floor(temp))
    temp = (temp - hour) * 60.0
    minute = int(floor(temp))
    second = (temp - minute) * 60.0

    return month, day, hour, minute, second


def invjday(jd: float, fraction: float = 0.0) -> tuple[int, int, int, int, int, float]:
    """Convert a (split) Julian Date back into a calendar date.

    Inverse of :func:`jday`, valid for the years 1900 through 2100.

    Args:
        jd (float): Julian Date, or its whole-day part.
        fraction (float): Fractional part of the Julian Date. Default: ``0.0``

    Returns:
        tuple: ``(year, month, day, hour, minute, second)``.
    """
    temp = (jd - 2415019.5) + fraction
    tu = temp / 365.25
    year = 1900 + int(floor(tu))
    leapyrs = int(floor((year - 1901) * 0.25))

    # Nudge past representation error at exact day boundaries
    days = temp - ((year - 1900) * 365.0 + leapyrs) + 1.0e-11

    if days < 1.0:
        year -= 1
        leapyrs = int(floor((year - 1901) * 0.25))
        days = temp - ((year - 1900) * 365.0 + leapyrs)

    month, day, hour, minute, second = days_to_mdhms(year, days)
    second = max(second - 1.0e-11 * 86400.0, 0.0)

    return year, month, day, hour, minute, second


def tle_epoch_to_jd(epoch_year: int, epoch_day: float) -> tuple[float, float]:
    """Resolve a TLE epoch into a split Julian Date.

    Two-digit years below 57 are read as 20xx, all others as 19xx, covering
    the 1957-2056 window.  The fraction is rounded to 8 decimals, the
    resolution of the TLE epoch field.

    Args:
        epoch_year (int): Two-digit epoch year from TLE line 1.
        epoch_day (float): Fractional day of the year from TLE line 1.

    Returns:
        tuple[float, float]: ``(jdsatepoch, jdsatepochF)``.
    """
    if epoch_year < TLE_YEAR_PIVOT:
        year = epoch_year + 2000
    else:
        year = epoch_year + 1900

    days_int, fraction = divmod(epoch_day, 1.0)
    jdsatepoch = year * 365 + (year - 1) // 4 + int(days_int) + 1721044.5
    return jdsatepoch, round(fraction, 8)


def gmst(jd: ArrayLike) -> jax.Array:
    """Compute Greenwich Mean Sidereal Time.

    Uses the IAU-82 polynomial referenced to J2000, the convention SGP4 is
    built on.  UT1 is approximated by the supplied Julian Date.

    The polynomial is always evaluated in double precision and only the
    angle is cast to the active dtype: in single precision a Julian Date near
    2.46e6 resolves to about a quarter of a day.

    Args:
        jd (ArrayLike): Julian Date (UT1). Scalar or array.

    Returns:
        Greenwich mean sidereal angle in ``[0, 2pi)`` rad.

    References:

        1. D. Vallado, *Fundamentals of Astrodynamics and Applications (4th Ed.)*, Eq. 3-47, 2013.
    """
    jd = jnp.asarray(jd, dtype=jnp.float64)

    tut1 = (jd - JD2000) / 36525.0
    temp = (
        -6.2e-6 * tut1 * tut1 * tut1
        + 0.093104 * tut1 * tut1
        + (876600.0 * 3600 + 8640184.812866) * tut1
        + 67310.54841
    )
    temp = (temp * DEG2RAD / 240.0) % TWO_PI
    temp = jnp.where(temp < 0.0, temp + TWO_PI, temp)
    return temp.astype(get_dtype())


greenwich_sidereal_time = gmst
