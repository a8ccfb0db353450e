"""Calendar arithmetic: Julian Day, weekday, Easter and ephemeris day numbers.

Julian Day routines follow "Astronomical Algorithms" (Meeus, 1991). Invalid
inputs are reported through sentinel values (see ``skychart.constants``), never
through exceptions, so callers must check the returned value.
"""

from __future__ import annotations

from datetime import datetime

from skychart.constants import (
    DAY_NUMBER_OFFSET,
    INVALID_DATE,
    INVALID_EASTER,
    INVALID_JD,
    JD_DAY_ZERO,
    JD_GREGORIAN_CUTOVER,
    JD_MJD_OFFSET,
    MINUTES_PER_DAY,
    SECONDS_PER_DAY,
)

# Last Julian-calendar day and first Gregorian day of the 1582 reform.
_LAST_JULIAN_DATE = (1582, 10, 4)
_FIRST_GREGORIAN_DATE = (1582, 10, 15)
_REFORM_GAP_DAYS = 10

# Gauss Easter century table: (last year, M, N)
_GAUSS_CENTURIES: tuple[tuple[int, int, int], ...] = (
    (1699, 22, 2),
    (1799, 23, 3),
    (1899, 23, 4),
    (2099, 24, 5),
    (2199, 24, 6),
    (2299, 25, 0),
    (2399, 26, 1),
    (2499, 25, 1),
)

EASTER_MIN_YEAR = 1582
GAUSS_EASTER_MAX_YEAR = 2499


def julian_day(year: int, month: int, day: float) -> float:
    """Return the Julian Day of a civil date, or -1 for an invalid date.

    Year 0 is 1 BCE. The day may carry a fraction for the time of day; JD 0.0
    is noon of -4712-01-01, so an integer day yields the JD of midnight (x.5).
    Dates up to 1582-10-04 use the Julian calendar. The ten civil dates removed
    by the Gregorian reform (1582-10-05 to 1582-10-14) are read as the Gregorian
    days that replaced them, so 1582-10-05 has the JD of 1582-10-15.

    Parameters:
        year: Astronomical year (>= -4712).
        month: Month 1-12.
        day: Day of month, optionally fractional (<= 32).

    Returns:
        Julian Day, or ``INVALID_JD`` (-1).
    """
    if year < -4712 or month < 1 or month > 12 or day > 32:
        return INVALID_JD

    gregorian = True
    date = (year, month, int(day))
    if date <= _LAST_JULIAN_DATE:
        gregorian = False
    elif date < _FIRST_GREGORIAN_DATE:
        day += _REFORM_GAP_DAYS

    if month < 3:
        year -= 1
        month += 12

    b = 0
    if gregorian:
        a = int(year / 100)
        b = 2 - a + int(a / 4)

    return int(365.25 * (year + 4716)) + int(30.6001 * (month + 1)) + day + b - 1524.5


def modified_julian_day(year: int, month: int, day: float) -> float:
    """Return the Modified Julian Day (midnight 1858-11-17 = 0), or -1 if invalid."""
    jd = julian_day(year, month, day)
    return INVALID_JD if jd < 0 else jd - JD_MJD_OFFSET


def weekday(year: int, month: int, day: float) -> int:
    """Return the weekday of a date, 0 = Sunday ... 6 = Saturday, or -1 if invalid."""
    jd = julian_day(year, month, int(day))
    if jd < 0:
        return INVALID_JD
    return int((jd + 1.5) % 7)


def date_from_julian_day(jd: float) -> tuple[int, int, float]:
    """Return the civil date (year, month, day) for a Julian Day.

    Integer days below JD 2299161 are converted with the Julian calendar, later
    ones with the Gregorian calendar. The day keeps the fractional part of the
    input (time of day since midnight).

    Parameters:
        jd: Julian Day (>= 0).

    Returns:
        (year, month, day), or ``INVALID_DATE`` (0, 0, 0) for a negative JD.
    """
    if jd < 0:
        return INVALID_DATE

    jd += 0.5
    z = int(jd)
    f = jd - z

    if z < JD_GREGORIAN_CUTOVER:
        a = z
    else:
        alpha = int((z - 1867216.25) / 36524.25)
        a = z + 1 + alpha - int(alpha / 4)

    b = a + 1524
    c = int((b - 122.1) / 365.25)
    d = int(365.25 * c)
    e = int((b - d) / 30.6001)

    day = b - d - int(30.6001 * e) + f
    month = e - 1 if e < 14 else e - 13
    year = c - 4716 if month > 2 else c - 4715
    return (year, month, day)


def gauss_easter(year: int) -> tuple[int, int]:
    """Return Western Easter (month, day) by Gauss's algorithm.

    Valid for 1582 <= year <= 2499; returns ``INVALID_EASTER`` (0, 0) otherwise.
    """
    if year < EASTER_MIN_YEAR or year > GAUSS_EASTER_MAX_YEAR:
        return INVALID_EASTER
    for last_year, m, n in _GAUSS_CENTURIES:
        if year <= last_year:
            break

    a = year % 19
    b = year % 4
    c = year % 7
    d = (19 * a + m) % 30
    e = (2 * b + 4 * c + 6 * d + n) % 7

    day = 22 + d + e
    if day <= 31:
        return (3, day)
    day = d + e - 9
    if day == 26:
        day = 19
    elif day == 25 and d == 28 and e == 6 and (11 * m + 11) % 30 < 19:
        day = 18
    return (4, day)


def knuth_easter(year: int) -> tuple[int, int]:
    """Return Western Easter (month, day) by Knuth's algorithm (TAOCP vol. 1).

    Valid for year >= 1582; returns ``INVALID_EASTER`` (0, 0) otherwise.
    """
    if year < EASTER_MIN_YEAR:
        return INVALID_EASTER

    golden = year % 19 + 1
    century = year // 100 + 1
    x = 3 * century // 4 - 12
    z = (8 * century + 5) // 25 - 5
    sunday = 5 * year // 4 - x - 10
    epact = (11 * golden + 20 + z - x) % 30
    if (epact == 25 and golden > 11) or epact == 24:
        epact += 1
    n = 44 - epact
    if n < 21:
        n += 30
    n = n + 7 - (sunday + n) % 7
    if n > 31:
        return (4, n - 31)
    return (3, n)


def day_number(year: int, month: int, day: int, ut: float = 0.0) -> float:
    """Return the ephemeris day number (days since 2000-01-00 00:00) of a date.

    Uses truncating integer divisions; valid for Gregorian dates. UT and TDT
    are not distinguished.

    Parameters:
        year, month, day: Gregorian calendar date.
        ut: Hours since midnight.

    Returns:
        Fractional day number; 2000-01-01 00:00 is day 1.
    """
    d1 = 367 * year
    d2 = int(7 * (year + int((month + 9) / 12)) / 4)
    d3 = 3 * int((int((year + int((month - 9) / 7)) / 100) + 1) / 4)
    d4 = int(275 * month / 9)
    return d1 - d2 - d3 + d4 + day - DAY_NUMBER_OFFSET + ut / 24


def day_number_from_jd(jd: float) -> float:
    """Return the ephemeris day number for a Julian Day."""
    return jd - JD_DAY_ZERO


def day_number_from_datetime(when: datetime) -> float:
    """Return the ephemeris day number for a naive or UTC datetime."""
    fraction = (
        when.hour / 24
        + when.minute / MINUTES_PER_DAY
        + (when.second + when.microsecond / 1e6) / SECONDS_PER_DAY
    )
    return day_number_from_jd(julian_day(when.year, when.month, when.day + fraction))

