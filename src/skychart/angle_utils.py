"""Angle parsing and formatting for RA (hours) and Dec (degrees) labels."""

from __future__ import annotations

import re

from skychart.constants import (
    DEG_SUP,
    HANG_SUP,
    MANG_SUP,
    MIN_SUP,
    SANG_SUP,
    SEC_SUP,
)


def parse_angle(string: str) -> float | None:
    """Parse an angle given as hours/degrees, minutes and seconds.

    Accepts three numbers (h/deg, m, s), two (h/deg, m), or one (h/deg),
    separated by blanks or colons. Minutes and seconds must be non-negative. A
    leading minus makes the whole angle negative (so "-0 30" is -0.5).

    Parameters:
        string: Text such as "12 30 45", "-5:30" or "18.25".

    Returns:
        Angle in the unit of the first number, or None on parse failure.
    """
    s = string.strip()
    if not s:
        return None
    parts = [p for p in re.split(r'[\s:]+', s) if p]
    if not 1 <= len(parts) <= 3:
        return None
    try:
        values = [float(p) for p in parts]
    except ValueError:
        return None
    if any(v < 0 for v in values[1:]):
        return None
    minutes, seconds = (values[1:] + [0.0, 0.0])[:2]
    angle = hms_to_hours(abs(values[0]), minutes, seconds)
    if s.startswith('-'):
        angle = -angle
    return angle


def hms_to_hours(hours: float, minutes: float, seconds: float) -> float:
    """Return decimal hours (or degrees) from sexagesimal parts."""
    return (seconds / 60 + minutes) / 60 + hours


def hours_to_hms(hours: float) -> tuple[int, int, float]:
    """Split non-negative decimal hours (or degrees) into (whole, minutes, seconds)."""
    whole = int(hours)
    minutes_f = (hours - whole) * 60
    minutes = int(minutes_f)
    return (whole, minutes, (minutes_f - minutes) * 60)


def format_ra(hours: float) -> str:
    """Format RA hours for a chart label, e.g. '5ʰ 55ᵐ 10ˢ'."""
    h, m, s = hours_to_hms(hours)
    return f'{h}{HANG_SUP} {m}{MANG_SUP} {int(s)}{SANG_SUP}'


def format_dec(degrees: float) -> str:
    """Format Dec degrees for a chart label, e.g. '-8° 12\\' 5"'."""
    sign = '-' if degrees < 0 else ''
    d, m, s = hours_to_hms(abs(degrees))
    return f'{sign}{d}{DEG_SUP} {m}{MIN_SUP} {int(s)}{SEC_SUP}'


def dms_string(value: float, separator: str = 'hms', ndecimal: int = 1) -> str:
    """Format an angle as fixed-width sexagesimal text for tables.

    Parameters:
        value: Angle in hours or degrees.
        separator: Three characters placed after each field (e.g. 'hms', 'dms').
        ndecimal: Decimal places for the seconds field.

    Returns:
        Text such as ' 18h 45m 12.3s' or '-23d 01m 30.0s'.
    """
    if len(separator) < 3:
        sep1 = sep2 = sep3 = ' '
    else:
        sep1, sep2, sep3 = separator[0], separator[1], separator[2]
    negative = value < 0
    scale = 10**ndecimal
    ticks = round(abs(value) * 3600.0 * scale)
    whole_secs, frac = divmod(ticks, scale)
    mins, secs = divmod(whole_secs, 60)
    degs, mins = divmod(mins, 60)
    sign = '-' if negative else ' '
    seconds = f'{secs:02d}.{frac:0{ndecimal}d}' if ndecimal > 0 else f'{secs:02d}'
    return f'{sign}{degs:02d}{sep1} {mins:02d}{sep2} {seconds}{sep3}'
